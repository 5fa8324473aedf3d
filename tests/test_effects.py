"""Tests for the effect processor."""

import unittest

from cardverse.effects import (
    EFFECT_HANDLERS, affects_stat, apply_effect, apply_single_effect,
    death_effects, process_end_turn_effects, process_start_turn_effects,
)
from cardverse.models import (
    ActiveEffect, Card, CardInstance, CardStats, CardType, CurrentStats,
    Effect, EffectCategory, EffectType, Element, Rarity, TargetType,
)


def _effect(**kwargs) -> Effect:
    defaults = dict(
        id="fx", name="Fx", type=EffectType.BUFF,
        category=EffectCategory.STAT_MODIFICATION, duration=0, magnitude=1,
        target=TargetType.SELF, condition="always", description="",
    )
    defaults.update(kwargs)
    return Effect(**defaults)


def _card(health=10, attack=5, effects=()) -> Card:
    return Card(
        id="c", name="Test Card", rarity=Rarity.COMMON,
        card_type=CardType.CREATURE, element=Element.AETHER,
        stats=CardStats(health=health, attack=attack, mana_cost=3),
        effects=tuple(effects),
    )


def _inst(health=10, attack=5, card_health=10, effects=()) -> CardInstance:
    return CardInstance(
        card=_card(health=card_health, attack=attack, effects=effects),
        current_stats=CurrentStats(health=health, attack=attack),
    )


class TestRegistry(unittest.TestCase):
    def test_handled_categories(self):
        expected = {
            EffectCategory.STAT_MODIFICATION, EffectCategory.DAMAGE,
            EffectCategory.HEALING, EffectCategory.CONTROL, EffectCategory.UTILITY,
        }
        self.assertEqual(set(EFFECT_HANDLERS), expected)

    def test_unhandled_category_is_silent(self):
        target = _inst()
        apply_single_effect(_effect(category=EffectCategory.SHIELD, magnitude=5), target, target)
        self.assertEqual(target.current_stats.health, 10)
        self.assertEqual(target.current_stats.attack, 5)
        self.assertEqual(target.active_effects, [])


class TestApplyEffectTargets(unittest.TestCase):
    def test_none_targets(self):
        source = _inst()
        apply_effect(_effect(category=EffectCategory.DAMAGE, magnitude=3), source, None)
        self.assertEqual(source.current_stats.health, 10)

    def test_single_target(self):
        source, target = _inst(), _inst()
        apply_effect(_effect(category=EffectCategory.DAMAGE, magnitude=3), source, target)
        self.assertEqual(target.current_stats.health, 7)
        self.assertEqual(source.current_stats.health, 10)

    def test_list_of_targets(self):
        source = _inst()
        targets = [_inst(), _inst(health=4)]
        apply_effect(_effect(category=EffectCategory.DAMAGE, magnitude=3), source, targets)
        self.assertEqual([t.current_stats.health for t in targets], [7, 1])

    def test_empty_list(self):
        source = _inst()
        apply_effect(_effect(category=EffectCategory.DAMAGE, magnitude=3), source, [])
        self.assertEqual(source.current_stats.health, 10)


class TestStatModification(unittest.TestCase):
    def test_buff_attack_from_description(self):
        t = _inst(attack=2)
        apply_single_effect(_effect(magnitude=3, description="Increases Attack by 3"), t, t)
        self.assertEqual(t.current_stats.attack, 5)
        self.assertEqual(t.current_stats.health, 10)

    def test_buff_health_from_description(self):
        t = _inst(health=4)
        apply_single_effect(_effect(magnitude=2, description="Increases health by 2"), t, t)
        self.assertEqual(t.current_stats.health, 6)

    def test_both_stats(self):
        t = _inst(health=4, attack=2)
        apply_single_effect(_effect(magnitude=1, description="+1 attack and +1 health"), t, t)
        self.assertEqual(t.current_stats.attack, 3)
        self.assertEqual(t.current_stats.health, 5)

    def test_non_buff_subtracts(self):
        for etype in (EffectType.DEBUFF, EffectType.PERSISTENT, EffectType.TRIGGER):
            t = _inst(attack=5)
            apply_single_effect(_effect(type=etype, magnitude=2, description="attack"), t, t)
            self.assertEqual(t.current_stats.attack, 3, etype)

    def test_attack_floored_health_not(self):
        t = _inst(health=2, attack=2)
        apply_single_effect(
            _effect(type=EffectType.DEBUFF, magnitude=5, description="-5 attack and health"),
            t, t,
        )
        self.assertEqual(t.current_stats.attack, 0)
        self.assertEqual(t.current_stats.health, -3)

    def test_explicit_stats_override_description(self):
        t = _inst(health=10, attack=2)
        fx = _effect(magnitude=3, description="A health blessing", affected_stats=("attack",))
        apply_single_effect(fx, t, t)
        self.assertEqual(t.current_stats.attack, 5)
        self.assertEqual(t.current_stats.health, 10)

    def test_affects_stat(self):
        self.assertTrue(affects_stat(_effect(description="ATTACK up"), "attack"))
        self.assertFalse(affects_stat(_effect(description="defense up"), "attack"))
        self.assertFalse(affects_stat(_effect(affected_stats=("health",), description="attack"), "attack"))


class TestDamageAndHealing(unittest.TestCase):
    def test_damage_unmitigated(self):
        t = _inst(health=5)
        apply_single_effect(_effect(category=EffectCategory.DAMAGE, magnitude=8), t, t)
        self.assertEqual(t.current_stats.health, -3)

    def test_healing_clamped_to_base(self):
        t = _inst(health=9, card_health=10)
        apply_single_effect(_effect(category=EffectCategory.HEALING, magnitude=5), t, t)
        self.assertEqual(t.current_stats.health, 10)

    def test_healing_below_cap(self):
        t = _inst(health=3, card_health=10)
        apply_single_effect(_effect(category=EffectCategory.HEALING, magnitude=5), t, t)
        self.assertEqual(t.current_stats.health, 8)


class TestControl(unittest.TestCase):
    def test_silence(self):
        t = _inst()
        t.can_attack = True
        fx = _effect(category=EffectCategory.CONTROL, type=EffectType.DEBUFF,
                     duration=0, description="Silence target")
        apply_single_effect(fx, t, t)
        self.assertEqual(len(t.active_effects), 1)
        self.assertTrue(t.active_effects[0].effect_id.startswith("silence-"))
        self.assertEqual(t.active_effects[0].turns_remaining, 1)
        self.assertEqual(t.active_effects[0].magnitude, 1)
        self.assertTrue(t.can_attack)

    def test_stun_blocks_attack(self):
        t = _inst()
        t.can_attack = True
        fx = _effect(category=EffectCategory.CONTROL, type=EffectType.DEBUFF,
                     duration=0, description="Stun an enemy")
        apply_single_effect(fx, t, t)
        self.assertFalse(t.can_attack)
        self.assertTrue(t.active_effects[0].effect_id.startswith("stun-"))

    def test_silence_and_stun_with_duration(self):
        t = _inst()
        fx = _effect(id="hush", category=EffectCategory.CONTROL, type=EffectType.DEBUFF,
                     duration=2, description="Silence and stun")
        apply_single_effect(fx, t, t)
        ids = [ae.effect_id for ae in t.active_effects]
        self.assertEqual(len(ids), 3)
        self.assertIn("hush", ids)
        self.assertTrue(all(ae.turns_remaining == 2 for ae in t.active_effects))

    def test_markers_are_unique(self):
        t = _inst()
        fx = _effect(category=EffectCategory.CONTROL, description="silence")
        apply_single_effect(fx, t, t)
        apply_single_effect(fx, t, t)
        ids = [ae.effect_id for ae in t.active_effects]
        self.assertEqual(len(set(ids)), 2)


class TestUtility(unittest.TestCase):
    def test_utility_is_noop(self):
        t = _inst()
        apply_single_effect(
            _effect(category=EffectCategory.UTILITY, magnitude=2, description="draw 2 cards, gain mana"),
            t, t,
        )
        self.assertEqual(t.current_stats.health, 10)
        self.assertEqual(t.current_stats.attack, 5)


class TestDurationBookkeeping(unittest.TestCase):
    def test_registers_active_effect(self):
        t = _inst()
        apply_single_effect(_effect(id="sb", duration=3, magnitude=2, description="attack"), t, t)
        self.assertEqual(t.active_effects, [ActiveEffect("sb", 3, 2)])

    def test_refresh_not_stack(self):
        t = _inst()
        fx = _effect(id="sb", duration=3, magnitude=2, description="attack")
        apply_single_effect(fx, t, t)
        t.active_effects[0].turns_remaining = 1
        apply_single_effect(fx, t, t)
        self.assertEqual(len(t.active_effects), 1)
        self.assertEqual(t.active_effects[0].turns_remaining, 3)

    def test_instant_and_permanent_not_registered(self):
        t = _inst()
        apply_single_effect(_effect(id="a", duration=0, description="attack"), t, t)
        apply_single_effect(_effect(id="b", duration=-1, description="attack"), t, t)
        self.assertEqual(t.active_effects, [])


class TestTurnPasses(unittest.TestCase):
    def test_countdown_one(self):
        t = _inst()
        t.active_effects = [ActiveEffect("x", 1, 1)]
        process_start_turn_effects([t])
        self.assertEqual(t.active_effects, [])

    def test_countdown_two(self):
        t = _inst()
        t.active_effects = [ActiveEffect("x", 2, 1)]
        process_start_turn_effects([t])
        self.assertEqual(t.active_effects, [ActiveEffect("x", 1, 1)])
        process_start_turn_effects([t])
        self.assertEqual(t.active_effects, [])

    def test_end_turn_does_not_tick(self):
        t = _inst()
        t.active_effects = [ActiveEffect("x", 1, 1)]
        process_end_turn_effects([t])
        self.assertEqual(t.active_effects, [ActiveEffect("x", 1, 1)])

    def test_persistent_turn_start(self):
        regen = _effect(id="regen", type=EffectType.PERSISTENT, category=EffectCategory.HEALING,
                        duration=-1, magnitude=1, condition="turn_start")
        t = _inst(health=5, card_health=10, effects=[regen])
        process_start_turn_effects([t])
        self.assertEqual(t.current_stats.health, 6)
        process_end_turn_effects([t])
        self.assertEqual(t.current_stats.health, 6)

    def test_persistent_turn_end(self):
        grow = _effect(id="grow", type=EffectType.PERSISTENT, duration=-1, magnitude=1,
                       condition="turn_end", description="attack")
        t = _inst(attack=2, effects=[grow])
        process_start_turn_effects([t])
        # persistent is not a buff, so the modifier is subtracted
        self.assertEqual(t.current_stats.attack, 2)
        process_end_turn_effects([t])
        self.assertEqual(t.current_stats.attack, 1)

    def test_non_persistent_ignored(self):
        trig = _effect(type=EffectType.TRIGGER, category=EffectCategory.DAMAGE,
                       magnitude=3, condition="turn_start")
        t = _inst(effects=[trig])
        process_start_turn_effects([t])
        self.assertEqual(t.current_stats.health, 10)

    def test_death_effects(self):
        burst = _effect(id="burst", condition="on_death")
        t = _inst(effects=[_effect(), burst])
        self.assertEqual(death_effects(t), [burst])


if __name__ == "__main__":
    unittest.main()
