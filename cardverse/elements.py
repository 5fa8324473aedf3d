"""Element relationships. Informational: the battle core never applies them."""

from __future__ import annotations

from dataclasses import dataclass

from cardverse.models import Element


@dataclass(frozen=True)
class ElementInfo:
    element: Element
    strengths: tuple[Element, ...]
    weaknesses: tuple[Element, ...]
    description: str


ELEMENTS: dict[Element, ElementInfo] = {
    info.element: info
    for info in (
        ElementInfo(
            Element.AURORA, (Element.VOID, Element.BLOOD), (Element.CRYSTAL, Element.AETHER),
            "Rare, mystical abilities with unpredictable effects.",
        ),
        ElementInfo(
            Element.VOID, (Element.FLORA, Element.AETHER), (Element.AURORA, Element.CRYSTAL),
            "Draining resources, weakening opponents and shadow manipulation.",
        ),
        ElementInfo(
            Element.CRYSTAL, (Element.VOID, Element.AURORA), (Element.STORM, Element.FLORA),
            "Defense, reflection and enhancing other cards.",
        ),
        ElementInfo(
            Element.BLOOD, (Element.FLORA, Element.AETHER), (Element.AURORA, Element.STORM),
            "Life force spent for power; sacrifice mechanics.",
        ),
        ElementInfo(
            Element.STORM, (Element.CRYSTAL, Element.BLOOD), (Element.VOID, Element.AETHER),
            "Speed, chain damage and burst effects.",
        ),
        ElementInfo(
            Element.FLORA, (Element.CRYSTAL, Element.STORM), (Element.BLOOD, Element.VOID),
            "Healing, regeneration and summoning natural allies.",
        ),
        ElementInfo(
            Element.AETHER, (Element.STORM, Element.AURORA), (Element.BLOOD, Element.FLORA),
            "Arcane energy, powerful spells and transformations.",
        ),
    )
}


def get_element_by_name(name: str) -> Element | None:
    normalized = name.strip().lower()
    for element in Element:
        if element.value == normalized:
            return element
    return None


def matchup(attacker: Element, defender: Element) -> int:
    """+1 if ``attacker`` is strong against ``defender``, -1 if weak, else 0."""
    info = ELEMENTS[attacker]
    if defender in info.strengths:
        return 1
    if defender in info.weaknesses:
        return -1
    return 0
