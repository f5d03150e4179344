from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

if TYPE_CHECKING:
    from .template_engine import TemplateEngine


class Target(str, Enum):
    HERO_STATS = "heroStats"
    PTCL_PRIVATIZATION = "ptclPrivatization"
    FOUNDATION_MILESTONES = "foundationMilestones"
    FOUNDATION_STATS = "foundationStats"
    FOUNDATION_TIMELINE = "foundationTimeline"
    MOBILE_3G4G = "mobile3G4G"
    SOCIAL_MEDIA_GROWTH = "socialMediaGrowth"
    DIGITAL_PAKISTAN_POLICY = "digitalPakistanPolicy"
    RAAST_REVOLUTION = "raastRevolution"
    MOBILE_BANKING = "mobileBanking"
    INVESTMENT_BOOM = "investmentBoom"
    COVID_IMPACT = "covidImpact"
    FIVE_G_FUTURE = "fiveGFuture"
    DIGITAL_DIVIDE = "digitalDivide"


@dataclass
class Slot:
    id: str
    html: str = ""


def _slot_id(target: Any) -> str:
    if isinstance(target, Target):
        return target.value
    return str(target).lstrip("#")


class Page:
    """
    The set of named insertion points renderers write into.

    A page may be built with only some of the targets; resolving an unknown
    target returns None.
    """

    def __init__(self, targets: Optional[Iterable[Any]] = None) -> None:
        ids = [_slot_id(t) for t in (targets if targets is not None else Target)]
        self._slots: Dict[str, Slot] = {i: Slot(i) for i in ids}

    def resolve(self, target: Any) -> Optional[Slot]:
        if target is None:
            return None
        return self._slots.get(_slot_id(target))

    def html(self, target: Any) -> Optional[str]:
        slot = self.resolve(target)
        return slot.html if slot is not None else None

    @property
    def slots(self) -> List[Slot]:
        return list(self._slots.values())

    def as_context(self) -> Dict[str, str]:
        return {s.id: s.html for s in self._slots.values()}

    def to_html(self, engine: TemplateEngine, **context: Any) -> str:
        """Assemble the full document by rendering every slot into the page layout."""
        return engine.render_page({"slots": self.as_context(), **context})
