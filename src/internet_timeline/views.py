"""
Derived views: pick events out of era data and reshape loosely structured
records into the uniform shapes the templates expect.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import CompanyView, InfrastructureView, PlatformView, Specification


SOCIAL_MEDIA_ICONS = {
    "Facebook": "📘",
    "YouTube": "📹",
    "WhatsApp": "💬",
    "TikTok": "🎵",
    "Twitter": "🐦",
    "Instagram": "📷",
}
DEFAULT_SOCIAL_ICON = "📱"


def social_media_icon(platform: Any) -> str:
    return SOCIAL_MEDIA_ICONS.get(str(platform), DEFAULT_SOCIAL_ICON)


def find_event(events: Any, *keywords: str) -> Optional[Dict[str, Any]]:
    """
    First event whose title contains any of `keywords` (case-insensitive).
    """
    if not isinstance(events, list):
        return None
    needles = [k.lower() for k in keywords]
    for event in events:
        if not isinstance(event, dict):
            continue
        title = str(event.get("title") or "").lower()
        if any(n in title for n in needles):
            return event
    return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _first(record: Mapping[str, Any], *names: str) -> Any:
    # Falsy values fall through to the next field, like `a || b`.
    for name in names:
        value = record.get(name)
        if value:
            return value
    return None


def _records(items: Any) -> Optional[List[Mapping[str, Any]]]:
    if not isinstance(items, list):
        return None
    return [i for i in items if isinstance(i, dict)]


# ---------------------------
# Per-record reshaping
# ---------------------------
def platform_view(record: Mapping[str, Any]) -> PlatformView:
    """
    users -> peakUsers, penetration -> ranking, note -> status.
    """
    return PlatformView(
        icon=social_media_icon(record.get("platform")),
        name=_text(record.get("platform")) or "",
        users=_text(_first(record, "users", "peakUsers")),
        penetration=_text(_first(record, "penetration", "ranking")),
        note=_text(_first(record, "note", "status")),
    )


def service_view(record: Mapping[str, Any]) -> CompanyView:
    # Mobile banking services: market share does not apply.
    return CompanyView(
        name=_text(record.get("service")) or "",
        marketShare="",
        subscribers=_text(record.get("users") or "Market leader"),
        founded=_text(record.get("parent")),
        keyMilestone=_text(record.get("description")),
    )


def startup_view(record: Mapping[str, Any]) -> CompanyView:
    return CompanyView(
        name=_text(record.get("company")) or "",
        marketShare="",
        subscribers=_text(record.get("funding")),
        founded=_text(record.get("type")),
        keyMilestone=_text(record.get("note") or "Fintech startup"),
    )


def platform_views(items: Any) -> Optional[List[Dict[str, Any]]]:
    records = _records(items)
    return None if records is None else [platform_view(r).model_dump() for r in records]


def service_views(items: Any) -> Optional[List[Dict[str, Any]]]:
    records = _records(items)
    return None if records is None else [service_view(r).model_dump() for r in records]


def startup_views(items: Any) -> Optional[List[Dict[str, Any]]]:
    records = _records(items)
    return None if records is None else [startup_view(r).model_dump() for r in records]


# ---------------------------
# Synthesized infrastructure cards
# ---------------------------
def _card(name: str, icon: str, specs: Iterable[tuple]) -> InfrastructureView:
    return InfrastructureView(
        name=name,
        icon=icon,
        specifications=[Specification(label=label, value=_text(value)) for label, value in specs],
    )


def five_g_view(future: Any) -> Optional[List[Dict[str, Any]]]:
    """
    Infrastructure list for the 5G slot.

    A list is taken to already be in infrastructure shape; a mapping of
    loose attributes is folded into a single card.
    """
    if isinstance(future, list):
        return _records(future)
    if not isinstance(future, dict) or not future:
        return None
    card = _card(
        "5G Commercial Launch",
        "🚀",
        [
            ("Launch Timeline", future.get("launchTimeline")),
            ("Test Speeds", future.get("testSpeeds")),
            ("Regional First", future.get("regionalFirst")),
        ],
    )
    return [card.model_dump()]


def digital_divide_view(divides: Any) -> Optional[List[Dict[str, Any]]]:
    if not isinstance(divides, dict) or not divides:
        return None

    gender = divides.get("genderGap")
    gender = gender if isinstance(gender, dict) else {}
    geo = divides.get("geographicGap")
    geo = geo if isinstance(geo, dict) else {}

    def pair(a: Any, b: Any) -> Optional[str]:
        if a is None and b is None:
            return None
        return f"{a} vs {b}"

    pct = gender.get("percentage")
    card = _card(
        "Digital Divide Challenges",
        "⚖️",
        [
            ("Gender Gap", f"{pct} (World's highest)" if pct is not None else None),
            ("Men vs Women", pair(gender.get("menAccess"), gender.get("womenAccess"))),
            ("Urban vs Rural", pair(geo.get("urbanAccess"), geo.get("ruralAccess"))),
        ],
    )
    return [card.model_dump()]
