"""
Projects validated timeline data through named templates into page targets.

Each render call is isolated: a failure is logged, the target (when it
exists) gets an inline error placeholder, and the call returns False.
Era-level helpers return the AND of their individual calls.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from markupsafe import escape

from .logging_setup import get_logger
from .page import Page, Slot, Target
from .template_engine import TemplateEngine, TemplateName
from .views import (
    digital_divide_view,
    find_event,
    five_g_view,
    platform_views,
    service_views,
    startup_views,
)

log = get_logger(__name__)

LOADING_PLACEHOLDER = '<div class="loading-placeholder">Loading...</div>'


def error_placeholder(template_name: Any, message: str) -> str:
    return (
        '<div class="render-error">'
        "<h4>⚠️ Content Loading Error</h4>"
        f"<p>Unable to load {escape(str(getattr(template_name, 'value', template_name)))} content.</p>"
        f"<small>Error: {escape(message)}</small>"
        "</div>"
    )


def _slice(key: str, value: Any) -> Optional[Dict[str, Any]]:
    return None if value is None else {key: value}


class TemplateRenderer:
    def __init__(self, engine: TemplateEngine, page: Page) -> None:
        self.engine = engine
        self.page = page

    def render(self, template_name: Any, data: Optional[Dict[str, Any]], target: Any) -> bool:
        name = getattr(template_name, "value", template_name)
        where = getattr(target, "value", target)
        slot = self.page.resolve(target)

        template = self.engine.get(template_name)
        if template is None:
            return self._fail(name, slot, where, f"Template not found: {name}")
        if not data:
            return self._fail(name, slot, where, f"No data provided for template: {name}")
        if slot is None:
            return self._fail(name, None, where, f"Target element not found: {where}")

        try:
            slot.html = template.render(**data)
        except Exception as e:
            return self._fail(name, slot, where, str(e) or e.__class__.__name__)

        log.info("rendered", template=name, target=where)
        return True

    def _fail(self, name: str, slot: Optional[Slot], where: Any, message: str) -> bool:
        log.error("render_failed", template=name, target=where, error=message)
        if slot is not None:
            slot.html = error_placeholder(name, message)
        return False

    def _render_event(self, events: Any, target: Target, *keywords: str) -> Optional[bool]:
        # No matching event means the slot is left alone.
        event = find_event(events, *keywords)
        if event is None:
            return None
        return self.render(TemplateName.HISTORICAL_EVENTS, {"events": [event]}, target)

    # ---------------------------
    # Sections
    # ---------------------------
    def render_hero_stats(self, hero_stats: Any) -> bool:
        return self.render(TemplateName.HERO_STATS, _slice("heroStats", hero_stats), Target.HERO_STATS)

    def render_foundation_era(self, era: Dict[str, Any]) -> bool:
        events = era.get("events")
        results: List[Optional[bool]] = [
            self._render_event(events, Target.PTCL_PRIVATIZATION, "ptcl privatization"),
            self.render(TemplateName.HISTORICAL_EVENTS, _slice("events", events), Target.FOUNDATION_MILESTONES),
            self.render(TemplateName.STATISTICS, _slice("yearlyStats", era.get("yearlyStats")), Target.FOUNDATION_STATS),
            self.render(TemplateName.HISTORICAL_EVENTS, _slice("events", events), Target.FOUNDATION_TIMELINE),
        ]
        return all(r for r in results if r is not None)

    def render_mobile_era(self, era: Dict[str, Any]) -> bool:
        events = era.get("events")
        results: List[Optional[bool]] = [
            self._render_event(events, Target.MOBILE_3G4G, "3g/4g", "spectrum auction"),
            self.render(
                TemplateName.SOCIAL_MEDIA,
                _slice("platforms", platform_views(era.get("socialMediaGrowth"))),
                Target.SOCIAL_MEDIA_GROWTH,
            ),
            self._render_event(events, Target.DIGITAL_PAKISTAN_POLICY, "digital pakistan policy"),
        ]
        return all(r for r in results if r is not None)

    def render_fintech_era(self, era: Dict[str, Any]) -> bool:
        results: List[Optional[bool]] = [
            self._render_event(era.get("events"), Target.RAAST_REVOLUTION, "raast"),
            self.render(
                TemplateName.COMPANIES,
                _slice("companies", service_views(era.get("mobileBanking"))),
                Target.MOBILE_BANKING,
            ),
            self.render(
                TemplateName.COMPANIES,
                _slice("companies", startup_views(era.get("investmentBoom"))),
                Target.INVESTMENT_BOOM,
            ),
        ]
        return all(r for r in results if r is not None)

    def render_sidebar_content(self, all_data: Dict[str, Any]) -> bool:
        results: List[Optional[bool]] = []

        mobile = all_data.get("mobileEra")
        if isinstance(mobile, dict):
            results.append(self._render_event(mobile.get("events"), Target.COVID_IMPACT, "covid"))

        five_g = five_g_view(all_data.get("fiveGFuture"))
        if five_g is not None:
            results.append(
                self.render(TemplateName.INFRASTRUCTURE, {"infrastructure": five_g}, Target.FIVE_G_FUTURE)
            )

        divide = digital_divide_view(all_data.get("digitalDivides"))
        if divide is not None:
            results.append(
                self.render(TemplateName.INFRASTRUCTURE, {"infrastructure": divide}, Target.DIGITAL_DIVIDE)
            )

        return all(r for r in results if r is not None)

    def clear_all_content(self) -> None:
        for target in Target:
            slot = self.page.resolve(target)
            if slot is not None:
                slot.html = LOADING_PLACEHOLDER
