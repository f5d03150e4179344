"""
Named template compilation on top of Jinja2.

Templates are compiled once at startup. The engine is "ready" once the subset
of templates needed for first paint has compiled.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    Template,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from .logging_setup import get_logger

log = get_logger(__name__)


class TemplateName(str, Enum):
    HERO_STATS = "heroStats"
    HISTORICAL_EVENTS = "historicalEvents"
    STATISTICS = "statistics"
    COMPANIES = "companies"
    SOCIAL_MEDIA = "socialMedia"
    POLICIES = "policies"
    INFRASTRUCTURE = "infrastructure"


TEMPLATE_SOURCES: Dict[TemplateName, str] = {
    TemplateName.HERO_STATS: "hero-stats-template",
    TemplateName.HISTORICAL_EVENTS: "historical-events-template",
    TemplateName.STATISTICS: "statistics-template",
    TemplateName.COMPANIES: "company-template",
    TemplateName.SOCIAL_MEDIA: "social-media-template",
    TemplateName.POLICIES: "policy-template",
    TemplateName.INFRASTRUCTURE: "infrastructure-template",
}

REQUIRED_TEMPLATES = (
    TemplateName.HERO_STATS,
    TemplateName.HISTORICAL_EVENTS,
    TemplateName.STATISTICS,
    TemplateName.COMPANIES,
    TemplateName.SOCIAL_MEDIA,
)

PAGE_LAYOUT = "page-layout"


def template_name(name: Any) -> Optional[TemplateName]:
    try:
        return TemplateName(name)
    except ValueError:
        return None


def default_loader(override_dir: Optional[Path] = None) -> BaseLoader:
    package = PackageLoader("internet_timeline", "templates")
    if override_dir is None:
        return package
    return ChoiceLoader([FileSystemLoader(str(override_dir)), package])


class TemplateEngine:
    def __init__(self, loader: Optional[BaseLoader] = None) -> None:
        self.env = Environment(
            loader=loader or default_loader(),
            autoescape=select_autoescape(default=True, default_for_string=True),
        )
        self._compiled: Dict[TemplateName, Template] = {}

    def compile(self, name: Any, source_id: str) -> bool:
        """
        Compile the template stored under `source_id` and register it as `name`.

        Returns False, after logging, when the source is missing, empty or
        does not parse.
        """
        key = template_name(name)
        if key is None:
            log.error("unknown_template_name", name=str(name))
            return False

        filename = f"{source_id}.html"
        try:
            source, _, _ = self.env.loader.get_source(self.env, filename)
        except TemplateNotFound:
            log.warning("template_source_not_found", source_id=source_id)
            return False

        if not source.strip():
            log.warning("template_source_empty", source_id=source_id)
            return False

        try:
            self._compiled[key] = self.env.get_template(filename)
        except TemplateError as e:
            log.error("template_compile_failed", name=key.value, error=str(e))
            return False

        log.info("template_compiled", name=key.value)
        return True

    def compile_all(self) -> Dict[TemplateName, bool]:
        results = {name: self.compile(name, source_id) for name, source_id in TEMPLATE_SOURCES.items()}
        log.info("templates_compiled", compiled=sum(results.values()), total=len(results))
        return results

    def get(self, name: Any) -> Optional[Template]:
        key = template_name(name)
        return self._compiled.get(key) if key is not None else None

    def is_ready(self) -> bool:
        return all(name in self._compiled for name in REQUIRED_TEMPLATES)

    def render_page(self, context: Dict[str, Any]) -> str:
        return self.env.get_template(f"{PAGE_LAYOUT}.html").render(**context)
