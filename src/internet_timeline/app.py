"""
Pipeline orchestration: load -> validate -> await templates -> render.

A pass is atomic from the caller's point of view: it either reaches READY or
ends in FAILED with one user-facing message. retry() replays the whole pass.
"""

from __future__ import annotations

import asyncio
import math
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from .config import AppConfig
from .errors import CriticalDataError, RenderPreconditionError, TemplateTimeoutError
from .fetcher import build_client
from .loader import DataLoader, SleepFn, document_key
from .logging_setup import get_logger
from .models import ValidationResult
from .page import Page
from .renderer import TemplateRenderer
from .template_engine import TemplateEngine, default_loader
from .validator import DocumentKind, JSONValidator

log = get_logger(__name__)


class AppState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    VALIDATING = "validating"
    AWAITING_TEMPLATES = "awaiting-templates"
    RENDERING = "rendering"
    READY = "ready"
    FAILED = "failed"


USER_MESSAGE_PREFIX = "An error occurred while loading the Pakistan Internet Timeline. "

USER_MESSAGES = {
    "mandatory-load": (
        "Unable to load timeline data. Please check your internet connection "
        "and ensure the data files are available."
    ),
    "template-timeout": "There was a problem with the page templates. Please refresh the page to try again.",
    "other": "Please try refreshing the page or contact support if the problem persists.",
}


def error_category(error: BaseException) -> str:
    if isinstance(error, CriticalDataError):
        return "mandatory-load"
    if isinstance(error, TemplateTimeoutError):
        return "template-timeout"
    return "other"


def user_message(error: BaseException) -> str:
    return USER_MESSAGE_PREFIX + USER_MESSAGES[error_category(error)]


class TimelineApp:
    def __init__(
        self,
        loader: DataLoader,
        validator: JSONValidator,
        engine: TemplateEngine,
        renderer: TemplateRenderer,
        *,
        mandatory_file: str,
        optional_files: Iterable[str],
        template_timeout: float = 10.0,
        template_poll_interval: float = 0.1,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.loader = loader
        self.validator = validator
        self.engine = engine
        self.renderer = renderer
        self.mandatory_file = mandatory_file
        self.optional_files = list(optional_files)
        self.template_timeout = template_timeout
        self.template_poll_interval = template_poll_interval
        self._sleep = sleep

        self.state = AppState.IDLE
        self.data: Dict[str, Any] = {}
        self.validation: Dict[str, ValidationResult] = {}
        self.render_results: Dict[str, bool] = {}
        self.error_message: Optional[str] = None
        self.last_error: Optional[BaseException] = None

    def _transition(self, state: AppState) -> None:
        log.info("state_changed", previous=self.state.value, state=state.value)
        self.state = state

    async def start(self) -> bool:
        if self.state is not AppState.IDLE:
            raise RuntimeError(f"start() requires state idle, got {self.state.value}")
        return await self._run()

    async def retry(self) -> bool:
        if self.state is not AppState.FAILED:
            raise RuntimeError(f"retry() requires state failed, got {self.state.value}")
        log.info("retrying_pass")
        return await self._run()

    async def _run(self) -> bool:
        self.data = {}
        self.validation = {}
        self.render_results = {}
        self.error_message = None
        self.last_error = None

        try:
            self._transition(AppState.LOADING)
            self.data = await self.loader.load_all(
                self.mandatory_file,
                self.optional_files,
                on_mandatory=self._validate_mandatory,
            )

            self._transition(AppState.VALIDATING)
            for key, document in self.data.items():
                if key not in self.validation:
                    self._validate_document(key, document)

            self._transition(AppState.AWAITING_TEMPLATES)
            await self.wait_for_templates()

            self._transition(AppState.RENDERING)
            self.render_results = self.render_all()
        except Exception as e:
            self._fail(e)
            return False

        self._transition(AppState.READY)
        return True

    def _fail(self, error: BaseException) -> None:
        log.error("pass_failed", state=self.state.value, category=error_category(error), error=str(error))
        self.last_error = error
        self.error_message = user_message(error)
        self._transition(AppState.FAILED)

    def _validate_mandatory(self, key: str, document: Any) -> None:
        # The primary document is always a historical timeline, whatever its file name.
        self._validate_document(key, document, DocumentKind.HISTORICAL_EVENTS)

    def _validate_document(self, key: str, document: Any, kind: Optional[DocumentKind] = None) -> None:
        if kind is None:
            try:
                kind = DocumentKind(key)
            except ValueError:
                log.info("validation_skipped", key=key)
                return

        result = self.validator.validate(document, kind)
        self.validation[key] = result
        if result.success:
            log.info("document_valid", key=key)
        else:
            # Advisory only: the data is used regardless.
            log.warning("document_validation_warnings", key=key, errors=result.errors)

    async def wait_for_templates(self) -> None:
        # Count whole ticks; summed float intervals drift past the budget.
        max_ticks = math.ceil(round(self.template_timeout / self.template_poll_interval, 6))
        ticks = 0
        while not self.engine.is_ready() and ticks < max_ticks:
            await self._sleep(self.template_poll_interval)
            ticks += 1

        if not self.engine.is_ready():
            raise TemplateTimeoutError(
                f"Templates failed to compile within timeout period ({self.template_timeout}s)"
            )

    def render_all(self) -> Dict[str, bool]:
        historical = self.data.get(document_key(self.mandatory_file))
        if not historical:
            raise RenderPreconditionError("No historical data available for rendering")
        if not isinstance(historical, dict):
            raise RenderPreconditionError("Historical data must be an object")

        results: Dict[str, bool] = {}
        if historical.get("heroStats") is not None:
            results["heroStats"] = self.renderer.render_hero_stats(historical["heroStats"])

        sections = (
            ("foundationEra", self.renderer.render_foundation_era),
            ("mobileEra", self.renderer.render_mobile_era),
            ("fintechEra", self.renderer.render_fintech_era),
        )
        for name, render in sections:
            era = historical.get(name)
            if isinstance(era, dict):
                results[name] = render(era)

        results["sidebar"] = self.renderer.render_sidebar_content(historical)

        incomplete: List[str] = [name for name, ok in results.items() if not ok]
        if incomplete:
            log.warning("render_incomplete", sections=incomplete)
        else:
            log.info("render_complete", sections=list(results))
        return results

    @property
    def is_loading(self) -> bool:
        return self.state in (
            AppState.LOADING,
            AppState.VALIDATING,
            AppState.AWAITING_TEMPLATES,
            AppState.RENDERING,
        )

    def status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "is_loading": self.is_loading,
            "has_errors": self.state is AppState.FAILED,
            "data_loaded": bool(self.data),
            "templates_ready": self.engine.is_ready(),
            "error_message": self.error_message,
        }


def create_app(
    config: AppConfig,
    client: httpx.AsyncClient,
    *,
    page: Optional[Page] = None,
    engine: Optional[TemplateEngine] = None,
    sleep: SleepFn = asyncio.sleep,
) -> TimelineApp:
    """
    Wire a TimelineApp from config. Templates are compiled here, once.
    """
    if engine is None:
        engine = TemplateEngine(default_loader(config.templates_dir))
        engine.compile_all()

    loader = DataLoader(
        client,
        retry_attempts=config.retry_attempts,
        retry_delay=config.retry_delay,
        sleep=sleep,
    )
    return TimelineApp(
        loader,
        JSONValidator(),
        engine,
        TemplateRenderer(engine, page if page is not None else Page()),
        mandatory_file=config.mandatory_file,
        optional_files=config.optional_files,
        template_timeout=config.template_timeout,
        template_poll_interval=config.template_poll_interval,
        sleep=sleep,
    )


async def run_pipeline(
    config: AppConfig,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    max_passes: int = 1,
) -> Tuple[TimelineApp, str]:
    """
    Run the pipeline, replaying failed passes up to `max_passes` times.

    Returns the app together with the assembled page, which is an empty
    string when the last pass failed.
    """
    async with build_client(config.base_url, transport=transport) as client:
        app = create_app(config, client)
        ok = await app.start()
        passes = 1
        while not ok and passes < max_passes:
            passes += 1
            ok = await app.retry()

    if not ok:
        return app, ""

    html = app.renderer.page.to_html(app.engine, status=app.status())
    return app, html
