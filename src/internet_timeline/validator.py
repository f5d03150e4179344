"""
Structural validation for timeline documents.

Validation is advisory: it never raises, it collects every problem it finds
into a ValidationResult and leaves the caller to decide what to do with it.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from .logging_setup import get_logger
from .models import ParseResult, ValidationResult
from .schema_registry import EntityKind, FieldType, get_schema

log = get_logger(__name__)


class DocumentKind(str, Enum):
    HISTORICAL_EVENTS = "historical_events"
    STATISTICS = "statistics"
    COMPANIES = "companies"
    SOCIAL_MEDIA = "social_media"
    POLICIES = "policies"
    INFRASTRUCTURE = "infrastructure"


def json_type(value: Any) -> str:
    """Name of the JSON type of a parsed value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class JSONValidator:
    def __init__(self) -> None:
        self._dispatch: Dict[DocumentKind, Callable[[Dict[str, Any], List[str]], None]] = {
            DocumentKind.HISTORICAL_EVENTS: self._validate_historical_events,
            DocumentKind.STATISTICS: self._validate_statistics,
            DocumentKind.COMPANIES: self._validate_companies,
            DocumentKind.SOCIAL_MEDIA: self._validate_social_media,
            DocumentKind.POLICIES: self._validate_policies,
            DocumentKind.INFRASTRUCTURE: self._validate_infrastructure,
        }

    def validate(self, document: Any, kind: Any) -> ValidationResult:
        """
        Validate a parsed document of the given kind.

        Every call starts from an empty error list, so repeated calls on the
        same document yield identical results.
        """
        if document is None:
            return _failed("JSON data is null or undefined")
        if not isinstance(document, dict):
            return _failed("JSON data must be an object")

        try:
            doc_kind = DocumentKind(kind)
        except ValueError:
            return _failed(f"Unknown data type: {getattr(kind, 'value', kind)}")

        errors: List[str] = []
        try:
            self._dispatch[doc_kind](document, errors)
        except Exception as e:
            return _failed(f"Validation error: {e}")

        return ValidationResult(
            success=not errors,
            errors=errors,
            data="Valid" if not errors else None,
        )

    # ---------------------------
    # Document kinds
    # ---------------------------
    def _validate_historical_events(self, data: Dict[str, Any], errors: List[str]) -> None:
        hero = data.get("heroStats")
        if not isinstance(hero, list):
            errors.append("heroStats must be an array")
        else:
            self.validate_array_items(hero, EntityKind.HERO_STATS, errors)

        for name, check in (
            ("foundationEra", self._validate_foundation_era),
            ("mobileEra", self._validate_mobile_era),
            ("fintechEra", self._validate_fintech_era),
        ):
            era = data.get(name)
            if not isinstance(era, dict):
                errors.append(f"{name} must be an object")
            else:
                check(era, errors)

    def _validate_foundation_era(self, era: Dict[str, Any], errors: List[str]) -> None:
        self._section(era, "foundationEra", "events", EntityKind.HISTORICAL_EVENTS, errors)
        self._section(era, "foundationEra", "yearlyStats", EntityKind.YEARLY_STATS, errors)

    def _validate_mobile_era(self, era: Dict[str, Any], errors: List[str]) -> None:
        self._section(era, "mobileEra", "events", EntityKind.HISTORICAL_EVENTS, errors)
        self._section(era, "mobileEra", "socialMediaGrowth", EntityKind.SOCIAL_MEDIA_PLATFORMS, errors)

    def _validate_fintech_era(self, era: Dict[str, Any], errors: List[str]) -> None:
        self._section(era, "fintechEra", "events", EntityKind.HISTORICAL_EVENTS, errors)
        # Service and startup records have their own loose shapes; only the container is checked.
        self._section(era, "fintechEra", "mobileBanking", None, errors)
        self._section(era, "fintechEra", "investmentBoom", None, errors)

    def _validate_statistics(self, data: Dict[str, Any], errors: List[str]) -> None:
        if "yearlyStats" in data:
            self._section(data, None, "yearlyStats", EntityKind.YEARLY_STATS, errors)

    def _validate_companies(self, data: Dict[str, Any], errors: List[str]) -> None:
        self._section(data, None, "companies", EntityKind.COMPANIES, errors)

    def _validate_social_media(self, data: Dict[str, Any], errors: List[str]) -> None:
        self._section(data, None, "platforms", EntityKind.SOCIAL_MEDIA_PLATFORMS, errors)

    def _validate_policies(self, data: Dict[str, Any], errors: List[str]) -> None:
        self._section(data, None, "policies", EntityKind.POLICIES, errors)

    def _validate_infrastructure(self, data: Dict[str, Any], errors: List[str]) -> None:
        self._section(data, None, "infrastructure", EntityKind.INFRASTRUCTURE, errors)

    def _section(
        self,
        parent: Mapping[str, Any],
        parent_path: Optional[str],
        name: str,
        item_kind: Optional[EntityKind],
        errors: List[str],
    ) -> None:
        path = f"{parent_path}.{name}" if parent_path else name
        value = parent.get(name)
        if not isinstance(value, list):
            errors.append(f"{path} must be an array")
            return
        if item_kind is not None:
            self.validate_array_items(value, item_kind, errors)

    # ---------------------------
    # Entities
    # ---------------------------
    def validate_array_items(self, items: Any, kind: Any, errors: List[str]) -> None:
        label = kind.value if isinstance(kind, EntityKind) else str(kind)
        if not isinstance(items, list):
            errors.append(f"{label} must be an array")
            return
        for index, item in enumerate(items):
            self.validate_item(item, kind, f"{label}[{index}]", errors)

    def validate_item(self, item: Any, kind: Any, item_path: str, errors: List[str]) -> None:
        if not isinstance(item, dict):
            errors.append(f"{item_path} must be an object")
            return

        try:
            schema = get_schema(EntityKind(kind))
        except (KeyError, ValueError):
            errors.append(f"Unknown item type: {kind}")
            return

        for name in schema.required:
            if name not in item:
                errors.append(f"{item_path} missing required field: {name}")
            elif name in schema.types:
                self.validate_field_type(item[name], schema.types[name], f"{item_path}.{name}", errors)

        # Present fields are type-checked again, required or not.
        for name, value in item.items():
            expected = schema.types.get(name)
            if expected is not None:
                self.validate_field_type(value, expected, f"{item_path}.{name}", errors)

    def validate_field_type(self, value: Any, expected: FieldType, field_path: str, errors: List[str]) -> None:
        actual = json_type(value)

        if isinstance(expected, tuple):
            if actual not in expected:
                errors.append(f"{field_path} must be one of: {', '.join(expected)}, got: {actual}")
        elif actual != expected:
            errors.append(f"{field_path} must be {expected}, got: {actual}")

        if expected == "array" and isinstance(value, list) and not value:
            log.warning("empty_array", field=field_path)


def _failed(message: str) -> ValidationResult:
    return ValidationResult(success=False, errors=[message], data=None)


def parse_and_validate(raw_text: Any) -> ParseResult:
    """
    Parse JSON text, separating syntax failures from later structural checks.
    """
    if not raw_text or not isinstance(raw_text, str):
        return ParseResult(success=False, error="JSON string is empty or not a string")

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as e:
        return ParseResult(success=False, error=f"JSON parse error: {e}")

    return ParseResult(success=True, data=parsed)


def quick_validate(data: Any, source: str = "unknown") -> bool:
    if not data:
        log.error("quick_validation_failed", source=source, reason="No data provided")
        return False
    if not isinstance(data, dict):
        log.error("quick_validation_failed", source=source, reason="Data is not an object")
        return False
    return True
