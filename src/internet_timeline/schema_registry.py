"""
Field requirements for every entity kind found in the timeline documents.

Types use the JSON vocabulary (string, number, boolean, array, object, null).
A field may accept a tuple of types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple, Union

FieldType = Union[str, Tuple[str, ...]]


class EntityKind(str, Enum):
    HERO_STATS = "heroStats"
    HISTORICAL_EVENTS = "historicalEvents"
    YEARLY_STATS = "yearlyStats"
    SOCIAL_MEDIA_PLATFORMS = "socialMediaPlatforms"
    COMPANIES = "companies"
    POLICIES = "policies"
    INFRASTRUCTURE = "infrastructure"


@dataclass(frozen=True)
class EntitySchema:
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()
    types: Dict[str, FieldType] = field(default_factory=dict)


_SCHEMAS: Dict[EntityKind, EntitySchema] = {
    EntityKind.HERO_STATS: EntitySchema(
        required=("icon", "title", "value", "description"),
        types={
            "icon": "string",
            "title": "string",
            "value": "string",
            "description": "string",
        },
    ),
    EntityKind.HISTORICAL_EVENTS: EntitySchema(
        required=("date", "title", "description"),
        optional=("impact",),
        types={
            "date": "string",
            "title": "string",
            "description": "string",
            "impact": "string",
        },
    ),
    EntityKind.YEARLY_STATS: EntitySchema(
        required=("year", "users", "penetration"),
        types={
            "year": "string",
            "users": "string",
            "penetration": "string",
        },
    ),
    EntityKind.SOCIAL_MEDIA_PLATFORMS: EntitySchema(
        required=("platform", "users"),
        optional=("penetration", "ranking", "note", "status"),
        types={
            "platform": "string",
            "users": "string",
            "penetration": "string",
            "ranking": "string",
            "note": "string",
            "status": "string",
        },
    ),
    EntityKind.COMPANIES: EntitySchema(
        required=("name", "marketShare", "subscribers"),
        optional=("founded", "keyMilestone"),
        types={
            "name": "string",
            "marketShare": ("string", "number"),
            "subscribers": "string",
            "founded": "string",
            "keyMilestone": "string",
        },
    ),
    EntityKind.POLICIES: EntitySchema(
        required=("title", "year", "target", "achievement"),
        optional=("description", "achievementStatus"),
        types={
            "title": "string",
            "year": ("string", "number"),
            "target": "string",
            "achievement": "string",
            "description": "string",
            "achievementStatus": "string",
        },
    ),
    EntityKind.INFRASTRUCTURE: EntitySchema(
        required=("name", "icon", "specifications"),
        types={
            "name": "string",
            "icon": "string",
            "specifications": "array",
        },
    ),
}


def get_schema(kind: EntityKind) -> EntitySchema:
    return _SCHEMAS[kind]


def registered_kinds() -> Tuple[EntityKind, ...]:
    return tuple(_SCHEMAS)
