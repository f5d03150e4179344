from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    success: bool
    errors: List[str] = Field(default_factory=list)
    data: Optional[str] = None


class ParseResult(BaseModel):
    success: bool
    error: Optional[str] = None
    data: Any = None


class LoadResult(BaseModel):
    """
    Outcome of loading one document.
    `data` is None when the document is absent (optional file that never loaded).
    """
    identifier: str
    key: str
    data: Any = None
    error: Optional[str] = None
    attempts: int = 0

    @property
    def is_absent(self) -> bool:
        return self.error is not None


# ---------------------------
# Render view shapes
# ---------------------------
class PlatformView(BaseModel):
    icon: str
    name: str
    users: Optional[str] = None
    penetration: Optional[str] = None
    note: Optional[str] = None


class CompanyView(BaseModel):
    name: str = ""
    marketShare: str = ""
    subscribers: Optional[str] = None
    founded: Optional[str] = None
    keyMilestone: Optional[str] = None


class Specification(BaseModel):
    label: str
    value: Optional[str] = None


class InfrastructureView(BaseModel):
    name: str
    icon: str
    specifications: List[Specification] = Field(default_factory=list)
