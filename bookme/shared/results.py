"""Result types separating a primary outcome from its side effects"""

from typing import Any, Optional

from pydantic import BaseModel


class SideEffectResult(BaseModel):
    """Outcome of a non-critical action performed alongside a primary operation"""

    name: str
    ok: bool
    error: Optional[str] = None
    detail: Optional[dict[str, Any]] = None

    @classmethod
    def success(cls, name: str, **detail) -> "SideEffectResult":
        return cls(name=name, ok=True, detail=detail or None)

    @classmethod
    def failure(cls, name: str, error: str, **detail) -> "SideEffectResult":
        return cls(name=name, ok=False, error=error, detail=detail or None)

    @classmethod
    def skipped(cls, name: str, reason: str) -> "SideEffectResult":
        return cls(name=name, ok=True, detail={"skipped": reason})
