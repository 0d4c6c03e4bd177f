"""Translate termination failures into per-item outcomes."""

from __future__ import annotations

from typing import Any

import psutil

from appkiller.domain.entities import Identifier, ItemResult, TerminationOutcome
from appkiller.domain.ports import UseCaseError


def map_termination_error(exc: Exception, *, identifier: Identifier) -> ItemResult:
    """Classify an exception raised by a termination capability.

    Permission problems become ``PERMISSION_DENIED``; anything else is an
    ``OTHER_FAILURE``. The exception text is kept as detail for the report.
    """
    if isinstance(exc, (PermissionError, psutil.AccessDenied)):
        return ItemResult(identifier, TerminationOutcome.PERMISSION_DENIED, _detail(exc, "Permission denied."))
    if isinstance(exc, UseCaseError) and exc.code == "PERMISSION_DENIED":
        return ItemResult(identifier, TerminationOutcome.PERMISSION_DENIED, exc.message)
    if isinstance(exc, psutil.NoSuchProcess):
        return ItemResult(identifier, TerminationOutcome.OTHER_FAILURE, "App is not running.")
    return ItemResult(identifier, TerminationOutcome.OTHER_FAILURE, _detail(exc, "Unexpected error."))


def coerce_outcome(value: Any) -> TerminationOutcome:
    """Normalize whatever a capability returned into a ``TerminationOutcome``."""
    if isinstance(value, TerminationOutcome):
        return value
    if isinstance(value, bool):
        return TerminationOutcome.SUCCESS if value else TerminationOutcome.OTHER_FAILURE
    if isinstance(value, str):
        token = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return TerminationOutcome(token)
        except ValueError:
            return TerminationOutcome.OTHER_FAILURE
    return TerminationOutcome.OTHER_FAILURE


def _detail(exc: Exception, fallback: str) -> str:
    text = str(exc).strip()
    return text or fallback


__all__ = ["coerce_outcome", "map_termination_error"]
