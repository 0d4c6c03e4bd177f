"""Domain-level error types shared by use-cases, view models and the CLI.

Every failure that leaves the core is one of these: a stable ``code`` plus a
user-presentable ``message`` and optional structured ``meta``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = dict(meta or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(UseCaseError):
    """Identifier absent from the catalog."""

    def __init__(self, identifier: str):
        super().__init__(
            "NOT_FOUND",
            f"No app with identifier '{identifier}'.",
            meta={"identifier": identifier},
        )
        self.identifier = identifier


class EmptySelectionError(UseCaseError):
    def __init__(self, message: str = "No apps selected"):
        super().__init__("EMPTY_SELECTION", message)


class CatalogConstructionFailed(UseCaseError):
    def __init__(self, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__("CATALOG_FAILED", message, meta=meta)


class InvalidTransitionError(UseCaseError):
    """Orchestrator operation called from a state that does not allow it."""

    def __init__(self, operation: str, state: str):
        super().__init__(
            "INVALID_STATE",
            f"Cannot {operation} while batch is {state}.",
            meta={"operation": operation, "state": state},
        )


class InvalidArgumentError(UseCaseError):
    """A filter mode, decision or similar token the core does not recognise."""

    def __init__(self, field: str, value: Any, message: str):
        super().__init__(
            "INVALID_ARGUMENT",
            message,
            meta={"field": field, "value": value},
        )


class ConfirmationRequiredError(UseCaseError):
    """System apps were about to be terminated without an explicit decision."""

    def __init__(self, identifiers):
        ids = list(identifiers)
        super().__init__(
            "CONFIRMATION_REQUIRED",
            f"{len(ids)} system app(s) need confirmation before hibernating.",
            meta={"identifiers": ids},
        )


__all__ = [
    "CatalogConstructionFailed",
    "ConfirmationRequiredError",
    "EmptySelectionError",
    "InvalidArgumentError",
    "InvalidTransitionError",
    "NotFoundError",
    "UseCaseError",
]
