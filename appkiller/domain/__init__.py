"""Domain package exports for value objects, the catalog, and errors."""

from .catalog import AppCatalog
from .entities import (
    AppRecord,
    BatchReport,
    BatchState,
    Classification,
    ConfirmationDecision,
    FilterMode,
    Identifier,
    ItemResult,
    SummaryKind,
    TerminationOutcome,
)
from .errors import (
    CatalogConstructionFailed,
    ConfirmationRequiredError,
    EmptySelectionError,
    InvalidArgumentError,
    InvalidTransitionError,
    NotFoundError,
    UseCaseError,
)

__all__ = [
    "AppCatalog",
    "AppRecord",
    "BatchReport",
    "BatchState",
    "CatalogConstructionFailed",
    "ConfirmationRequiredError",
    "Classification",
    "ConfirmationDecision",
    "EmptySelectionError",
    "FilterMode",
    "InvalidArgumentError",
    "Identifier",
    "InvalidTransitionError",
    "ItemResult",
    "NotFoundError",
    "SummaryKind",
    "TerminationOutcome",
    "UseCaseError",
]
