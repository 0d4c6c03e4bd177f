from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

from dataclasses import FrozenInstanceError, dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

Identifier = str


class Classification(str, Enum):
    """Ownership class of an application record, fixed at catalog load."""

    USER = "user"
    SYSTEM = "system"

    @property
    def sort_rank(self) -> int:
        # User apps are listed before system apps.
        return 0 if self is Classification.USER else 1


class FilterMode(str, Enum):
    """Which records are visible; never affects which records are selected."""

    USER = "user"
    SYSTEM = "system"
    ALL = "all"

    def admits(self, classification: Classification) -> bool:
        if self is FilterMode.ALL:
            return True
        if self is FilterMode.USER:
            return classification is Classification.USER
        return classification is Classification.SYSTEM

    @classmethod
    def parse(cls, value: Any) -> "FilterMode":
        if isinstance(value, cls):
            return value
        token = str(value or "").strip().lower()
        try:
            return cls(token)
        except ValueError as exc:
            raise ValueError(f"Unknown filter mode '{value}'.") from exc


class TerminationOutcome(str, Enum):
    """Per-item result produced by the termination capability."""

    SUCCESS = "success"
    PERMISSION_DENIED = "permission_denied"
    OTHER_FAILURE = "other_failure"

    @property
    def ok(self) -> bool:
        return self is TerminationOutcome.SUCCESS


class ConfirmationDecision(str, Enum):
    """Operator answer to the system-app confirmation gate."""

    ABORT = "abort"
    PROCEED_ALL = "all"
    PROCEED_USER_ONLY = "user-only"

    @classmethod
    def parse(cls, value: Any) -> "ConfirmationDecision":
        if isinstance(value, cls):
            return value
        token = str(value or "").strip().lower().replace("_", "-")
        try:
            return cls(token)
        except ValueError as exc:
            raise ValueError(f"Unknown confirmation decision '{value}'.") from exc


class BatchState(str, Enum):
    """Lifecycle of one batch termination run."""

    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    EXECUTING = "executing"
    COMPLETED = "completed"
    ABORTED = "aborted"


class SummaryKind(str, Enum):
    FULLY_HIBERNATED = "fully_hibernated"
    NONE_HIBERNATED = "none_hibernated"
    PARTIALLY_HIBERNATED = "partially_hibernated"


_FIXED_FIELDS = frozenset({"identifier", "display_name", "classification", "icon"})


@dataclass
class AppRecord:
    """One enumerated application.

    ``identifier``, ``display_name``, ``classification`` and ``icon`` are set
    once at construction and cannot be reassigned; only ``selected`` changes,
    and only through the selection engine.
    """

    identifier: Identifier
    display_name: str
    classification: Classification
    icon: Optional[Any] = field(default=None, repr=False, compare=False)
    selected: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, str) or not self.identifier.strip():
            raise ValueError("AppRecord identifier must be a non-empty string.")
        if not isinstance(self.classification, Classification):
            object.__setattr__(
                self,
                "classification",
                Classification(str(self.classification).strip().lower()),
            )
        if self.display_name is None or not str(self.display_name).strip():
            object.__setattr__(self, "display_name", self.identifier)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _FIXED_FIELDS and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if name in _FIXED_FIELDS:
            raise FrozenInstanceError(f"cannot delete field '{name}'")
        object.__delattr__(self, name)

    @property
    def is_system(self) -> bool:
        return self.classification is Classification.SYSTEM

    def sort_key(self) -> Tuple[int, str]:
        return (self.classification.sort_rank, str(self.display_name).lower())


@dataclass(frozen=True)
class ItemResult:
    """Outcome of a single termination request."""

    identifier: Identifier
    outcome: TerminationOutcome
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome.ok


@dataclass(frozen=True)
class BatchReport:
    """Ordered per-item outcomes of one batch, in processing order."""

    results: Tuple[ItemResult, ...] = ()

    @classmethod
    def from_results(cls, results: Sequence[ItemResult]) -> "BatchReport":
        return cls(results=tuple(results))

    @property
    def success_count(self) -> int:
        return sum(1 for item in self.results if item.ok)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def summary_kind(self) -> SummaryKind:
        if self.failure_count == 0:
            return SummaryKind.FULLY_HIBERNATED
        if self.success_count == 0:
            return SummaryKind.NONE_HIBERNATED
        return SummaryKind.PARTIALLY_HIBERNATED

    def outcomes(self) -> List[Tuple[Identifier, TerminationOutcome]]:
        return [(item.identifier, item.outcome) for item in self.results]

    def failures(self) -> List[ItemResult]:
        return [item for item in self.results if not item.ok]


__all__ = [
    "AppRecord",
    "BatchReport",
    "BatchState",
    "Classification",
    "ConfirmationDecision",
    "FilterMode",
    "Identifier",
    "ItemResult",
    "SummaryKind",
    "TerminationOutcome",
]
