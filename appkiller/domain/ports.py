"""Hexagonal boundaries between the core and host-specific adapters."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Protocol, Tuple

from .entities import Classification, Identifier, TerminationOutcome
from .errors import UseCaseError

# (identifier, display_name, classification, icon_handle)
RawAppEntry = Tuple[Identifier, str, Classification, Any]


class EnumeratorPort(Protocol):
    """Lists installed/running applications on the host.

    Called once per enumeration cycle; failures propagate and are fatal to
    catalog construction.
    """

    def list_apps(self) -> Iterable[RawAppEntry]: ...


class TerminatorPort(Protocol):
    """Best-effort stop request for one application.

    Implementations either return an outcome or raise; raised exceptions are
    classified by the use-case layer and never abort a batch.
    """

    def terminate(self, identifier: Identifier) -> TerminationOutcome: ...


class StoragePort(Protocol):
    """Persistence for user settings."""

    def save_user_settings(self, payload: Dict) -> None: ...
    def load_user_settings(self) -> Optional[Dict]: ...


__all__ = [
    "EnumeratorPort",
    "Identifier",
    "RawAppEntry",
    "StoragePort",
    "TerminatorPort",
    "UseCaseError",
]
