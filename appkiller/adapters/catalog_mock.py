from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Union

from appkiller.domain.entities import Classification, Identifier, TerminationOutcome
from appkiller.domain.ports import EnumeratorPort, RawAppEntry, TerminatorPort

DEMO_APPS: tuple[RawAppEntry, ...] = (
    ("org.example.browser", "Browser", Classification.USER, None),
    ("org.example.mail", "Mail", Classification.USER, None),
    ("org.example.music", "music player", Classification.USER, None),
    ("org.example.notes", "Notes", Classification.USER, None),
    ("system.bluetooth", "Bluetooth", Classification.SYSTEM, None),
    ("system.launcher", "Launcher", Classification.SYSTEM, None),
    ("system.telephony", "Phone Services", Classification.SYSTEM, None),
)

Scripted = Union[TerminationOutcome, Exception]


class CatalogMock(EnumeratorPort, TerminatorPort):
    """In-memory enumerator and scripted terminator for tests and offline use."""

    def __init__(
        self,
        apps: Optional[Iterable[RawAppEntry]] = None,
        *,
        outcomes: Optional[Mapping[Identifier, Scripted]] = None,
        default: TerminationOutcome = TerminationOutcome.SUCCESS,
    ) -> None:
        self.apps: List[RawAppEntry] = list(DEMO_APPS if apps is None else apps)
        self.outcomes: Dict[Identifier, Scripted] = dict(outcomes or {})
        self.default = default
        self.calls: List[Identifier] = []

    def list_apps(self) -> List[RawAppEntry]:
        return list(self.apps)

    def terminate(self, identifier: Identifier) -> TerminationOutcome:
        self.calls.append(identifier)
        scripted = self.outcomes.get(identifier, self.default)
        if isinstance(scripted, Exception):
            raise scripted
        return scripted


__all__ = ["CatalogMock", "DEMO_APPS"]
