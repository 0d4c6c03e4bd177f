from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import psutil

from appkiller.domain.entities import Classification, Identifier, TerminationOutcome
from appkiller.domain.ports import EnumeratorPort, RawAppEntry, TerminatorPort
from appkiller.viewmodels.settings_vm import DEFAULT_SYSTEM_ACCOUNTS

log = logging.getLogger(__name__)

_ATTRS = ["pid", "name", "username", "uids", "exe"]


@dataclass
class ClassificationPolicy:
    """Decides whether a process owner counts as the system.

    An owner is system when its account name is listed in ``system_accounts``
    (case-insensitive) or, on POSIX hosts, when its real uid is below
    ``system_uid_max``. An app whose processes mix owners is system as soon as
    one process is.
    """

    system_accounts: Sequence[str] = DEFAULT_SYSTEM_ACCOUNTS
    system_uid_max: int = 1000

    def classify(self, username: Optional[str], uid: Optional[int]) -> Classification:
        accounts = {name.lower() for name in self.system_accounts}
        if username and username.lower() in accounts:
            return Classification.SYSTEM
        if uid is not None and uid < self.system_uid_max:
            return Classification.SYSTEM
        if not username and uid is None:
            # Owner hidden from us: treat as system so it goes through confirmation.
            return Classification.SYSTEM
        return Classification.USER


class PsutilProcessAdapter(EnumeratorPort, TerminatorPort):
    """Enumerate running apps by process name and stop them with SIGTERM.

    One app record groups every process sharing a name. Termination sends a
    polite terminate request to each of them; nothing is force-killed.
    """

    def __init__(
        self,
        *,
        policy: Optional[ClassificationPolicy] = None,
        own_pid: Optional[int] = None,
    ) -> None:
        self.policy = policy or ClassificationPolicy()
        self.own_pid = os.getpid() if own_pid is None else own_pid

    # ---- EnumeratorPort ----
    def list_apps(self) -> List[RawAppEntry]:
        grouped: Dict[Identifier, Dict] = {}
        for proc in self._iter_processes():
            info = getattr(proc, "info", None) or {}
            pid = int(info.get("pid") or 0)
            name = str(info.get("name") or "").strip()
            if pid <= 0 or pid == self.own_pid or not name:
                continue
            uid = _real_uid(info.get("uids"))
            classification = self.policy.classify(info.get("username"), uid)
            entry = grouped.setdefault(
                name,
                {"classification": classification, "exe": info.get("exe") or None},
            )
            if classification is Classification.SYSTEM:
                entry["classification"] = Classification.SYSTEM

        return [
            (name, _display_name(name), data["classification"], data["exe"])
            for name, data in grouped.items()
        ]

    # ---- TerminatorPort ----
    def terminate(self, identifier: Identifier) -> TerminationOutcome:
        targets = [
            proc
            for proc in self._iter_processes()
            if (getattr(proc, "info", None) or {}).get("name") == identifier
            and proc.pid != self.own_pid
        ]
        if not targets:
            log.debug("No running process named %s", identifier)
            return TerminationOutcome.OTHER_FAILURE

        signalled = 0
        denied = 0
        for proc in targets:
            try:
                proc.terminate()
                signalled += 1
            except psutil.NoSuchProcess:
                # Already gone counts as stopped.
                signalled += 1
            except psutil.AccessDenied:
                log.debug("Access denied terminating pid %s (%s)", proc.pid, identifier)
                denied += 1

        if denied:
            return TerminationOutcome.PERMISSION_DENIED
        if signalled:
            return TerminationOutcome.SUCCESS
        return TerminationOutcome.OTHER_FAILURE

    # ---- Helpers ----
    @staticmethod
    def _iter_processes() -> Iterator[psutil.Process]:
        return psutil.process_iter(_ATTRS)


def _real_uid(uids: object) -> Optional[int]:
    if uids is None:
        return None
    real = getattr(uids, "real", None)
    if real is None and isinstance(uids, Iterable):
        values = list(uids)
        real = values[0] if values else None
    try:
        return int(real) if real is not None else None
    except (TypeError, ValueError):
        return None


def _display_name(name: str) -> str:
    stem = name[:-4] if name.lower().endswith(".exe") else name
    return stem or name


__all__ = ["ClassificationPolicy", "PsutilProcessAdapter"]
