"""Adapter and use-case wiring for one appkiller session.

This module owns construction of the host adapters, the catalog, the
selection engine and the batch orchestrator from values in
:class:`appkiller.viewmodels.settings_vm.SettingsVM`. The command surface
creates one controller per process (or per interactive shell).
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from ..adapters.catalog_mock import CatalogMock
from ..adapters.process_psutil import ClassificationPolicy, PsutilProcessAdapter
from ..domain.catalog import AppCatalog
from ..domain.entities import AppRecord, BatchReport
from ..domain.ports import EnumeratorPort, TerminatorPort
from ..usecases.hibernate_batch import BatchTerminationOrchestrator
from ..usecases.load_catalog import LoadCatalog
from ..viewmodels.selection_engine import FilterView, SelectionFilterEngine
from ..viewmodels.settings_vm import SettingsVM

log = logging.getLogger(__name__)


class AppController:
    """Create and cache runtime adapters/use-cases from settings state.

    Call chain:
        ``appkiller.app.main`` creates one instance, binds presenter callbacks
        and calls ``load`` before any selection or hibernate command.
    """

    def __init__(
        self,
        settings_vm: SettingsVM,
        *,
        use_mock: bool = False,
        enumerator: Optional[EnumeratorPort] = None,
        terminator: Optional[TerminatorPort] = None,
    ) -> None:
        """Initialize controller with settings-backed dependencies.

        Args:
            settings_vm: Typed settings (classification policy, default filter,
                worker count, excluded identifiers).
            use_mock: Use the in-memory demo catalog instead of host processes.
            enumerator: Explicit enumerator, overriding ``use_mock``.
            terminator: Explicit termination capability, overriding ``use_mock``.
        """
        self.settings_vm = settings_vm
        default = None
        if enumerator is None or terminator is None:
            default = self._build_default_adapter(use_mock)
        self.enumerator = enumerator if enumerator is not None else default
        self.terminator = terminator if terminator is not None else default

        self.on_selection_changed: Optional[Callable[[int], None]] = None
        self.on_filter_changed: Optional[Callable[[FilterView], None]] = None
        self.on_confirmation_required: Optional[
            Callable[[Sequence[AppRecord], Sequence[AppRecord]], None]
        ] = None
        self.on_batch_complete: Optional[Callable[[BatchReport], None]] = None

        self.engine: Optional[SelectionFilterEngine] = None
        self.orchestrator: Optional[BatchTerminationOrchestrator] = None

    def _build_default_adapter(self, use_mock: bool):
        if use_mock:
            return CatalogMock()
        policy = ClassificationPolicy(
            system_accounts=self.settings_vm.system_accounts,
            system_uid_max=self.settings_vm.system_uid_max,
        )
        return PsutilProcessAdapter(policy=policy)

    def load(self) -> List[AppRecord]:
        """Enumerate the host and (re)build engine and orchestrator.

        Returns:
            The visible list for the configured default filter.

        Raises:
            CatalogConstructionFailed: enumeration failed or produced
                duplicate identifiers.
        """
        catalog: AppCatalog = LoadCatalog(
            self.enumerator, exclude=self.settings_vm.exclude_identifiers
        )()
        if self.engine is None:
            self.engine = SelectionFilterEngine(
                catalog=catalog,
                on_selection_changed=self._emit_selection,
                on_filter_changed=self._emit_filter,
                mode=self.settings_vm.default_filter,
            )
            visible = self.engine.set_filter_mode(self.settings_vm.default_filter)
        else:
            visible = self.engine.replace_catalog(catalog)

        self.orchestrator = BatchTerminationOrchestrator(
            self.engine,
            self.terminator,
            on_confirmation_required=self._emit_confirmation,
            on_batch_complete=self._emit_complete,
            max_workers=self.settings_vm.max_workers,
        )
        log.info("Loaded %d apps", len(catalog))
        return visible

    def ensure_ready(self) -> SelectionFilterEngine:
        if self.engine is None:
            self.load()
        assert self.engine is not None
        return self.engine

    # ---- Notification fan-out (late-bound so presenters can attach after init) ----
    def _emit_selection(self, count: int) -> None:
        if self.on_selection_changed:
            self.on_selection_changed(count)

    def _emit_filter(self, view: FilterView) -> None:
        if self.on_filter_changed:
            self.on_filter_changed(view)

    def _emit_confirmation(
        self, system_items: Sequence[AppRecord], user_items: Sequence[AppRecord]
    ) -> None:
        if self.on_confirmation_required:
            self.on_confirmation_required(system_items, user_items)

    def _emit_complete(self, report: BatchReport) -> None:
        if self.on_batch_complete:
            self.on_batch_complete(report)
