"""Batch hibernation with a confirmation gate for system apps.

State machine::

    IDLE -> AWAITING_CONFIRMATION -> EXECUTING -> COMPLETED
                     |
                     +-> ABORTED

``COMPLETED`` and ``ABORTED`` are terminal for one batch; ``prepare`` starts the
next batch from either of them.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from appkiller.domain.entities import (
    AppRecord,
    BatchReport,
    BatchState,
    Classification,
    ConfirmationDecision,
    Identifier,
    ItemResult,
    TerminationOutcome,
)
from appkiller.domain.errors import (
    ConfirmationRequiredError,
    EmptySelectionError,
    InvalidArgumentError,
    InvalidTransitionError,
    NotFoundError,
)
from appkiller.domain.ports import TerminatorPort
from appkiller.usecases.error_mapping import coerce_outcome, map_termination_error
from appkiller.viewmodels.selection_engine import SelectionFilterEngine
from appkiller.viewmodels.status_format import confirmation_message

log = logging.getLogger(__name__)

TerminateFn = Callable[[Identifier], TerminationOutcome]
Terminator = Union[TerminatorPort, TerminateFn]

_STARTABLE = (BatchState.IDLE, BatchState.COMPLETED, BatchState.ABORTED)


@dataclass(frozen=True)
class ConfirmationRequest:
    """Pending decision handed to the presentation layer."""

    system_items: Tuple[AppRecord, ...]
    user_items: Tuple[AppRecord, ...]

    @property
    def message(self) -> str:
        return confirmation_message(len(self.system_items))


@dataclass(frozen=True)
class PrepareResult:
    """What ``prepare`` did: either waits for a decision or already ran the batch."""

    state: BatchState
    confirmation: Optional[ConfirmationRequest] = None
    report: Optional[BatchReport] = None

    @property
    def needs_confirmation(self) -> bool:
        return self.state is BatchState.AWAITING_CONFIRMATION


class BatchTerminationOrchestrator:
    """Use-case driving one best-effort hibernation batch at a time.

    Call chain:
        The controller calls ``prepare`` with the engine's selection. Without
        system apps the batch runs immediately; otherwise the caller answers
        the ``ConfirmationRequest`` through ``decide``.
    """

    def __init__(
        self,
        engine: SelectionFilterEngine,
        terminator: Terminator,
        *,
        on_confirmation_required: Optional[
            Callable[[Sequence[AppRecord], Sequence[AppRecord]], None]
        ] = None,
        on_batch_complete: Optional[Callable[[BatchReport], None]] = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        self.engine = engine
        self.terminator = terminator
        self.on_confirmation_required = on_confirmation_required
        self.on_batch_complete = on_batch_complete
        self.max_workers = max_workers

        self._state = BatchState.IDLE
        self._selection: Tuple[AppRecord, ...] = ()
        self._pending: Optional[ConfirmationRequest] = None
        self.last_report: Optional[BatchReport] = None

    @property
    def state(self) -> BatchState:
        return self._state

    @property
    def pending(self) -> Optional[ConfirmationRequest]:
        return self._pending

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def prepare(self, selection: Optional[Iterable[AppRecord]] = None) -> PrepareResult:
        """Start a batch for ``selection`` (defaults to the engine's selection)."""
        if self._state not in _STARTABLE:
            raise InvalidTransitionError("prepare", self._state.value)

        source = self.engine.selected_records() if selection is None else selection
        items = tuple(self._resolve(item) for item in source)
        if not items:
            raise EmptySelectionError()

        self._selection = items
        system_items = tuple(r for r in items if r.classification is Classification.SYSTEM)
        user_items = tuple(r for r in items if r.classification is not Classification.SYSTEM)

        if system_items:
            self._pending = ConfirmationRequest(system_items=system_items, user_items=user_items)
            self._transition(BatchState.AWAITING_CONFIRMATION)
            if self.on_confirmation_required:
                self.on_confirmation_required(system_items, user_items)
            return PrepareResult(state=self._state, confirmation=self._pending)

        self._pending = None
        report = self._run(items, self.terminator)
        return PrepareResult(state=self._state, report=report)

    def decide(self, decision: ConfirmationDecision) -> Optional[BatchReport]:
        """Apply the operator's answer to a pending confirmation request."""
        if self._state is not BatchState.AWAITING_CONFIRMATION or self._pending is None:
            raise InvalidTransitionError("decide", self._state.value)

        try:
            decision = ConfirmationDecision.parse(decision)
        except ValueError as exc:
            raise InvalidArgumentError("decision", decision, str(exc)) from exc
        pending = self._pending
        self._pending = None

        if decision is ConfirmationDecision.ABORT:
            # Selection stays as it is; the caller decides what happens next.
            self._transition(BatchState.ABORTED)
            return None

        if decision is ConfirmationDecision.PROCEED_ALL:
            return self._run(self._selection, self.terminator)

        if not pending.user_items:
            self._transition(BatchState.ABORTED)
            raise EmptySelectionError("No apps to hibernate")
        return self._run(pending.user_items, self.terminator)

    def execute(
        self,
        items: Sequence[Union[AppRecord, Identifier]],
        terminate: Optional[Terminator] = None,
    ) -> BatchReport:
        """Run ``terminate`` over ``items`` in order and aggregate a report.

        System apps only run through ``prepare``/``decide``; passing one here
        raises ``ConfirmationRequiredError`` and nothing is terminated.
        """
        if self._state not in _STARTABLE:
            raise InvalidTransitionError("execute", self._state.value)
        records = tuple(self._resolve(item) for item in items)
        if not records:
            raise EmptySelectionError()
        gated = [r.identifier for r in records if r.classification is Classification.SYSTEM]
        if gated:
            raise ConfirmationRequiredError(gated)
        return self._run(records, terminate or self.terminator)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _run(self, items: Sequence[AppRecord], terminator: Terminator) -> BatchReport:
        terminate = self._as_callable(terminator)
        identifiers = [record.identifier for record in items]
        self._transition(BatchState.EXECUTING)

        if self.max_workers > 1 and len(identifiers) > 1:
            workers = min(self.max_workers, len(identifiers))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                # map() yields in submission order, keeping identifier attribution.
                results: List[ItemResult] = list(
                    pool.map(lambda ident: self._terminate_one(ident, terminate), identifiers)
                )
        else:
            results = [self._terminate_one(ident, terminate) for ident in identifiers]

        report = BatchReport.from_results(results)
        self.last_report = report
        try:
            self.engine.deselect_all()
        finally:
            # A failing selection listener must not leave the batch EXECUTING.
            self._transition(BatchState.COMPLETED)
        log.info(
            "Batch finished: %d hibernated, %d failed",
            report.success_count,
            report.failure_count,
        )
        if self.on_batch_complete:
            self.on_batch_complete(report)
        return report

    @staticmethod
    def _terminate_one(identifier: Identifier, terminate: TerminateFn) -> ItemResult:
        try:
            outcome = coerce_outcome(terminate(identifier))
        except Exception as exc:
            result = map_termination_error(exc, identifier=identifier)
            log.warning("Hibernating %s failed: %s", identifier, result.detail)
            return result
        if not outcome.ok:
            log.info("Hibernating %s returned %s", identifier, outcome.value)
        return ItemResult(identifier, outcome)

    @staticmethod
    def _as_callable(terminator: Terminator) -> TerminateFn:
        method = getattr(terminator, "terminate", None)
        if callable(method):
            return method
        if callable(terminator):
            return terminator
        raise TypeError("terminator must be callable or provide terminate(identifier).")

    def _resolve(self, item: Union[AppRecord, Identifier]) -> AppRecord:
        # Classification always comes from the catalog, never from the caller.
        identifier = item.identifier if isinstance(item, AppRecord) else str(item)
        record = self.engine.catalog.get(identifier)
        if record is None:
            raise NotFoundError(identifier)
        return record

    def _transition(self, state: BatchState) -> None:
        log.debug("Batch state %s -> %s", self._state.value, state.value)
        self._state = state


__all__ = [
    "BatchTerminationOrchestrator",
    "ConfirmationRequest",
    "PrepareResult",
]
