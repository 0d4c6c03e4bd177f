"""Text presenter bound to the controller's notifications.

It is the command-line counterpart of a GUI view: it renders what the core
emits and never mutates selection or batch state itself.
"""

from __future__ import annotations

from typing import Sequence, TextIO

from ..domain.entities import AppRecord, BatchReport
from ..viewmodels.selection_engine import FilterView
from ..viewmodels.status_format import (
    confirmation_message,
    outcome_label,
    selection_label,
    summary_message,
    visible_label,
)
from .controller import AppController


class ConsolePresenter:
    """Write controller notifications to a text stream."""

    def __init__(self, out: TextIO, *, verbose: bool = True) -> None:
        self.out = out
        self.verbose = verbose

    def bind(self, controller: AppController) -> None:
        controller.on_selection_changed = self.show_selection
        controller.on_filter_changed = self.show_filter
        controller.on_confirmation_required = self.show_confirmation
        controller.on_batch_complete = self.show_report

    def _write(self, text: str = "") -> None:
        self.out.write(text + "\n")

    def show_selection(self, count: int) -> None:
        if self.verbose:
            self._write(selection_label(count))

    def show_filter(self, view: FilterView) -> None:
        if not self.verbose:
            return
        if view.empty:
            self._write(f"No {view.mode.value} apps to show")
            return
        self._write(f"{visible_label(view.size)} ({view.mode.value})")
        self.show_records(view.records)

    def show_records(self, records: Sequence[AppRecord]) -> None:
        for record in records:
            mark = "[x]" if record.selected else "[ ]"
            badge = " SYSTEM" if record.is_system else ""
            self._write(f"{mark} {record.display_name}  ({record.identifier}){badge}")

    def show_confirmation(
        self, system_items: Sequence[AppRecord], user_items: Sequence[AppRecord]
    ) -> None:
        self._write("System Apps Selected")
        self._write(confirmation_message(len(system_items)))
        for record in system_items:
            self._write(f"  - {record.display_name} ({record.identifier})")

    def show_report(self, report: BatchReport) -> None:
        self._write(summary_message(report))
        for item in report.results:
            suffix = f": {item.detail}" if item.detail else ""
            self._write(f"  {item.identifier}: {outcome_label(item.outcome)}{suffix}")

    def show_error(self, message: str) -> None:
        self._write(f"error: {message}")
