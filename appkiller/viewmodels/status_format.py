"""Operator-facing labels and summary texts.

Call context:
    ``SelectionFilterEngine``, the batch orchestrator and the CLI call these
    helpers so every surface shows the same wording. The three summary
    messages are relied on verbatim by presentation code.
"""

from __future__ import annotations

from typing import Optional

from ..domain.entities import BatchReport, SummaryKind, TerminationOutcome

HIBERNATION_HELP = (
    "Hibernation asks the host to stop an app's background processes. "
    "It is a best-effort request: nothing is uninstalled and no data is removed.\n\n"
    "Some apps restart automatically. For persistent apps, consider the "
    "operating system's own power or startup settings.\n\n"
    "Apps owned by other users or by the system usually need elevated "
    "permissions and are reported as failures."
)


def summary_message(report: BatchReport) -> str:
    """Three-way summary of a finished batch."""
    kind = report.summary_kind
    if kind is SummaryKind.FULLY_HIBERNATED:
        return f"Hibernated {report.success_count} app(s)"
    if kind is SummaryKind.NONE_HIBERNATED:
        return "Could not hibernate any apps. Check permissions."
    return f"Hibernated {report.success_count} app(s), {report.failure_count} failed"


def selection_label(count: int) -> str:
    return f"{count} selected" if count > 0 else "None selected"


def visible_label(size: int) -> str:
    return f"{size} apps"


def confirmation_message(system_count: int) -> str:
    return (
        f"You have {system_count} system app(s) selected. "
        "Force-stopping system apps may cause instability.\n\n"
        "Do you want to continue?"
    )


def outcome_label(outcome: Optional[TerminationOutcome]) -> str:
    mapping = {
        TerminationOutcome.SUCCESS: "Hibernated",
        TerminationOutcome.PERMISSION_DENIED: "Permission denied",
        TerminationOutcome.OTHER_FAILURE: "Failed",
    }
    if outcome is None:
        return ""
    return mapping.get(outcome, str(outcome.value).replace("_", " ").title())


__all__ = [
    "HIBERNATION_HELP",
    "confirmation_message",
    "outcome_label",
    "selection_label",
    "summary_message",
    "visible_label",
]
