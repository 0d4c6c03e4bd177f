from __future__ import annotations

from appkiller.domain.entities import BatchReport, ItemResult, TerminationOutcome
from appkiller.viewmodels import status_format


def _report(*oks: bool) -> BatchReport:
    return BatchReport.from_results(
        [
            ItemResult(
                f"app{i}",
                TerminationOutcome.SUCCESS if ok else TerminationOutcome.PERMISSION_DENIED,
            )
            for i, ok in enumerate(oks)
        ]
    )


def test_summary_message_three_way_contract() -> None:
    assert status_format.summary_message(_report(True, True)) == "Hibernated 2 app(s)"
    assert (
        status_format.summary_message(_report(False, False))
        == "Could not hibernate any apps. Check permissions."
    )
    assert status_format.summary_message(_report(True, False, False)) == "Hibernated 1 app(s), 2 failed"


def test_selection_and_visible_labels() -> None:
    assert status_format.selection_label(0) == "None selected"
    assert status_format.selection_label(3) == "3 selected"
    assert status_format.visible_label(7) == "7 apps"


def test_confirmation_message_mentions_system_count() -> None:
    text = status_format.confirmation_message(2)

    assert text.startswith("You have 2 system app(s) selected.")
    assert "instability" in text


def test_outcome_label() -> None:
    assert status_format.outcome_label(TerminationOutcome.SUCCESS) == "Hibernated"
    assert status_format.outcome_label(TerminationOutcome.PERMISSION_DENIED) == "Permission denied"
    assert status_format.outcome_label(TerminationOutcome.OTHER_FAILURE) == "Failed"
    assert status_format.outcome_label(None) == ""
