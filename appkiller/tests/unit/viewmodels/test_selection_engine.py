from __future__ import annotations

from typing import List

import pytest

from appkiller.domain.catalog import AppCatalog
from appkiller.domain.entities import Classification, FilterMode
from appkiller.domain.errors import InvalidArgumentError, NotFoundError, UseCaseError
from appkiller.viewmodels.selection_engine import FilterView, SelectionFilterEngine


def _engine(**kwargs) -> SelectionFilterEngine:
    catalog = AppCatalog.from_entries(
        [
            ("A", "alpha", Classification.USER),
            ("B", "bravo", Classification.SYSTEM),
            ("C", "Charlie", Classification.USER),
            ("D", "delta", Classification.SYSTEM),
        ]
    )
    return SelectionFilterEngine(catalog=catalog, **kwargs)


def _ids(records) -> List[str]:
    return [r.identifier for r in records]


def test_set_filter_mode_returns_sorted_visible_list_and_notifies() -> None:
    views: List[FilterView] = []
    engine = _engine(on_filter_changed=views.append)

    assert _ids(engine.set_filter_mode(FilterMode.USER)) == ["A", "C"]
    assert _ids(engine.set_filter_mode(FilterMode.SYSTEM)) == ["B", "D"]
    assert _ids(engine.set_filter_mode(FilterMode.ALL)) == ["A", "C", "B", "D"]

    assert [v.size for v in views] == [2, 2, 4]
    assert views[-1].mode is FilterMode.ALL
    assert views[-1].identifiers() == ["A", "C", "B", "D"]


def test_empty_visible_list_is_flagged() -> None:
    views: List[FilterView] = []
    catalog = AppCatalog.from_entries([("A", "alpha", "user")])
    engine = SelectionFilterEngine(catalog=catalog, on_filter_changed=views.append)

    assert engine.set_filter_mode(FilterMode.SYSTEM) == []
    assert views[-1].empty is True
    assert views[-1].size == 0


def test_selection_is_filter_invariant() -> None:
    engine = _engine()
    engine.set_filter_mode(FilterMode.USER)
    engine.toggle_selection("A")
    engine.set_filter_mode(FilterMode.SYSTEM)
    engine.toggle_selection("B")

    for mode in FilterMode:
        engine.set_filter_mode(mode)
        assert engine.selected_count() == 2
        assert _ids(engine.selected_records()) == ["A", "B"]


def test_toggle_twice_restores_prior_state() -> None:
    engine = _engine()
    engine.toggle_selection("C")
    before = [r.selected for r in engine.catalog]

    assert engine.toggle_selection("A") == 2
    assert engine.toggle_selection("A") == 1
    assert [r.selected for r in engine.catalog] == before


def test_toggle_unknown_identifier_raises_not_found() -> None:
    counts: List[int] = []
    engine = _engine(on_selection_changed=counts.append)

    with pytest.raises(NotFoundError) as excinfo:
        engine.toggle_selection("missing")

    assert excinfo.value.code == "NOT_FOUND"
    assert excinfo.value.meta == {"identifier": "missing"}
    assert counts == []


@pytest.mark.parametrize("mode", list(FilterMode))
def test_select_all_user_never_selects_system_apps(mode: FilterMode) -> None:
    engine = _engine()
    engine.set_filter_mode(mode)

    count = engine.select_all_visible_user_only()

    assert count == 2
    assert _ids(engine.selected_records()) == ["A", "C"]
    assert not any(r.selected for r in engine.catalog if r.is_system)


def test_select_all_user_keeps_existing_system_selection() -> None:
    engine = _engine()
    engine.toggle_selection("D")

    assert engine.select_all_visible_user_only() == 3
    assert engine.catalog.get("D").selected is True


def test_deselect_all_clears_every_record_regardless_of_filter() -> None:
    engine = _engine()
    engine.toggle_selection("A")
    engine.toggle_selection("B")
    engine.set_filter_mode(FilterMode.USER)

    assert engine.deselect_all() == 0
    assert engine.selected_records() == []


def test_mutations_emit_selected_count() -> None:
    counts: List[int] = []
    engine = _engine(on_selection_changed=counts.append)

    engine.toggle_selection("A")
    engine.set_selected("B", True)
    engine.select_all_visible_user_only()
    engine.deselect_all()

    assert counts == [1, 2, 3, 0]


def test_select_or_deselect_all_behaves_like_single_toolbar_button() -> None:
    engine = _engine()

    assert engine.select_or_deselect_all() == 2
    assert engine.select_or_deselect_all() == 0
    engine.toggle_selection("B")
    assert engine.select_or_deselect_all() == 0


def test_replace_catalog_resets_selection_and_reapplies_filter() -> None:
    views: List[FilterView] = []
    counts: List[int] = []
    engine = _engine(on_filter_changed=views.append, on_selection_changed=counts.append)
    engine.set_filter_mode(FilterMode.SYSTEM)
    engine.toggle_selection("B")

    fresh = AppCatalog.from_entries([("B", "bravo", "system"), ("E", "echo", "system")])
    visible = engine.replace_catalog(fresh)

    assert _ids(visible) == ["B", "E"]
    assert views[-1].mode is FilterMode.SYSTEM
    assert counts[-1] == 0
    assert engine.selected_count() == 0


def test_unknown_filter_mode_is_a_structured_error_and_keeps_mode() -> None:
    views: List[FilterView] = []
    engine = _engine(on_filter_changed=views.append)
    engine.set_filter_mode(FilterMode.ALL)

    with pytest.raises(InvalidArgumentError) as excinfo:
        engine.set_filter_mode("bogus")

    assert isinstance(excinfo.value, UseCaseError)
    assert excinfo.value.code == "INVALID_ARGUMENT"
    assert excinfo.value.meta == {"field": "filter_mode", "value": "bogus"}
    assert engine.mode is FilterMode.ALL
    assert len(views) == 1
