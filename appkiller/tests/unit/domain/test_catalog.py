from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from appkiller.domain.catalog import AppCatalog
from appkiller.domain.entities import AppRecord, Classification, FilterMode
from appkiller.domain.errors import CatalogConstructionFailed

ENTRIES = [
    ("c", "charlie", Classification.USER),
    ("b", "Bravo", Classification.SYSTEM),
    ("a", "Alpha", Classification.USER, "icon-a"),
    ("z", "aardvark", Classification.SYSTEM),
]


def test_catalog_orders_user_before_system_then_name_case_insensitive() -> None:
    catalog = AppCatalog.from_entries(ENTRIES)

    assert [r.identifier for r in catalog] == ["a", "c", "z", "b"]


def test_visible_list_matches_filter_predicate_and_order() -> None:
    catalog = AppCatalog.from_entries(ENTRIES)

    assert [r.identifier for r in catalog.visible(FilterMode.USER)] == ["a", "c"]
    assert [r.identifier for r in catalog.visible(FilterMode.SYSTEM)] == ["z", "b"]
    assert [r.identifier for r in catalog.visible(FilterMode.ALL)] == ["a", "c", "z", "b"]


def test_from_entries_keeps_icon_and_starts_unselected() -> None:
    preselected = AppRecord("x", "X", Classification.USER, selected=True)
    catalog = AppCatalog.from_entries([*ENTRIES, preselected])

    assert catalog.get("a").icon == "icon-a"
    assert all(not r.selected for r in catalog)


def test_from_entries_honours_exclusions() -> None:
    catalog = AppCatalog.from_entries(ENTRIES, exclude=["c", "b"])

    assert "c" not in catalog
    assert "b" not in catalog
    assert len(catalog) == 2


def test_duplicate_identifier_fails_construction() -> None:
    with pytest.raises(CatalogConstructionFailed) as excinfo:
        AppCatalog.from_entries([("a", "A", "user"), ("a", "Other", "system")])

    assert excinfo.value.code == "CATALOG_FAILED"
    assert excinfo.value.meta == {"identifier": "a"}


@pytest.mark.parametrize("entry", [("a",), "abc", ("", "Empty", "user"), ("a", "A", "kernel")])
def test_malformed_entries_fail_construction(entry) -> None:
    with pytest.raises(CatalogConstructionFailed):
        AppCatalog.from_entries([entry])


def test_classification_accepts_strings_and_system_flag_bools() -> None:
    catalog = AppCatalog.from_entries([("a", "A", "SYSTEM"), ("b", "B", False), ("c", "C", True)])

    assert catalog.get("a").classification is Classification.SYSTEM
    assert catalog.get("b").classification is Classification.USER
    assert catalog.get("c").classification is Classification.SYSTEM
    assert catalog.count(Classification.SYSTEM) == 2


def test_blank_display_name_falls_back_to_identifier() -> None:
    catalog = AppCatalog.from_entries([("org.example", "  ", "user")])

    assert catalog.get("org.example").display_name == "org.example"


def test_record_identity_is_fixed_once_catalogued() -> None:
    catalog = AppCatalog.from_entries(ENTRIES)
    record = catalog.get("b")

    with pytest.raises(FrozenInstanceError):
        record.classification = Classification.USER
    with pytest.raises(FrozenInstanceError):
        record.identifier = "renamed"
    with pytest.raises(FrozenInstanceError):
        del record.display_name

    assert record.classification is Classification.SYSTEM
    assert [r.identifier for r in catalog.visible(FilterMode.SYSTEM)] == ["z", "b"]

    record.selected = True
    assert record.selected is True
