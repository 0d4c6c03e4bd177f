from __future__ import annotations

from typing import List

from appkiller.adapters.catalog_mock import CatalogMock
from appkiller.adapters.process_psutil import PsutilProcessAdapter
from appkiller.app.controller import AppController
from appkiller.domain.entities import FilterMode
from appkiller.viewmodels.settings_vm import SettingsVM


def test_load_builds_engine_with_default_filter_and_workers() -> None:
    vm = SettingsVM()
    vm.apply_dict({"default_filter": "system", "max_workers": 3})
    controller = AppController(vm, use_mock=True)

    visible = controller.load()

    assert controller.engine.mode is FilterMode.SYSTEM
    assert all(record.is_system for record in visible)
    assert controller.orchestrator.max_workers == 3


def test_notifications_are_late_bound() -> None:
    counts: List[int] = []
    controller = AppController(SettingsVM(), use_mock=True)
    controller.load()
    controller.on_selection_changed = counts.append

    controller.engine.select_all_visible_user_only()

    assert counts == [4]


def test_reload_swaps_catalog_and_clears_selection() -> None:
    mock = CatalogMock()
    controller = AppController(SettingsVM(), enumerator=mock, terminator=mock)
    controller.load()
    engine = controller.engine
    engine.select_all_visible_user_only()

    mock.apps = [("new.app", "New", "user", None)]
    visible = controller.load()

    assert controller.engine is engine
    assert [r.identifier for r in visible] == ["new.app"]
    assert engine.selected_count() == 0


def test_default_adapter_is_psutil_with_settings_policy() -> None:
    vm = SettingsVM()
    vm.apply_dict({"system_uid_max": 200, "system_accounts": ["svc"]})

    controller = AppController(vm)

    assert isinstance(controller.enumerator, PsutilProcessAdapter)
    assert controller.terminator is controller.enumerator
    assert controller.enumerator.policy.system_uid_max == 200
    assert list(controller.enumerator.policy.system_accounts) == ["svc"]
