from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..domain.catalog import AppCatalog
from ..domain.entities import AppRecord, Classification, FilterMode, Identifier
from ..domain.errors import InvalidArgumentError, NotFoundError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterView:
    """Visible projection emitted after a filter change."""

    mode: FilterMode
    records: Tuple[AppRecord, ...]

    @property
    def size(self) -> int:
        return len(self.records)

    @property
    def empty(self) -> bool:
        return not self.records

    def identifiers(self) -> List[Identifier]:
        return [record.identifier for record in self.records]


@dataclass
class SelectionFilterEngine:
    """Owns per-record selection flags and the active filter. Pure UI-logic.

    Responsibilities
    - Derive the visible list for the active ``FilterMode``
    - Mutate ``selected`` flags; selection is independent of the filter
    - Never bulk-select system apps
    - Notify the presentation layer via ``on_selection_changed(count)`` and
      ``on_filter_changed(FilterView)``
    """

    catalog: AppCatalog
    on_selection_changed: Optional[Callable[[int], None]] = None
    on_filter_changed: Optional[Callable[[FilterView], None]] = None
    mode: FilterMode = FilterMode.USER

    # ---- Filter API ----
    def set_filter_mode(self, mode: FilterMode) -> List[AppRecord]:
        try:
            self.mode = FilterMode.parse(mode)
        except ValueError as exc:
            raise InvalidArgumentError("filter_mode", mode, str(exc)) from exc
        view = FilterView(mode=self.mode, records=tuple(self.catalog.visible(self.mode)))
        log.debug("Filter set to %s (%d visible)", self.mode.value, view.size)
        if self.on_filter_changed:
            self.on_filter_changed(view)
        return list(view.records)

    def current_view(self) -> FilterView:
        return FilterView(mode=self.mode, records=tuple(self.catalog.visible(self.mode)))

    # ---- Selection API (called by View) ----
    def toggle_selection(self, identifier: Identifier) -> int:
        record = self._require(identifier)
        record.selected = not record.selected
        return self._selection_changed()

    def set_selected(self, identifier: Identifier, selected: bool) -> int:
        record = self._require(identifier)
        record.selected = bool(selected)
        return self._selection_changed()

    def select_all_visible_user_only(self) -> int:
        # Bulk-select covers every user app regardless of the active filter
        # and never touches system apps.
        for record in self.catalog:
            if record.classification is Classification.USER:
                record.selected = True
        return self._selection_changed()

    def deselect_all(self) -> int:
        for record in self.catalog:
            record.selected = False
        return self._selection_changed()

    def select_or_deselect_all(self) -> int:
        """Single toolbar button: clear a non-empty selection, else select user apps."""
        if self.selected_count() > 0:
            return self.deselect_all()
        return self.select_all_visible_user_only()

    def selected_records(self) -> List[AppRecord]:
        return [record for record in self.catalog if record.selected]

    def selected_count(self) -> int:
        return len(self.selected_records())

    # ---- Catalog refresh ----
    def replace_catalog(self, catalog: AppCatalog) -> List[AppRecord]:
        """Swap in a freshly enumerated catalog; selection starts empty."""
        self.catalog = catalog
        visible = self.set_filter_mode(self.mode)
        self._selection_changed()
        return visible

    # ---- Helpers ----
    def _require(self, identifier: Identifier) -> AppRecord:
        record = self.catalog.get(identifier)
        if record is None:
            raise NotFoundError(identifier)
        return record

    def _selection_changed(self) -> int:
        count = self.selected_count()
        if self.on_selection_changed:
            self.on_selection_changed(count)
        return count


__all__ = ["FilterView", "SelectionFilterEngine"]
