"""Immutable snapshot of enumerated applications.

The catalog is built once per enumeration cycle. Record membership, order and
classification never change afterwards; the only mutable state it hosts is
each record's ``selected`` flag, which belongs to the selection engine.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .entities import AppRecord, Classification, FilterMode, Identifier
from .errors import CatalogConstructionFailed


class AppCatalog:
    """Records keyed by identifier, held in display order (user first, then name)."""

    def __init__(self, records: Iterable[AppRecord]) -> None:
        ordered = sorted(records, key=lambda record: record.sort_key())
        index: Dict[Identifier, AppRecord] = {}
        for record in ordered:
            if record.identifier in index:
                raise CatalogConstructionFailed(
                    f"Duplicate app identifier '{record.identifier}'.",
                    meta={"identifier": record.identifier},
                )
            index[record.identifier] = record
        self._records: Tuple[AppRecord, ...] = tuple(ordered)
        self._index = index

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Any],
        *,
        exclude: Iterable[Identifier] = (),
    ) -> "AppCatalog":
        """Build a catalog from enumerator tuples or ready-made records.

        Tuples are ``(identifier, display_name, classification[, icon])``.
        Identifiers listed in ``exclude`` are dropped. Records always start
        unselected.
        """
        skip = {str(item) for item in exclude}
        records: List[AppRecord] = []
        for entry in entries:
            record = _coerce_entry(entry)
            if record.identifier in skip:
                continue
            record.selected = False
            records.append(record)
        return cls(records)

    # ---- Read API ----
    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AppRecord]:
        return iter(self._records)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._index

    @property
    def records(self) -> Tuple[AppRecord, ...]:
        return self._records

    def get(self, identifier: Identifier) -> Optional[AppRecord]:
        return self._index.get(identifier)

    def visible(self, mode: FilterMode) -> List[AppRecord]:
        return sorted(
            (record for record in self._records if mode.admits(record.classification)),
            key=lambda record: record.sort_key(),
        )

    def count(self, classification: Classification) -> int:
        return sum(1 for record in self._records if record.classification is classification)


def _coerce_entry(entry: Any) -> AppRecord:
    if isinstance(entry, AppRecord):
        return AppRecord(
            identifier=entry.identifier,
            display_name=entry.display_name,
            classification=entry.classification,
            icon=entry.icon,
        )
    if isinstance(entry, Sequence) and not isinstance(entry, str) and len(entry) in (3, 4):
        identifier, display_name, classification = entry[0], entry[1], entry[2]
        icon = entry[3] if len(entry) == 4 else None
        try:
            return AppRecord(
                identifier=identifier,
                display_name=display_name,
                classification=_coerce_classification(classification),
                icon=icon,
            )
        except (TypeError, ValueError) as exc:
            raise CatalogConstructionFailed(f"Invalid app entry {entry!r}: {exc}") from exc
    raise CatalogConstructionFailed(f"Unsupported app entry {entry!r}.")


def _coerce_classification(value: Any) -> Classification:
    if isinstance(value, Classification):
        return value
    if isinstance(value, bool):
        return Classification.SYSTEM if value else Classification.USER
    return Classification(str(value).strip().lower())


__all__ = ["AppCatalog"]
