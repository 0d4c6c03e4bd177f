"""Use case building the app catalog from the host enumerator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from appkiller.domain.catalog import AppCatalog
from appkiller.domain.errors import CatalogConstructionFailed
from appkiller.domain.ports import EnumeratorPort, Identifier

log = logging.getLogger(__name__)


@dataclass
class LoadCatalog:
    """Enumerate once and freeze the result into an ``AppCatalog``."""

    enumerator: EnumeratorPort
    exclude: Iterable[Identifier] = field(default_factory=tuple)

    def __call__(self) -> AppCatalog:
        try:
            entries = list(self.enumerator.list_apps())
        except CatalogConstructionFailed:
            raise
        except Exception as exc:
            raise CatalogConstructionFailed(f"App enumeration failed: {exc}") from exc

        catalog = AppCatalog.from_entries(entries, exclude=self.exclude)
        log.debug("Catalog loaded with %d apps (%d enumerated)", len(catalog), len(entries))
        return catalog


__all__ = ["LoadCatalog"]
