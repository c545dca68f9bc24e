# payments/domain/services/country_reference.py
"""
Read-only ISO 3166-1 alpha-2 reference table.

Lifecycle: the table is built from ``pycountry`` the first time any lookup
is made and is never reset or mutated afterwards. All callers share the one
process-wide instance returned by ``get_country_reference()``.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Mapping

import pycountry

logger = logging.getLogger("country_reference")


class CountryReference:
    """Lazily-initialised alpha-2 code -> display name lookup."""

    def __init__(self) -> None:
        self._names: Mapping[str, str] | None = None
        self._lock = threading.Lock()

    def _table(self) -> Mapping[str, str]:
        if self._names is None:
            with self._lock:
                if self._names is None:
                    names = {c.alpha_2: c.name for c in pycountry.countries}
                    self._names = MappingProxyType(names)
                    logger.debug("Country reference loaded: %d codes", len(names))
        return self._names

    def name_for(self, code: str) -> str | None:
        """Return the display name for ``code`` or ``None`` when unknown."""
        return self._table().get((code or "").upper())

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._table()

    def __len__(self) -> int:
        return len(self._table())


_reference = CountryReference()


def get_country_reference() -> CountryReference:
    return _reference
