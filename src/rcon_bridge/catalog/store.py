"""Item catalog: the authoritative set of known item identifiers.

``ItemCatalog`` loads a newline-delimited list of identifiers once and
then answers two questions for the rest of the process lifetime:

- ``contains(name)``: is this an exact (case-insensitive) catalog entry?
- ``suggest(name)`` : which entries might the caller have meant?

Source format
-------------
One identifier per line.  Surrounding whitespace is trimmed, blank lines
and lines starting with ``#`` are ignored, and every entry is
lower-cased.  Example::

    # food
    bread
    cooked_beef

    Diamond_Pickaxe     <- stored as "diamond_pickaxe"

Concurrency
-----------
The loaded state lives in a single frozen :class:`_CatalogSnapshot`.
``load()`` builds a complete new snapshot and then swaps it in with one
attribute assignment, so concurrent readers always see either the old
catalog or the new one, never a half-built set.  Readers take no locks.

Suggestion tiers
----------------
``suggest`` tries each tier in order and returns the first that yields at
least one result:

1. Entries containing the search term as a substring.
2. Entries starting with the search term.
3. A fixed list of common items, filtered to those present in the catalog.

Tiers 1 and 2 walk the catalog in sorted order so results are
reproducible.  There is no scoring beyond the tier order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from rcon_bridge.errors import CatalogLoadError, NotLoadedError

logger = logging.getLogger(__name__)

# Last-resort suggestions when nothing in the catalog resembles the term.
COMMON_ITEMS: tuple[str, ...] = ("bread", "torch", "stone", "wood", "diamond_pickaxe")

DEFAULT_MAX_SUGGESTIONS = 5


@dataclass(frozen=True)
class _CatalogSnapshot:
    """One fully-built catalog generation.

    Attributes:
        items:   Lower-cased identifiers for O(1) membership tests.
        ordered: The same identifiers in sorted order for deterministic
                 suggestion scans.
    """

    items: frozenset[str]
    ordered: tuple[str, ...]


def parse_catalog_lines(lines: Iterable[str]) -> set[str]:
    """Normalise raw catalog lines into a set of identifiers."""
    entries: set[str] = set()
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        entries.add(line.lower())
    return entries


class ItemCatalog:
    """Case-insensitive lookup over a set of item identifiers.

    Constructed empty; call :meth:`load` before any lookup.  One instance
    is built at startup and passed explicitly to the components that need
    it; tests build their own isolated instances.
    """

    def __init__(self) -> None:
        self._snapshot: _CatalogSnapshot | None = None

    # ── Loading ───────────────────────────────────────────────────────────────

    def load(self, source: str | Path | Iterable[str]) -> int:
        """Load (or fully replace) the catalog from ``source``.

        Args:
            source: A filesystem path, an open text stream, or any
                    iterable of lines.

        Returns:
            Number of identifiers now in the catalog.

        Raises:
            CatalogLoadError: If the source cannot be read or decoded.  The
                previously loaded catalog, if any, is left in place.
        """
        try:
            if isinstance(source, (str, Path)):
                with open(source, encoding="utf-8") as handle:
                    entries = parse_catalog_lines(handle)
            else:
                entries = parse_catalog_lines(source)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to load item catalog from %s: %s", source, exc)
            raise CatalogLoadError(f"Cannot read item catalog from {source}: {exc}") from exc

        self._snapshot = _CatalogSnapshot(items=frozenset(entries), ordered=tuple(sorted(entries)))
        logger.info("Loaded %d valid items", len(entries))
        return len(entries)

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def _current(self) -> _CatalogSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise NotLoadedError("Item list not loaded. Call load() first.")
        return snapshot

    # ── Lookups ───────────────────────────────────────────────────────────────

    def contains(self, name: str) -> bool:
        """Return ``True`` if ``name`` is a catalog entry (case-insensitive)."""
        return name.lower() in self._current().items

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __len__(self) -> int:
        return len(self._current().items)

    def items(self) -> list[str]:
        """Return every catalog entry in sorted order."""
        return list(self._current().ordered)

    def suggest(self, name: str, max_results: int = DEFAULT_MAX_SUGGESTIONS) -> list[str]:
        """Return up to ``max_results`` plausible entries for ``name``.

        See the module docstring for the three-tier fallback order.
        """
        snapshot = self._current()
        if max_results <= 0:
            return []
        term = name.lower()

        contains_matches = [item for item in snapshot.ordered if term in item]
        if contains_matches:
            return contains_matches[:max_results]

        prefix_matches = [item for item in snapshot.ordered if item.startswith(term)]
        if prefix_matches:
            return prefix_matches[:max_results]

        return [item for item in COMMON_ITEMS if item in snapshot.items][:max_results]
