"""Ordering of catalog entries before they are offered as redirect targets.

The ordering predicate requires *both* a smaller node name and a smaller
port before an entry moves ahead of another. It is not a strict weak
order, so the result depends on the sorting algorithm, not only on the
predicate. ``order_entries`` uses a plain insertion sort: an entry is
swapped backwards while it precedes its left neighbour and stops at the
first neighbour it does not precede. It can still end up ahead of entries
it never compares with.

Existing listings depend on this, so it is kept as-is rather than replaced
with a lexicographic ``(hostname, port)`` sort.
"""

from __future__ import annotations

from collections.abc import Iterable

from .entries import CatalogEntry


def entry_precedes(a: CatalogEntry, b: CatalogEntry) -> bool:
    """Return True if ``a`` sorts before ``b``."""
    return a.hostname < b.hostname and a.port < b.port


def order_entries(entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    """Return the entries insertion-sorted with ``entry_precedes``. Input is untouched."""
    ordered = list(entries)
    for i in range(1, len(ordered)):
        j = i
        while j > 0 and entry_precedes(ordered[j], ordered[j - 1]):
            ordered[j - 1], ordered[j] = ordered[j], ordered[j - 1]
            j -= 1
    return ordered
