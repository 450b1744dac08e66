"""Comparison of snapshot entry lists.

Snapshots are sorted lists of relative paths, so two of them can be
compared in a single merge pass instead of with set arithmetic, which
also keeps the reported entries in snapshot order.
"""

import locale
from collections.abc import Callable, Sequence
from operator import itemgetter

from modsnap.snapshot.models import EntryDiff

Normalize = Callable[[str], str]


def collation_key(normalize: Normalize) -> Callable[[str], str]:
    """Build the sort key used for snapshot entries.

    Entries are ordered by locale-aware collation of their normalized
    form. Capture and comparison must both use this key: the merge in
    compare_entries is only correct for inputs sorted consistently with
    the way it matches entries.

    Args:
        normalize: Name normalization applied before collation.

    Returns:
        A key function for sorted().
    """

    def key(entry: str) -> str:
        return locale.strxfrm(normalize(entry))

    return key


def _keyed(entries: Sequence[str], key: Callable[[str], str]) -> list[tuple[str, str]]:
    # Stable, so already-sorted input keeps its order
    return sorted(((key(entry), entry) for entry in entries), key=itemgetter(0))


def compare_entries(normalize: Normalize, before: Sequence[str], after: Sequence[str]) -> EntryDiff:
    """Compare two snapshots of the same base path.

    Both lists are brought into collation order first. A baseline stored
    with a different ordering, or a normalization that reorders names
    (case folding, for example), would otherwise break the merge.

    Args:
        normalize: Name normalization; entries equal after normalization
            are the same file.
        before: Entries of the earlier snapshot.
        after: Entries of the later snapshot.

    Returns:
        EntryDiff with the entries only in ``after`` as added and the
        entries only in ``before`` as removed.
    """
    key = collation_key(normalize)
    old = _keyed(before, key)
    new = _keyed(after, key)

    added: list[str] = []
    removed: list[str] = []

    old_idx = 0
    new_idx = 0
    while old_idx < len(old) and new_idx < len(new):
        old_key, old_entry = old[old_idx]
        new_key, new_entry = new[new_idx]
        if old_key == new_key:
            old_idx += 1
            new_idx += 1
        elif old_key < new_key:
            # sorts first, so it can't appear further down the new list
            removed.append(old_entry)
            old_idx += 1
        else:
            added.append(new_entry)
            new_idx += 1

    removed.extend(entry for _, entry in old[old_idx:])
    added.extend(entry for _, entry in new[new_idx:])

    return EntryDiff(added=tuple(added), removed=tuple(removed))
