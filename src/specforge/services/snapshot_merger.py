"""Fold incremental submission batches into a single document mapping."""

from __future__ import annotations

from typing import Iterable, Mapping


def merge_snapshots(batches: Iterable[Mapping[str, object]]) -> dict[str, object]:
    """Merge *batches* in order.

    List values extend an earlier list under the same key; every other value
    replaces whatever was there.  The input batches are left untouched.
    """
    merged: dict[str, object] = {}
    for batch in batches:
        for key, value in batch.items():
            if isinstance(value, list):
                existing = merged.get(key)
                if isinstance(existing, list):
                    merged[key] = [*existing, *value]
                else:
                    merged[key] = list(value)
            else:
                merged[key] = value
    return merged
