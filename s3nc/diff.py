from __future__ import annotations
from typing import Mapping

from .models import BucketSnapshot, DiffSet


def diff_snapshots(src: BucketSnapshot, dst: BucketSnapshot) -> DiffSet:
    """
    Objects of `src` that must be copied to `dst`: those missing from `dst`
    and those whose `dst` copy is not strictly newer. Equal timestamps copy again.
    """
    return {
        name: key
        for name, key in src.items()
        if name not in dst or dst[name].last_modified <= key.last_modified
    }


def effective_workers(threads: int, diff: Mapping) -> int:
    """No need to fire up more workers than objects; 0 means nothing to copy."""
    return min(threads, len(diff))
