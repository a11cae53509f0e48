from __future__ import annotations
import logging
from typing import Callable, List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed

import typer
from tqdm import tqdm

from .config import SyncConfig
from .core import StorageBackend
from .models import CopyOutcome, DiffSet, Failure, ObjectKey, Success
from .utils import format_ts

log = logging.getLogger(__name__)


def copy_object(backend: StorageBackend, config: SyncConfig, key: ObjectKey) -> CopyOutcome:
    """Copy one key to the same name in the destination; errors come back as a Failure."""
    try:
        backend.copy(
            config.src,
            key.name,
            config.dst,
            key.name,
            acl=config.acl,
            if_modified_since=key.last_modified,
            storage_class=config.storage_class,
        )
    except Exception as e:
        log.debug("Copy of %s failed: %s", key.name, e)
        return Failure(key, e)
    return Success(key)


def copy_diff(
    backend: StorageBackend,
    config: SyncConfig,
    diff: DiffSet,
    workers: int,
    echo: Callable[[str], None] = typer.echo,
) -> List[CopyOutcome]:
    """
    Copy every entry of `diff` with at most `workers` copies in flight.
    Blocks until all of them are done and returns one outcome per entry, unordered.
    """
    keys = list(diff.values())
    total = len(keys)
    if total == 0:
        return []
    width = len(str(total))

    bar: Optional[tqdm] = tqdm(total=total, desc="Copy", unit="obj") if config.progress else None
    say = bar.write if bar is not None else echo

    def _do(index: int, key: ObjectKey) -> CopyOutcome:
        if not config.quiet:
            say(f"{str(index + 1).rjust(width)}/{total} [{format_ts(key.last_modified)}] {key.name}")
        return copy_object(backend, config, key)

    outcomes: List[CopyOutcome] = []
    with ThreadPoolExecutor(max_workers=max(workers, 1)) as ex:
        futs = [ex.submit(_do, i, k) for i, k in enumerate(keys)]
        for f in as_completed(futs):
            outcomes.append(f.result())
            if bar:
                bar.update(1)

    if bar:
        bar.close()

    return outcomes
