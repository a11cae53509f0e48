from __future__ import annotations
import logging
import time
from typing import Callable, Optional

import typer

from .config import SyncConfig
from .confirm import confirm
from .copy import copy_diff
from .core import StorageBackend
from .diff import diff_snapshots, effective_workers
from .errors import AccessDenied
from .models import BucketSnapshot, SyncResult
from .report import aggregate

log = logging.getLogger(__name__)


def _list(backend: StorageBackend, bucket: str, role: str, prefix: str, create: bool = False) -> BucketSnapshot:
    try:
        return backend.list(bucket, prefix, create_if_missing=create)
    except AccessDenied as e:
        raise AccessDenied(bucket, f"read from {role}") from e


def sync_buckets(
    backend: StorageBackend,
    config: SyncConfig,
    prompt: Optional[Callable[[str], str]] = None,
    echo: Callable[[str], None] = typer.echo,
) -> SyncResult:
    """
    Copy every object of config.src that is missing or not older in config.dst.

    Phases run strictly in order: write probe, listings, diff, confirmation,
    parallel copy, aggregation. Errors before the copy phase propagate;
    copy errors end up in the report.
    """
    prefixed = f' prefixed with "{config.prefix}"' if config.prefix else ""
    echo(f"Preparing to copy objects from {config.src} to {config.dst}{prefixed}")
    echo("(this might take a while if the buckets are huge)")
    echo("")

    backend.probe_write(config.dst, create_if_missing=config.create)

    dst_map = _list(backend, config.dst, "destination", config.prefix, create=config.create)
    src_map = _list(backend, config.src, "source", config.prefix)
    log.debug("Listed %d source and %d destination objects", len(src_map), len(dst_map))

    diff = diff_snapshots(src_map, dst_map)
    workers = effective_workers(config.threads, diff)

    echo(f"Found {len(src_map)} source objects and {len(dst_map)} destination objects.")
    counts = dict(src_count=len(src_map), dst_count=len(dst_map), to_copy=len(diff), workers=workers)
    if workers == 0:
        echo("Nothing to copy.")
        echo("")
        return SyncResult(status="nothing-to-copy", **counts)
    echo(f"{len(diff)} to copy using {workers} threads.")
    echo("")

    if config.ask:
        gate = confirm(diff, prompt, echo) if prompt is not None else confirm(diff, echo=echo)
        if not gate:
            echo("Please come again!")
            echo("")
            return SyncResult(status="declined", **counts)

    start = time.perf_counter()
    outcomes = copy_diff(backend, config, diff, workers, echo=echo)
    elapsed = time.perf_counter() - start

    report = aggregate(outcomes, elapsed)
    log.debug("Copied %d, failed %d in %.2fs", report.success_count, report.failure_count, elapsed)
    return SyncResult(status="completed", report=report, **counts)
