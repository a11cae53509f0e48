from __future__ import annotations
from typing import Iterable, List

from .models import CopyOutcome, Failure, SyncReport


def aggregate(outcomes: Iterable[CopyOutcome], elapsed: float) -> SyncReport:
    """Split outcomes into successes and failures and summarise them."""
    succeeded = 0
    failures: List[Failure] = []
    for outcome in outcomes:
        if outcome.ok:
            succeeded += 1
        else:
            failures.append(outcome)
    return SyncReport(
        success_count=succeeded,
        failure_count=len(failures),
        elapsed=elapsed,
        failures=tuple(failures),
    )


def format_report(report: SyncReport, quiet: bool = False) -> List[str]:
    listed = " (listed below)" if report.failures and not quiet else ""
    lines = [
        "",
        f"Completed in {report.elapsed:.2f} seconds. Copied {report.success_count} objects "
        f"successfully while {report.failure_count} failed{listed}.",
        "",
    ]
    if not quiet:
        lines.extend(str(f) for f in report.failures)
    return lines
