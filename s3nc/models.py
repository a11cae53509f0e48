from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Literal, Optional, Tuple, Union


@dataclass(frozen=True)
class ObjectKey:
    name: str
    last_modified: datetime


# name -> key, one per bucket and run
BucketSnapshot = Dict[str, ObjectKey]
# name -> *source* key of every object that must be copied
DiffSet = Dict[str, ObjectKey]


@dataclass(frozen=True)
class Success:
    key: ObjectKey
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    key: ObjectKey
    error: BaseException
    ok: bool = field(default=False, init=False)

    def __str__(self) -> str:
        return f"{self.key.name}: {self.error}"


CopyOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class SyncReport:
    """
    Terminal summary of one copy phase.
    `failures` keeps the failed keys next to their errors so the sink can name both.
    """
    success_count: int
    failure_count: int
    elapsed: float
    failures: Tuple[Failure, ...] = ()

    @property
    def errors(self) -> Tuple[BaseException, ...]:
        return tuple(f.error for f in self.failures)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count


SyncStatus = Literal["nothing-to-copy", "declined", "completed"]


@dataclass(frozen=True)
class SyncResult:
    status: SyncStatus
    src_count: int = 0
    dst_count: int = 0
    to_copy: int = 0
    workers: int = 0
    report: Optional[SyncReport] = None
