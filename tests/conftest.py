"""Shared fixtures: an in-memory StorageBackend and timestamp helpers."""

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest

from s3nc.models import ObjectKey

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def ts(seconds: int) -> datetime:
    return EPOCH + timedelta(seconds=seconds)


def snapshot(**names_to_seconds):
    return {name: ObjectKey(name, ts(sec)) for name, sec in names_to_seconds.items()}


class FakeBackend:
    """In-memory buckets. Copies stamp the destination with a later time, like S3 does."""

    def __init__(self, buckets=None, failures=None, delay=0.0, denied=(), missing=()):
        self.buckets = {name: dict(objs) for name, objs in (buckets or {}).items()}
        self.failures = dict(failures or {})
        self.delay = delay
        self.denied = set(denied)
        self.missing = set(missing)
        self.calls = []
        self.copies = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def probe_write(self, bucket, create_if_missing=False):
        from s3nc.errors import AccessDenied

        self.calls.append(("probe_write", bucket))
        if bucket in self.denied:
            raise AccessDenied(bucket, "write to destination")

    def list(self, bucket, prefix="", create_if_missing=False):
        from s3nc.errors import AccessDenied, BucketNotFound

        self.calls.append(("list", bucket))
        if bucket in self.denied:
            raise AccessDenied(bucket)
        if bucket in self.missing or bucket not in self.buckets:
            if create_if_missing:
                self.buckets[bucket] = {}
                return {}
            raise BucketNotFound(bucket)
        return {n: k for n, k in self.buckets[bucket].items() if n.startswith(prefix)}

    def copy(self, src_bucket, src_name, dst_bucket, dst_name, *, acl, if_modified_since, storage_class):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if src_name in self.failures:
                raise self.failures[src_name]
            with self._lock:
                self.copies.append((src_bucket, src_name, dst_bucket, dst_name, acl, if_modified_since, storage_class))
                source = self.buckets[src_bucket][src_name]
                self.buckets[dst_bucket][dst_name] = ObjectKey(dst_name, source.last_modified + timedelta(seconds=1))
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def make_backend():
    """Factory for FakeBackend instances."""
    return FakeBackend


@pytest.fixture
def echoed():
    """Collects everything a component would print."""
    lines = []
    return lines


@pytest.fixture(name="ts")
def ts_fixture():
    """Seconds after 2024-01-01 UTC as an aware datetime."""
    return ts


@pytest.fixture(name="snapshot")
def snapshot_fixture():
    """Build a BucketSnapshot from name=seconds keywords."""
    return snapshot
