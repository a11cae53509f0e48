from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional, Dict, Any, Protocol
import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import ClientError

from .config import Credentials, PROBE_KEY
from .errors import AccessDenied, BucketNotFound, ACCESS_DENIED_CODES, NOT_FOUND_CODES, error_code
from .models import BucketSnapshot, ObjectKey

log = logging.getLogger(__name__)

# one transfer thread per object, the sync pool already runs in parallel
COPY_TRANSFER = TransferConfig(max_concurrency=1)


def get_s3_client(
    aws_profile: Optional[str] = None,
    aws_access_key_id: Optional[str] = None,
    aws_secret_access_key: Optional[str] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    use_ssl: bool = True,
    max_pool_connections: int = 10,
    retries_max_attempts: int = 8,
    retries_mode: str = "standard",
    connect_timeout: int = 10,
    read_timeout: int = 60,
):
    """
    Create a boto3 S3 client with retries and timeouts applied.
    The connection pool is sized by the caller so every copy worker gets a socket.
    """
    cfg = Config(
        retries={"max_attempts": retries_max_attempts, "mode": retries_mode},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
    )
    if aws_profile:
        session = boto3.Session(profile_name=aws_profile, region_name=region_name)
    else:
        session = boto3.Session(
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region_name,
        )
    return session.client("s3", config=cfg, endpoint_url=endpoint_url, use_ssl=use_ssl)


def client_from_credentials(creds: Credentials, aws: Dict[str, Any], pool_size: int):
    return get_s3_client(
        aws_profile=creds.profile,
        aws_access_key_id=creds.key,
        aws_secret_access_key=creds.secret,
        region_name=creds.region,
        endpoint_url=creds.endpoint_url,
        use_ssl=creds.secure,
        max_pool_connections=max(pool_size, 10),
        retries_max_attempts=aws.get("retries_max_attempts", 8),
        retries_mode=aws.get("retries_mode", "standard"),
        connect_timeout=aws.get("connect_timeout", 10),
        read_timeout=aws.get("read_timeout", 60),
    )


class StorageBackend(Protocol):
    """What the sync engine needs from an object store."""

    def probe_write(self, bucket: str, create_if_missing: bool = False) -> None: ...

    def list(self, bucket: str, prefix: str = "", create_if_missing: bool = False) -> BucketSnapshot: ...

    def copy(
        self,
        src_bucket: str,
        src_name: str,
        dst_bucket: str,
        dst_name: str,
        *,
        acl: str,
        if_modified_since: datetime,
        storage_class: str,
    ) -> None: ...


class S3Backend:
    """StorageBackend over a boto3 S3 client. The client is shared by all copy workers."""

    def __init__(self, s3_client):
        self.s3 = s3_client

    def create_bucket(self, bucket: str) -> None:
        kwargs: Dict[str, Any] = {"Bucket": bucket}
        region = getattr(self.s3.meta, "region_name", None)
        if region and region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
        self.s3.create_bucket(**kwargs)
        log.info("Created bucket %s", bucket)

    def probe_write(self, bucket: str, create_if_missing: bool = False) -> None:
        """Put then delete an empty object to prove we may write to `bucket`."""
        try:
            self.s3.put_object(Bucket=bucket, Key=PROBE_KEY, Body=b"")
        except ClientError as e:
            code = error_code(e)
            if code in ACCESS_DENIED_CODES:
                raise AccessDenied(bucket, "write to destination") from e
            if code in NOT_FOUND_CODES and create_if_missing:
                self.create_bucket(bucket)
                return self.probe_write(bucket, create_if_missing=False)
            if code in NOT_FOUND_CODES:
                raise BucketNotFound(bucket) from e
            raise
        try:
            self.s3.delete_object(Bucket=bucket, Key=PROBE_KEY)
        except ClientError as e:
            if error_code(e) in ACCESS_DENIED_CODES:
                raise AccessDenied(bucket, "write to destination") from e
            raise
        log.debug("Write probe on %s succeeded", bucket)

    def list(self, bucket: str, prefix: str = "", create_if_missing: bool = False) -> BucketSnapshot:
        """
        Collect every object under `prefix` across all list_objects_v2 pages.
        A missing bucket is created (and reported empty) when `create_if_missing` is set.
        """
        snapshot: BucketSnapshot = {}
        paginator = self.s3.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                for obj in page.get("Contents", []) or []:
                    name = obj.get("Key")
                    if not name or not name.startswith(prefix):
                        continue
                    snapshot[name] = ObjectKey(name=name, last_modified=obj["LastModified"])
        except ClientError as e:
            code = error_code(e)
            if code in ACCESS_DENIED_CODES:
                raise AccessDenied(bucket) from e
            if code in NOT_FOUND_CODES:
                if create_if_missing:
                    self.create_bucket(bucket)
                    return {}
                raise BucketNotFound(bucket) from e
            raise
        log.debug("Listed %d objects in %s (prefix=%r)", len(snapshot), bucket, prefix)
        return snapshot

    def copy(
        self,
        src_bucket: str,
        src_name: str,
        dst_bucket: str,
        dst_name: str,
        *,
        acl: str,
        if_modified_since: datetime,
        storage_class: str,
    ) -> None:
        # managed copy: falls back to multipart for objects over 5GB
        self.s3.copy(
            {"Bucket": src_bucket, "Key": src_name},
            dst_bucket,
            dst_name,
            ExtraArgs={
                "ACL": acl,
                "CopySourceIfModifiedSince": if_modified_since,
                "StorageClass": storage_class,
            },
            Config=COPY_TRANSFER,
        )
