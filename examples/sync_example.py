from __future__ import annotations
from s3nc.config import SyncConfig
from s3nc.core import S3Backend, get_s3_client
from s3nc.report import format_report
from s3nc.sync import sync_buckets

if __name__ == "__main__":
    s3 = get_s3_client(max_pool_connections=50)
    config = SyncConfig(
        src="my-source",
        dst="my-target",
        prefix="data/v1/",
        threads=50,
        acl="private",
        ask=False,
        progress=True,
    ).validate()
    res = sync_buckets(S3Backend(s3), config)
    print("Status:", res.status, "To copy:", res.to_copy)
    if res.report:
        print("\n".join(format_report(res.report)))
