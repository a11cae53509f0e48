from __future__ import annotations
from typing import Any, Dict
from datetime import datetime
import re
import yaml


def read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


_S3_URI_RE = re.compile(r"^s3://[a-zA-Z0-9.\-_]+/?$")

def is_s3_uri(uri: str) -> bool:
    return bool(_S3_URI_RE.match(uri))


def bucket_name(arg: str) -> str:
    """Accept either a bare bucket name or an s3://bucket URI."""
    if arg.startswith("s3://"):
        if not is_s3_uri(arg):
            raise ValueError(f"Expected a bucket, not an object path: {arg}")
        return arg.replace("s3://", "", 1).rstrip("/")
    return arg


def format_ts(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
