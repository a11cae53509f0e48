from __future__ import annotations
import logging

class S3ncError(Exception): pass
class ConfigurationError(S3ncError): pass

class AccessDenied(S3ncError):
    def __init__(self, bucket: str, action: str = "read from"):
        self.bucket = bucket
        self.action = action
        super().__init__(f"AccessDenied: Cannot {action} bucket {bucket}.")

class BucketNotFound(S3ncError):
    def __init__(self, bucket: str):
        self.bucket = bucket
        super().__init__(f"NoSuchBucket: Bucket {bucket} does not exist.")

# botocore ClientError codes, as found in e.response["Error"]["Code"]
ACCESS_DENIED_CODES = {"AccessDenied", "403", "AllAccessDisabled"}
NOT_FOUND_CODES = {"NoSuchBucket", "404", "NotFound"}

QUIET_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")

def setup_logging(level: int = logging.INFO, logfile: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):  # avoid duplicate handlers
        root.removeHandler(h)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    root.addHandler(stream)
    if logfile:
        fh = logging.FileHandler(logfile)
        fh.setFormatter(fmt)
        root.addHandler(fh)
    # the SDK is chatty at DEBUG; keep it to warnings even with -v
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

def error_code(exc: BaseException) -> str:
    """Return the structured error code of a botocore ClientError, or ''."""
    response = getattr(exc, "response", None) or {}
    return str((response.get("Error") or {}).get("Code", ""))
