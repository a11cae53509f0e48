from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .utils import read_yaml

AMAZON_ACL = (
    "private",
    "public-read",
    "public-read-write",
    "authenticated-read",
    "bucket-owner-read",
    "bucket-owner-full-control",
)
STORAGE_CLASSES = ("STANDARD", "REDUCED_REDUNDANCY")

DEFAULT_CONFIG = "config/config.yaml"
DEFAULT_THREADS = 20
DEFAULT_ACL = "public-read"
PROBE_KEY = "_s3nc"


@dataclass(frozen=True)
class SyncConfig:
    """Everything one sync run needs. Built once by the CLI, never mutated."""
    src: str
    dst: str
    threads: int = DEFAULT_THREADS
    prefix: str = ""
    acl: str = DEFAULT_ACL
    storage_class: str = "STANDARD"
    create: bool = False
    ask: bool = True
    quiet: bool = False
    progress: bool = False

    def validate(self) -> "SyncConfig":
        if not self.src:
            raise ConfigurationError("Missing SRC bucket")
        if not self.dst:
            raise ConfigurationError("Missing DST bucket")
        if self.threads < 1:
            raise ConfigurationError(f"Thread count must be >= 1, got {self.threads}")
        if self.acl not in AMAZON_ACL:
            raise ConfigurationError(f"Invalid ACL {self.acl!r}, expected one of {','.join(AMAZON_ACL)}")
        if self.storage_class not in STORAGE_CLASSES:
            raise ConfigurationError(f"Invalid storage class {self.storage_class!r}")
        return self


@dataclass(frozen=True)
class Credentials:
    key: Optional[str] = None
    secret: Optional[str] = None
    profile: Optional[str] = None
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    secure: bool = True

    def validate(self) -> "Credentials":
        # a named profile resolves its own keys inside boto3
        if self.profile:
            return self
        if not self.key:
            raise ConfigurationError("Missing Amazon Key")
        if not self.secret:
            raise ConfigurationError("Missing Amazon Secret")
        return self


def load_cfg(config_path: Optional[str]) -> Dict[str, Any]:
    """
    Load YAML config if present, otherwise return {}.
    Never crash on missing/empty config.
    """
    path = config_path or DEFAULT_CONFIG
    try:
        cfg = read_yaml(path)
    except FileNotFoundError:
        return {}
    if not cfg:
        return {}
    return cfg


def section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    return (cfg.get(name) or {}) if cfg else {}
