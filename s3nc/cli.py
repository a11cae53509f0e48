# cli.py
from __future__ import annotations

import importlib.util
import logging
from typing import Optional, List

import typer
import click

from .config import (
    AMAZON_ACL,
    DEFAULT_ACL,
    DEFAULT_THREADS,
    Credentials,
    SyncConfig,
    load_cfg,
    section,
)
from .errors import AccessDenied, BucketNotFound, ConfigurationError, setup_logging
from .report import format_report
from .utils import bucket_name

app = typer.Typer(
    add_completion=False,
    help="Synchronize two buckets by copying all modified objects from SRC to DST in parallel.",
)

log = logging.getLogger("s3nc.cli")

REQUIRED_MODULES = ("boto3", "tqdm")
EXIT_COPY_FAILURES = 2

# ---------------- Helpers ----------------
def _missing_dependencies() -> List[str]:
    return [m for m in REQUIRED_MODULES if importlib.util.find_spec(m) is None]

def _usage_error(ctx: typer.Context, message: str) -> typer.Exit:
    typer.echo(message)
    typer.echo("")
    typer.echo(ctx.get_help())
    return typer.Exit(code=1)

def _pick(flag, cfg: dict, name: str, default):
    """CLI flag -> YAML -> default."""
    if flag is not None:
        return flag
    return cfg.get(name, default)

# ---------------- SYNC ----------------
@app.command()
def main(
    ctx: typer.Context,
    src: Optional[str] = typer.Argument(None, metavar="SRC", help="Source bucket (name or s3://name)"),
    dst: Optional[str] = typer.Argument(None, metavar="DST", help="Destination bucket (name or s3://name)"),
    threads: Optional[int] = typer.Option(
        None, "--threads", "-n", help=f"Use NUMBER of threads to copy (default {DEFAULT_THREADS})"
    ),
    prefix: Optional[str] = typer.Option(None, "--prefix", "-p", help='Copy objects prefixed with PREFIX (default "")'),
    acl: Optional[str] = typer.Option(
        None,
        "--acl",
        "--act",
        "-a",
        help=f"Copy objects with ACL (default {DEFAULT_ACL})",
        click_type=click.Choice(AMAZON_ACL),
    ),
    key: Optional[str] = typer.Option(None, "--key", "-k", envvar="S3_KEY", help="Amazon access KEY (default $S3_KEY)"),
    secret: Optional[str] = typer.Option(
        None, "--secret", "-s", envvar="S3_SECRET", help="Amazon access SECRET (default $S3_SECRET)"
    ),
    unsafe: bool = typer.Option(False, "--unsafe", "-u", help="Use http (fast) instead of https (secure)"),
    reduced: bool = typer.Option(
        False, "--reduced", "-r", help="Use reduced redundancy storage (cheap) instead of standard (reliable)"
    ),
    create: bool = typer.Option(False, "--create", "-c", help="Create the destination bucket if it does not already exist"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask to continue (useful for cron-jobs)"),
    quiet: bool = typer.Option(False, "--quieter", "-q", help="Not interested in the progress"),
    progress: bool = typer.Option(False, "--progress/--no-progress", help="Show progress bar"),
    strict: bool = typer.Option(False, "--strict/--no-strict", help="Exit with code 2 if any object failed to copy"),
    profile: Optional[str] = typer.Option(None, "--profile", help="AWS profile name (instead of key/secret)"),
    region: Optional[str] = typer.Option(None, "--region", help="AWS region (e.g. us-east-1)"),
    endpoint_url: Optional[str] = typer.Option(None, "--endpoint-url", help="S3-compatible endpoint URL"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    setup_logging(level=level, logfile=log_file)

    cfg = load_cfg(config)
    aws = section(cfg, "aws")
    scfg = section(cfg, "sync")

    if not src:
        raise _usage_error(ctx, "Missing SRC bucket")
    if not dst:
        raise _usage_error(ctx, "Missing DST bucket")

    reduced_val = reduced or bool(scfg.get("reduced", False))
    try:
        sync_cfg = SyncConfig(
            src=bucket_name(src),
            dst=bucket_name(dst),
            threads=int(_pick(threads, scfg, "threads", DEFAULT_THREADS)),
            prefix=_pick(prefix, scfg, "prefix", "") or "",
            acl=_pick(acl, scfg, "acl", DEFAULT_ACL),
            storage_class="REDUCED_REDUNDANCY" if reduced_val else "STANDARD",
            create=create or bool(scfg.get("create", False)),
            ask=not yes,
            quiet=quiet,
            progress=progress,
        ).validate()
        creds = Credentials(
            key=key or aws.get("access_key_id"),
            secret=secret or aws.get("secret_access_key"),
            profile=profile or aws.get("profile"),
            region=region or aws.get("region"),
            endpoint_url=endpoint_url or aws.get("endpoint_url"),
            secure=not unsafe,
        ).validate()
    except (ConfigurationError, ValueError) as e:
        raise _usage_error(ctx, str(e))
    log.debug("Sync settings: %s", sync_cfg)

    missing = _missing_dependencies()
    if missing:
        raise _usage_error(ctx, f"Missing dependencies: {', '.join(missing)}\n\n  `pip install {' '.join(missing)}`")

    # imported late so a missing SDK is reported above instead of as a traceback
    from .core import S3Backend, client_from_credentials
    from .sync import sync_buckets

    backend = S3Backend(client_from_credentials(creds, aws, pool_size=sync_cfg.threads))
    try:
        result = sync_buckets(backend, sync_cfg)
    except (AccessDenied, BucketNotFound) as e:
        typer.echo(str(e))
        typer.echo("")
        raise typer.Exit(code=1)

    if result.report is None:
        return

    for line in format_report(result.report, quiet=quiet):
        typer.echo(line)

    if strict and result.report.failure_count:
        raise typer.Exit(code=EXIT_COPY_FAILURES)
