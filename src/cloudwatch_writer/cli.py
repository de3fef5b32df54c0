from __future__ import annotations

import json
import sys
from typing import Optional

import typer
from loguru import logger

from .bootstrap import resolve_stream
from .client import CloudWatchLogs
from .errors import DeliveryError, WriterError
from .writer import DEFAULT_BATCH_INTERVAL, CloudWatchWriter

app = typer.Typer(help="Ship log lines to AWS CloudWatch Logs")

# ---------------------------
# Common options
# ---------------------------


def group_opt() -> str:
    return typer.Option(
        ..., "--group", envvar="CLOUDWATCH_WRITER_LOG_GROUP_NAME", help="Log group name"
    )


def stream_opt() -> str:
    return typer.Option(
        ..., "--stream", envvar="CLOUDWATCH_WRITER_LOG_STREAM_NAME", help="Log stream name"
    )


def region_opt() -> Optional[str]:
    return typer.Option(
        None, "--region", envvar="CLOUDWATCH_WRITER_REGION", help="AWS region (boto3 default if unset)"
    )


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log writer internals")):
    logger.enable("cloudwatch_writer")
    logger.remove()
    # stderr is looked up per message
    logger.add(
        lambda msg: typer.echo(msg, err=True, nl=False),
        level="DEBUG" if verbose else "INFO",
    )


@app.command("ensure-stream")
def ensure_stream(
    group: str = group_opt(),
    stream: str = stream_opt(),
    region: Optional[str] = region_opt(),
):
    """Create the log group/stream if needed and print the sequence token."""
    try:
        token = resolve_stream(CloudWatchLogs.from_region(region), group, stream)
    except WriterError as e:
        logger.error(f"Failed to resolve log stream: {e}")
        raise typer.Exit(code=1)
    typer.echo(
        json.dumps(
            {"log_group": group, "log_stream": stream, "sequence_token": token},
            indent=2,
        )
    )


@app.command("ship")
def ship(
    group: str = group_opt(),
    stream: str = stream_opt(),
    region: Optional[str] = region_opt(),
    interval: float = typer.Option(
        DEFAULT_BATCH_INTERVAL,
        "--interval",
        envvar="CLOUDWATCH_WRITER_BATCH_INTERVAL",
        help="Max seconds between batches (>= 0.2)",
    ),
):
    """Read lines from stdin and ship each one as a log event."""
    try:
        writer = CloudWatchWriter(CloudWatchLogs.from_region(region), group, stream, interval)
    except WriterError as e:
        logger.error(f"Failed to start writer: {e}")
        raise typer.Exit(code=1)

    lines = 0
    failures = 0
    with writer:
        for line in sys.stdin:
            line = line.rstrip("\r\n")
            if not line:
                continue
            lines += 1
            try:
                writer.write(line)
            except DeliveryError as e:
                failures += 1
                logger.error(f"Delivery failed: {e}")

    # errors from the final batches surface here, after close()
    err = writer.take_error()
    if err is not None:
        failures += 1
        logger.error(f"Delivery failed: {err}")

    logger.info(f"Shipped {lines} lines to {group}/{stream}")
    if failures:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
