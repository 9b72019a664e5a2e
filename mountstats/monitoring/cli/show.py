# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import (
    BinaryIO,
    Callable,
    List,
    Literal,
    Optional,
    Protocol,
    runtime_checkable,
)

import click

from mountstats.monitoring.click import (
    log_folder_option,
    log_level_option,
    pid_option,
    proc_root_option,
)
from mountstats.monitoring.dataclass_utils import (
    flatten_dict_factory,
    remove_none_dict_factory,
)
from mountstats.monitoring.errors import MountStatsParseError
from mountstats.monitoring.parsing import parse_mount_stats
from mountstats.monitoring.procfs import (
    MountStatsClient,
    nfs_mounts,
    ProcfsMountStatsClient,
)
from mountstats.monitoring.utils.monitor import init_logger
from mountstats.schemas.mount import Mount
from typeguard import typechecked

LOGGER_NAME = "mountstats"

OutputFormat = Literal["log", "metric"]


@runtime_checkable
class CliObject(Protocol):
    def mountstats_client(self, proc_root: Path) -> MountStatsClient: ...


@dataclass
class CliObjectImpl:
    client_factory: Callable[[Path], MountStatsClient] = field(
        default=ProcfsMountStatsClient
    )

    def mountstats_client(self, proc_root: Path) -> MountStatsClient:
        return self.client_factory(proc_root)


def format_mounts(mounts: List[Mount], output_format: OutputFormat) -> str:
    if output_format == "metric":
        return json.dumps(
            [asdict(mount, dict_factory=flatten_dict_factory) for mount in mounts]
        )
    return json.dumps(
        [asdict(mount, dict_factory=remove_none_dict_factory) for mount in mounts]
    )


@click.command()
@pid_option
@proc_root_option
@click.option(
    "--input",
    "input_file",
    type=click.File("rb"),
    default=None,
    help="Decode a saved mountstats report instead of reading it from procfs.",
)
@click.option(
    "--nfs-only",
    is_flag=True,
    default=False,
    help="Only print mounts which report NFS statistics.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["log", "metric"]),
    default="log",
    show_default=True,
    help=(
        "'log' prints nested records, 'metric' prints one flattened object per "
        "mount with dot separated keys."
    ),
)
@log_level_option
@log_folder_option
@click.pass_obj
@typechecked
def main(
    obj: CliObject,
    pid: str,
    proc_root: Path,
    input_file: Optional[BinaryIO],
    nfs_only: bool,
    output_format: OutputFormat,
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    log_folder: Optional[str],
) -> None:
    """
    Decode /proc/[pid]/mountstats and print the mounts as JSON.
    """
    logger, _ = init_logger(
        logger_name=LOGGER_NAME,
        log_dir=log_folder,
        log_name=LOGGER_NAME + ".log",
        log_level=getattr(logging, log_level),
    )

    try:
        if input_file is not None:
            logger.info("decoding mountstats from %s", input_file.name)
            mounts = parse_mount_stats(input_file)
        else:
            logger.info("decoding mountstats of pid %s under %s", pid, proc_root)
            mounts = obj.mountstats_client(proc_root).get_mounts(pid)
    except MountStatsParseError as e:
        raise click.ClickException(f"Malformed mountstats: {e}") from e
    except OSError as e:
        raise click.ClickException(f"Could not read mountstats: {e}") from e

    if nfs_only:
        mounts = list(nfs_mounts(mounts))
    logger.debug("printing %d mounts", len(mounts))
    click.echo(format_mounts(mounts, output_format))
