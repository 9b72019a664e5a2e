# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Protocol

from mountstats.monitoring.parsing import parse_mount_stats
from mountstats.schemas.mount import Mount
from mountstats.schemas.nfs import NFSMountStats

logger = logging.getLogger(__name__)


class MountStatsClient(Protocol):
    """A low-level mountstats client."""

    def get_mounts(self, pid: str = "self") -> List[Mount]:
        """Get /proc/[pid]/mountstats data"""


class ProcfsMountStatsClient(MountStatsClient):
    def __init__(self, proc_root: Path = Path("/proc")) -> None:
        self.proc_root = proc_root

    def mountstats_path(self, pid: str) -> Path:
        return self.proc_root / pid / "mountstats"

    def get_mounts(self, pid: str = "self") -> List[Mount]:
        path = self.mountstats_path(pid)
        logger.debug("reading %s", path)
        with path.open("rb") as f:
            return parse_mount_stats(f)


def nfs_mounts(mounts: Iterable[Mount]) -> Iterator[Mount]:
    """Yield only the mounts which carry NFS statistics."""
    for mount in mounts:
        if isinstance(mount.stats, NFSMountStats):
            yield mount
