# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""NFS client statistics as reported in /proc/[pid]/mountstats.

See https://utcc.utoronto.ca/~cks/space/blog/linux/NFSMountstatsIndex for the
meaning of the individual counters.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Literal, Tuple


@dataclass(frozen=True)
class NFSBytesStats:
    read: int = 0
    write: int = 0
    direct_read: int = 0
    direct_write: int = 0
    read_total: int = 0
    write_total: int = 0
    # pages read/written through mmap()'d files
    read_pages: int = 0
    write_pages: int = 0


@dataclass(frozen=True)
class NFSEventsStats:
    inode_revalidate: int = 0
    dnode_revalidate: int = 0
    data_invalidate: int = 0
    attribute_invalidate: int = 0
    vfs_open: int = 0
    vfs_lookup: int = 0
    vfs_access: int = 0
    vfs_update_page: int = 0
    vfs_read_page: int = 0
    vfs_read_pages: int = 0
    vfs_write_page: int = 0
    vfs_write_pages: int = 0
    vfs_getdents: int = 0
    vfs_setattr: int = 0
    vfs_flush: int = 0
    vfs_fsync: int = 0
    vfs_lock: int = 0
    vfs_file_release: int = 0
    # never incremented by current kernels
    congestion_wait: int = 0
    truncation: int = 0
    write_extension: int = 0
    silly_rename: int = 0
    short_read: int = 0
    short_write: int = 0
    jukebox_delay: int = 0
    pnfs_read: int = 0
    pnfs_write: int = 0


@dataclass(frozen=True)
class NFSOperationStats:
    operation: str
    requests: int
    transmissions: int
    major_timeouts: int
    bytes_sent: int
    bytes_received: int
    cumulative_queue_time: timedelta
    cumulative_total_response_time: timedelta
    cumulative_total_request_time: timedelta


@dataclass(frozen=True)
class NFSTransportStats:
    port: int = 0
    bind: int = 0
    connect: int = 0
    # jiffies, left unconverted
    connect_idle_time: int = 0
    idle_time: timedelta = timedelta(0)
    sends: int = 0
    receives: int = 0
    bad_transaction_ids: int = 0
    cumulative_active_requests: int = 0
    cumulative_backlog: int = 0
    # only reported with stat version 1.1
    maximum_rpc_slots_used: int = 0
    cumulative_sending_queue: int = 0
    cumulative_pending_queue: int = 0


@dataclass(frozen=True)
class NFSMountStats:
    stat_version: str
    age: timedelta = timedelta(0)
    bytes: NFSBytesStats = field(default_factory=NFSBytesStats)
    events: NFSEventsStats = field(default_factory=NFSEventsStats)
    operations: Tuple[NFSOperationStats, ...] = ()
    transport: NFSTransportStats = field(default_factory=NFSTransportStats)
    kind: Literal["nfs"] = field(default="nfs", init=False)
