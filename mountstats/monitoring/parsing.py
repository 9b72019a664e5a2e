# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Decoder for /proc/[pid]/mountstats.

The report is a sequence of device entries, each optionally followed by a
block of statistics terminated by a blank line:

    device <dev> mounted on <path> with fstype <type> [statvers=<ver>]
    age: <seconds>
    bytes: <8 counters>
    events: <27 counters>
    xprt: <proto> <10 or 13 counters>
    per-op
    <OP>: <8 counters>
    ...
    <blank line>

All parsers share one iterator over the tokenized lines and only ever move
forward. Any malformed line aborts the whole parse with a
`MountStatsParseError`; errors raised while reading the stream propagate as is.
"""

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Final, Iterable, Iterator, List, Sequence, Tuple, Union

from mountstats.monitoring.coerce import parse_int, parse_ints
from mountstats.monitoring.errors import (
    DurationOutOfRangeError,
    InvalidDeviceEntryError,
    InvalidStatsError,
    UnsupportedFilesystemError,
    UnsupportedStatVersionError,
)
from mountstats.schemas.mount import Mount
from mountstats.schemas.nfs import (
    NFSBytesStats,
    NFSEventsStats,
    NFSMountStats,
    NFSOperationStats,
    NFSTransportStats,
)

logger = logging.getLogger(__name__)

DEVICE_ENTRY_LEN: Final = 8
FIELD_BYTES_LEN: Final = 8
FIELD_EVENTS_LEN: Final = 27
FIELD_PER_OP_LEN: Final = 9

STAT_VERSION_10: Final = "1.0"
STAT_VERSION_11: Final = "1.1"
FIELD_TRANSPORT_LEN: Final = {
    STAT_VERSION_10: 10,
    STAT_VERSION_11: 13,
}

NFS_TYPES: Final = frozenset({"nfs", "nfs4"})

_DEVICE: Final = "device"
_STAT_VERSION_PREFIX: Final = "statvers="
# (index, expected token) pairs every device entry must match
_DEVICE_ANCHORS: Final = (
    (0, "device"),
    (2, "mounted"),
    (3, "on"),
    (5, "with"),
    (6, "fstype"),
)

_FIELD_AGE: Final = "age:"
_FIELD_BYTES: Final = "bytes:"
_FIELD_EVENTS: Final = "events:"
_FIELD_TRANSPORT: Final = "xprt:"
_FIELD_PER_OP: Final = "per-op"

Line = Union[str, bytes]


def _tokenize(lines: Iterable[Line]) -> Iterator[List[str]]:
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="surrogateescape")
        yield line.split()


def _duration(
    ss: Sequence[str], *, seconds: int = 0, milliseconds: int = 0
) -> timedelta:
    try:
        return timedelta(seconds=seconds, milliseconds=milliseconds)
    except OverflowError:
        raise DurationOutOfRangeError(seconds or milliseconds, ss) from None


def parse_mount_stats(lines: Iterable[Line]) -> List[Mount]:
    """Parse a /proc/[pid]/mountstats report into a list of mounts, in report
    order. Statistics are attached to NFS mounts which report them.

    `lines` is anything which yields lines, e.g. an open text or binary file.
    """
    mounts: List[Mount] = []
    fields = _tokenize(lines)
    for ss in fields:
        # only device entries start a record; everything else is skipped
        if not ss or ss[0] != _DEVICE:
            continue

        mount = parse_mount(ss)

        if len(ss) > DEVICE_ENTRY_LEN:
            if mount.type not in NFS_TYPES:
                raise UnsupportedFilesystemError(mount.type)

            stat_version = ss[DEVICE_ENTRY_LEN].removeprefix(_STAT_VERSION_PREFIX)
            logger.debug(
                "parsing stats version %s for %s on %s",
                stat_version,
                mount.device,
                mount.mount,
            )
            mount = replace(mount, stats=parse_mount_stats_nfs(fields, stat_version))

        mounts.append(mount)

    logger.debug("parsed %d mounts", len(mounts))
    return mounts


def parse_mount(ss: Sequence[str]) -> Mount:
    """Parse the tokens of a `device <dev> mounted on <mount> with fstype <type>`
    line. Trailing tokens are ignored.
    """
    if len(ss) < DEVICE_ENTRY_LEN:
        raise InvalidDeviceEntryError(ss)

    for i, expected in _DEVICE_ANCHORS:
        if ss[i] != expected:
            raise InvalidDeviceEntryError(ss)

    return Mount(device=ss[1], mount=ss[4], type=ss[7])


def parse_mount_stats_nfs(
    fields: Iterator[List[str]], stat_version: str
) -> NFSMountStats:
    """Consume the statistics block following an NFS device entry.

    Stops at the blank line ending the block, or after the per-op block which
    always comes last. A blank line before any `per-op` line ends the block
    without operations and leaves the following lines untouched.
    """
    age = timedelta(0)
    bytes_stats = NFSBytesStats()
    events_stats = NFSEventsStats()
    transport_stats = NFSTransportStats()
    per_op = False

    for ss in fields:
        if not ss:
            break
        key = ss[0]
        if key == _FIELD_PER_OP:
            # per-op stats are always last, so parse them separately
            per_op = True
            break
        if len(ss) < 2:
            raise InvalidStatsError("mount", ss)

        if key == _FIELD_AGE:
            age = _duration(ss, seconds=parse_int(ss[1], ss))
        elif key == _FIELD_BYTES:
            bytes_stats = parse_nfs_bytes_stats(ss[1:])
        elif key == _FIELD_EVENTS:
            events_stats = parse_nfs_events_stats(ss[1:])
        elif key == _FIELD_TRANSPORT:
            if len(ss) < 3:
                raise InvalidStatsError("transport", ss)
            transport_stats = parse_nfs_transport_stats(ss[2:], stat_version)
        else:
            logger.debug("ignoring unrecognized NFS stats line: %s", ss)

    return NFSMountStats(
        stat_version=stat_version,
        age=age,
        bytes=bytes_stats,
        events=events_stats,
        operations=parse_nfs_operation_stats(fields) if per_op else (),
        transport=transport_stats,
    )


def parse_nfs_bytes_stats(ss: Sequence[str]) -> NFSBytesStats:
    if len(ss) != FIELD_BYTES_LEN:
        raise InvalidStatsError("bytes", ss)
    return NFSBytesStats(*parse_ints(ss))


def parse_nfs_events_stats(ss: Sequence[str]) -> NFSEventsStats:
    if len(ss) != FIELD_EVENTS_LEN:
        raise InvalidStatsError("events", ss)
    return NFSEventsStats(*parse_ints(ss))


def parse_nfs_operation_stats(
    fields: Iterator[List[str]],
) -> Tuple[NFSOperationStats, ...]:
    """Consume per-op lines such as `READ: 1 2 3 4 5 6 7 8` until a blank line
    or the end of the stream. The last three counters are milliseconds.
    """
    ops: List[NFSOperationStats] = []
    for ss in fields:
        if not ss:
            break
        if len(ss) != FIELD_PER_OP_LEN:
            raise InvalidStatsError("per-operation", ss)

        ns = parse_ints(ss[1:])
        ops.append(
            NFSOperationStats(
                operation=ss[0].removesuffix(":"),
                requests=ns[0],
                transmissions=ns[1],
                major_timeouts=ns[2],
                bytes_sent=ns[3],
                bytes_received=ns[4],
                cumulative_queue_time=_duration(ss, milliseconds=ns[5]),
                cumulative_total_response_time=_duration(ss, milliseconds=ns[6]),
                cumulative_total_request_time=_duration(ss, milliseconds=ns[7]),
            )
        )
    return tuple(ops)


def parse_nfs_transport_stats(
    ss: Sequence[str], stat_version: str
) -> NFSTransportStats:
    """Parse the counters of an `xprt:` line, i.e. everything after the
    protocol name. Version 1.0 lacks the last three counters, which are
    reported as zero.

    Only the idle time is converted to a duration. The connect idle time is in
    jiffies and stays a raw integer.
    """
    try:
        expected_len = FIELD_TRANSPORT_LEN[stat_version]
    except KeyError:
        raise UnsupportedStatVersionError(stat_version) from None
    if len(ss) != expected_len:
        raise InvalidStatsError(f"transport {stat_version}", ss)

    ns = parse_ints(ss)
    ns += [0] * (FIELD_TRANSPORT_LEN[STAT_VERSION_11] - len(ns))
    return NFSTransportStats(
        port=ns[0],
        bind=ns[1],
        connect=ns[2],
        connect_idle_time=ns[3],
        idle_time=_duration(ss, seconds=ns[4]),
        sends=ns[5],
        receives=ns[6],
        bad_transaction_ids=ns[7],
        cumulative_active_requests=ns[8],
        cumulative_backlog=ns[9],
        maximum_rpc_slots_used=ns[10],
        cumulative_sending_queue=ns[11],
        cumulative_pending_queue=ns[12],
    )
