# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional

import pytest

from mountstats.monitoring.dataclass_utils import (
    flatten_dict_factory,
    Flattened,
    remove_none_dict_factory,
)
from mountstats.schemas.mount import Mount
from mountstats.schemas.nfs import (
    NFSBytesStats,
    NFSMountStats,
    NFSOperationStats,
    NFSTransportStats,
)
from typeguard import typechecked


@dataclass
class Item:
    name: str
    value: int


@dataclass
class Container:
    items: List[Item]
    labels: List[str]
    extra: Optional[Dict[str, int]] = None


def _read_op(requests: int) -> NFSOperationStats:
    return NFSOperationStats(
        operation="READ",
        requests=requests,
        transmissions=requests,
        major_timeouts=0,
        bytes_sent=100,
        bytes_received=200,
        cumulative_queue_time=timedelta(milliseconds=1500),
        cumulative_total_response_time=timedelta(milliseconds=20),
        cumulative_total_request_time=timedelta(milliseconds=30),
    )


NFS_MOUNT = Mount(
    device="server:/export",
    mount="/mnt",
    type="nfs",
    stats=NFSMountStats(
        stat_version="1.0",
        age=timedelta(seconds=60),
        bytes=NFSBytesStats(read=10),
        operations=(_read_op(3),),
        transport=NFSTransportStats(port=2049, idle_time=timedelta(seconds=5)),
    ),
)


@pytest.mark.parametrize(
    "obj, expected",
    [
        (
            Container(items=[Item("a", 1), Item("b", 2)], labels=["x", "y"]),
            {"items.a.value": 1, "items.b.value": 2, "labels.0": "x", "labels.1": "y"},
        ),
        (
            Container(items=[], labels=[], extra={"k": 3}),
            {"extra.k": 3},
        ),
        (
            Mount(device="proc", mount="/proc", type="proc"),
            {"device": "proc", "mount": "/proc", "type": "proc"},
        ),
    ],
)
@typechecked
def test_flatten_dict_factory(obj: Any, expected: Flattened) -> None:
    assert asdict(obj, dict_factory=flatten_dict_factory) == expected


def test_flatten_dict_factory_mount() -> None:
    flat = asdict(NFS_MOUNT, dict_factory=flatten_dict_factory)

    assert flat["device"] == "server:/export"
    assert flat["stats.stat_version"] == "1.0"
    assert flat["stats.kind"] == "nfs"
    assert flat["stats.age"] == 60.0
    assert flat["stats.bytes.read"] == 10
    assert flat["stats.bytes.write"] == 0
    assert flat["stats.operations.READ.requests"] == 3
    assert flat["stats.operations.READ.cumulative_queue_time"] == 1.5
    assert flat["stats.transport.idle_time"] == 5.0
    # jiffies stay a raw integer
    assert flat["stats.transport.connect_idle_time"] == 0
    assert not any(key.startswith("stats.operations.0") for key in flat)
    json.dumps(flat)


def test_remove_none_dict_factory() -> None:
    d = asdict(
        Mount(device="proc", mount="/proc", type="proc"),
        dict_factory=remove_none_dict_factory,
    )

    assert d == {"device": "proc", "mount": "/proc", "type": "proc"}


def test_remove_none_dict_factory_durations() -> None:
    d = asdict(NFS_MOUNT, dict_factory=remove_none_dict_factory)

    assert d["stats"]["age"] == 60.0
    assert d["stats"]["operations"][0]["operation"] == "READ"
    assert d["stats"]["operations"][0]["cumulative_queue_time"] == 1.5
    assert d["stats"]["transport"]["idle_time"] == 5.0
    assert json.loads(json.dumps(d))["stats"]["operations"][0]["requests"] == 3


def test_flatten_dict_factory_repeated_operation() -> None:
    stats = NFSMountStats(
        stat_version="1.1",
        operations=(_read_op(3), _read_op(5), _read_op(7)),
    )

    flat = asdict(stats, dict_factory=flatten_dict_factory)

    assert flat["operations.READ.requests"] == 3
    assert flat["operations.READ.1.requests"] == 5
    assert flat["operations.READ.2.requests"] == 7
    assert flat["operations.READ.1.cumulative_queue_time"] == 1.5
    assert sum(key.endswith(".requests") for key in flat) == 3
