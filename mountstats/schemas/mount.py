# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import dataclass
from typing import Optional, Union

from mountstats.schemas.nfs import NFSMountStats

# Filesystem specific statistics. Every variant carries a `kind` tag.
MountStats = Union[NFSMountStats]


@dataclass(frozen=True)
class Mount:
    """https://man7.org/linux/man-pages/man5/proc.5.html"""

    device: str
    mount: str
    type: str
    stats: Optional[MountStats] = None
