# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Errors raised while decoding /proc/[pid]/mountstats.

I/O errors raised by the underlying stream are never wrapped by these types.
"""

from typing import Sequence


class MountStatsParseError(ValueError):
    """
    Base exception type for malformed mountstats input
    that can be handled by the caller.
    """


class InvalidDeviceEntryError(MountStatsParseError):
    """Raised if a `device ... mounted on ... with fstype ...` line is malformed."""

    def __init__(self, tokens: Sequence[str]) -> None:
        super().__init__(f"invalid device entry: {list(tokens)}")
        self.tokens = list(tokens)


class UnsupportedFilesystemError(MountStatsParseError):
    """Raised if a mount carries statistics for a filesystem type we cannot parse."""

    def __init__(self, fstype: str) -> None:
        super().__init__(f"cannot parse mount stats for fstype {fstype!r}")
        self.fstype = fstype


class InvalidStatsError(MountStatsParseError):
    """Raised if a statistics line has an unexpected number of fields."""

    def __init__(self, kind: str, tokens: Sequence[str]) -> None:
        super().__init__(f"invalid NFS {kind} stats: {list(tokens)}")
        self.kind = kind
        self.tokens = list(tokens)


class UnsupportedStatVersionError(MountStatsParseError):
    def __init__(self, stat_version: str) -> None:
        super().__init__(
            f"unrecognized NFS transport stats version: {stat_version!r}"
        )
        self.stat_version = stat_version


class InvalidIntegerError(MountStatsParseError):
    def __init__(self, token: str, tokens: Sequence[str]) -> None:
        super().__init__(f"expected integer but got {token!r} in {list(tokens)}")
        self.token = token
        self.tokens = list(tokens)


class DurationOutOfRangeError(MountStatsParseError):
    """Raised if a counter is too large to be represented as a `timedelta`."""

    def __init__(self, value: int, tokens: Sequence[str]) -> None:
        super().__init__(f"duration {value} out of range in {list(tokens)}")
        self.value = value
        self.tokens = list(tokens)
