# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from importlib import resources
from typing import Callable, List

import pytest

from mountstats.tests import data

SAMPLE_MOUNTSTATS = "sample-proc-mountstats.txt"


def read_data(name: str) -> bytes:
    return resources.files(data).joinpath(name).read_bytes()


@pytest.fixture
def sample_mountstats() -> bytes:
    return read_data(SAMPLE_MOUNTSTATS)


@pytest.fixture
def lines_of() -> Callable[[str], List[str]]:
    """Split a report into lines the way a text file iterates over them."""

    def split(report: str) -> List[str]:
        return report.splitlines(keepends=True)

    return split
