# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import pytest

from mountstats.monitoring.coerce import parse_int, parse_ints
from mountstats.monitoring.errors import InvalidIntegerError, MountStatsParseError
from typeguard import typechecked


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0", 0),
        ("42", 42),
        ("-1", -1),
        ("+7", 7),
        ("18446744073709551615", 18446744073709551615),
    ],
)
@typechecked
def test_parse_int(value: str, expected: int) -> None:
    assert parse_int(value) == expected


@pytest.mark.parametrize("value", ["", "1.5", "1_000", " 1", "0x10", "abc", "1e3"])
@typechecked
def test_parse_int_invalid(value: str) -> None:
    with pytest.raises(InvalidIntegerError) as exc_info:
        parse_int(value)
    assert exc_info.value.token == value


def test_parse_ints_reports_the_whole_line() -> None:
    tokens = ["1", "2", "x", "4"]

    with pytest.raises(MountStatsParseError) as exc_info:
        parse_ints(tokens)

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.tokens == tokens  # type: ignore[attr-defined]
    assert "'x'" in str(exc_info.value)
