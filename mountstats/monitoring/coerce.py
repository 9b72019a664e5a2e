# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import re
from typing import Any, Dict, List, Sequence

from mountstats.monitoring.errors import InvalidIntegerError
from typeguard import typechecked

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_int(s: str, tokens: Sequence[str] = ()) -> int:
    """Parse a base 10 integer token. `tokens` is the line the token came from
    and only used for error reporting.

    Unlike `int`, underscores and surrounding whitespace are rejected.

    Examples:
    >>> parse_int('42')
    42
    >>> parse_int('-1')
    -1
    """
    if _INTEGER.fullmatch(s) is None:
        raise InvalidIntegerError(s, tokens or [s])
    return int(s)


def parse_ints(tokens: Sequence[str]) -> List[int]:
    return [parse_int(t, tokens) for t in tokens]


@typechecked
def ensure_dict(x: Any) -> Dict[str, Any]:
    return x
