# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
from dataclasses import fields, is_dataclass
from datetime import timedelta
from typing import Final

BaseType = int | float | str | bool
NonFlattened = object
FlattenedOrBaseType = dict[str, BaseType] | BaseType
Flattened = dict[str, BaseType]

# fields whose value replaces the list index when flattening
KEY_FIELDS: Final = ("name", "operation")


def _key_of(obj: object) -> str | None:
    for key_field in KEY_FIELDS:
        if isinstance(obj, dict):
            if key_field in obj:
                return str(obj[key_field])
        elif (value := getattr(obj, key_field, None)) is not None:
            return str(value)
    return None


def asdict_recursive(obj: NonFlattened, key: str = "") -> FlattenedOrBaseType:
    # somewhat inspired by _asdict_inner https://github.com/python/cpython/blob/3.13/Lib/dataclasses.py#L1362
    results = {}
    if is_dataclass(obj):
        if name := _key_of(obj):
            key += "." + name
        for field in fields(obj):
            if field.name in KEY_FIELDS:
                continue
            value = getattr(obj, field.name)
            if value is None:
                continue
            new_key = f"{key}.{field.name}" if key else field.name
            flat_result = asdict_recursive(value, new_key)
            if isinstance(flat_result, dict):
                results.update(flat_result)
            else:
                results[new_key] = flat_result
    elif isinstance(obj, dict):
        for key_field in KEY_FIELDS:
            if key_field in obj:
                key += "." + str(obj[key_field])
                del obj[key_field]
                break
        for k, value in obj.items():
            if value is None:
                continue
            new_key = f"{key}.{k}" if key else str(k)
            flat_result = asdict_recursive(value, new_key)
            if isinstance(flat_result, dict):
                results.update(flat_result)
            else:
                results[new_key] = flat_result
    elif isinstance(obj, (list, tuple)):
        seen: set[str] = set()
        for i, value in enumerate(obj):
            if value is None:
                continue
            name = _key_of(value)
            new_key = key if name is not None else key + f".{i}"
            flat_result = asdict_recursive(value, new_key)
            if name is not None:
                if name in seen and isinstance(flat_result, dict):
                    # repeated names keep their list index: <key>.<name>.<i>
                    prefix = f"{key}.{name}"
                    flat_result = {
                        f"{prefix}.{i}{k[len(prefix) :]}": v
                        for k, v in flat_result.items()
                    }
                seen.add(name)
            if isinstance(flat_result, dict):
                results.update(flat_result)
            else:
                results[new_key] = flat_result
    elif isinstance(obj, timedelta):
        return obj.total_seconds()
    elif isinstance(obj, (str, int, float, bool)):
        return obj
    else:
        raise TypeError(f"{type(obj)} is not supported for asdict_recursive.")
    return results


def flatten_dict_factory(pairs: list[tuple[str, object]]) -> Flattened:
    """
    Custom dict factory to be passed to dataclasses's asdict https://docs.python.org/3/library/dataclasses.html#dataclasses.asdict

    Things that are special about this dict_factory:
        1. It flattens a dictionary with . separated naming at the top level.
            this:
            {
                stats: {
                    age: 1,
                    stat_version: "1.1",
                }
            }
            becomes:
            {"stats.age" = 1, "stats.stat_version": "1.1"}

        2. It flattens lists with . separated list indexes (unless the list object matches rule 3)
            this:
            {
                obj1: ['a', 'b']
            }
            becomes:
            {"obj1.0" = 'a', "obj1.1": 'b'}

        3. It flattens dicts and dataclasses taking their `name` or `operation`
           field (if present) as one of the `.` separated keys, in which case
           list objects won't have the index:
            this:
            {
                operations: [NFSOperationStats(operation="READ", requests=3, ...)]
            }
            becomes:
            {"operations.READ.requests" = 3, ...}
           A name repeated within the same list keeps its index after the name,
           e.g. a second READ becomes "operations.READ.1.requests".

        4. `timedelta` values become float seconds.
    """
    results = {}
    for key, value in pairs:
        if value is None:
            continue
        flat_result = asdict_recursive(value, key)
        if isinstance(flat_result, dict):
            results.update(flat_result)
        else:
            results[key] = flat_result
    return results


def remove_none_dict_factory(
    pairs: list[tuple[str, object]],
) -> dict[str, object]:
    """Drop `None` values and render `timedelta` values as float seconds, so
    the result can be passed to `json.dumps`.
    """
    return {
        key: value.total_seconds() if isinstance(value, timedelta) else value
        for key, value in pairs
        if value is not None
    }
