# ABOUTME: orjson-backed helpers for reading snapshots and writing JSON reports
# ABOUTME: Dataclasses serialize natively; output is indented for diffable artifacts

import os
from typing import Any

import orjson


def load_json_file(path: str) -> Any:
    """Read and decode a JSON file. Raises OSError or orjson.JSONDecodeError."""
    with open(path, "rb") as f:
        return orjson.loads(f.read())


def dumps_json(data: Any) -> bytes:
    return orjson.dumps(data, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS | orjson.OPT_APPEND_NEWLINE)


def write_json_file(path: str, data: Any) -> int:
    """
    Write ``data`` (dicts, lists, dataclasses) to ``path`` as indented JSON.

    Returns:
        int: Number of bytes written
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    payload = dumps_json(data)
    with open(path, "wb") as f:
        f.write(payload)
    return len(payload)
