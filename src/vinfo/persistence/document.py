"""Document model of the state file.

A document is a JSON value in its native Python form: ``None``, ``bool``,
``int``/``float``, ``str``, ``list`` and ``dict`` (which keeps insertion
order).  Loading never trusts the shape of a document, so every read goes
through the ``get_*`` accessors below, which return ``None`` when a key is
missing or holds a value of another type instead of raising.
"""
from __future__ import annotations

import copy
import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import DocumentError

logger = logging.getLogger(__name__)

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]
JsonObject = Dict[str, Any]
JsonArray = List[Any]


def _get(obj: Optional[JsonObject], key: str) -> Any:
    if not isinstance(obj, dict):
        return None
    return obj.get(key)


def get_bool(obj: Optional[JsonObject], key: str) -> Optional[bool]:
    value = _get(obj, key)
    return value if isinstance(value, bool) else None


def get_number(obj: Optional[JsonObject], key: str) -> Optional[float]:
    """Finite number stored under ``key``; ``inf`` and ``nan`` count as absent."""
    value = _get(obj, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def get_int(obj: Optional[JsonObject], key: str) -> Optional[int]:
    value = get_number(obj, key)
    return None if value is None else int(value)


def get_str(obj: Optional[JsonObject], key: str) -> Optional[str]:
    value = _get(obj, key)
    return value if isinstance(value, str) else None


def get_array(obj: Optional[JsonObject], key: str) -> Optional[JsonArray]:
    value = _get(obj, key)
    return value if isinstance(value, list) else None


def get_object(obj: Optional[JsonObject], key: str) -> Optional[JsonObject]:
    value = _get(obj, key)
    return value if isinstance(value, dict) else None


def array_objects(arr: Optional[JsonArray]) -> List[JsonObject]:
    """Object elements of an array; other elements are skipped."""
    if not isinstance(arr, list):
        return []
    return [item for item in arr if isinstance(item, dict)]


def array_strings(arr: Optional[JsonArray]) -> List[str]:
    if not isinstance(arr, list):
        return []
    return [item for item in arr if isinstance(item, str)]


def array_object_at(arr: Optional[JsonArray], index: int) -> Optional[JsonObject]:
    if not isinstance(arr, list) or not 0 <= index < len(arr):
        return None
    item = arr[index]
    return item if isinstance(item, dict) else None


def add_array(obj: JsonObject, key: str) -> JsonArray:
    arr: JsonArray = []
    obj[key] = arr
    return arr


def add_object(obj: JsonObject, key: str) -> JsonObject:
    child: JsonObject = {}
    obj[key] = child
    return child


def append_object(arr: JsonArray) -> JsonObject:
    child: JsonObject = {}
    arr.append(child)
    return child


def deep_copy(value: JsonValue) -> JsonValue:
    return copy.deepcopy(value)


def encode_document(doc: JsonObject) -> str:
    """Encode a document to pretty-printed JSON, keeping key order."""
    return json.dumps(doc, ensure_ascii=False, indent=2)


def decode_document(text: str) -> JsonObject:
    """Decode JSON text; the root must be an object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DocumentError("Document root must be a JSON object")
    return data


def read_document(path: Path) -> Optional[JsonObject]:
    """Read and decode a document, returning None when that isn't possible."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        logger.debug("No state document at %s", path)
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read state document %s: %s", path, exc)
        return None
    try:
        return decode_document(text)
    except DocumentError as exc:
        logger.warning("Ignoring corrupt state document %s: %s", path, exc)
        return None


def write_document(path: Path, doc: JsonObject) -> None:
    """Write a document and flush it to disk.  Raises OSError on failure."""
    payload = encode_document(doc)
    with open(path, "w", encoding="utf-8") as f:
        f.write(payload)
        f.write("\n")
        f.flush()
        os.fsync(f.fileno())
