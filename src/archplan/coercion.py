"""Weakly-typed field access with a single table of fallbacks.

Generator output is untrusted: any key may be missing or carry the wrong
type. Every accessor here returns the documented default instead of raising.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional

from .models.schema import SCHEMA_VERSION

__all__ = [
    "DEFAULTS",
    "as_int",
    "as_list",
    "as_mapping",
    "as_optional_str",
    "as_str",
    "as_str_list",
    "field",
]

DEFAULTS: Dict[str, Any] = {
    "project": "Untitled Project",
    "overview": "",
    "language": "rust",
    "testing_framework": "cargo test",
    "build_tool": "cargo",
    "task_id": "TASK-000",
    "priority": 3,
    "schema_version": SCHEMA_VERSION,
}


def field(record: Any, key: str) -> Any:
    """Return ``record[key]`` when ``record`` is a mapping, else ``None``."""
    if isinstance(record, Mapping):
        return record.get(key)
    return None


def as_str(value: Any, default: str) -> str:
    if isinstance(value, str):
        return value
    return default


def as_optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def as_int(value: Any, default: int) -> int:
    """Accept genuine integers only; bools, floats and numeric strings fall back."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def as_str_list(value: Any) -> List[str]:
    """Return the string members of a JSON array, dropping anything else."""
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        return []
    return [item for item in value if isinstance(item, str)]


def as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    return {}


def as_list(value: Any) -> List[Any]:
    """Return a JSON array as a list, or an empty list for any other value."""
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        return []
    return list(value)
