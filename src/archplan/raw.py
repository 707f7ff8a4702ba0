"""Recover the raw ``{design, tasks}`` record from generator response text.

Recovery runs in order: the untouched text, the body of a Markdown fence,
the first balanced object or array with trailing commas removed, the same
candidates with typographic quotes straightened, and finally a Python
literal parse. The first candidate that parses wins, so well-formed JSON is
never rewritten.
"""

from __future__ import annotations

import ast
import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import ArtifactIOError, InputShapeError

__all__ = ["load_raw_record", "parse_raw_record", "parse_raw_text"]

_FENCE = re.compile(r"\A```[^\n]*\n(?P<body>.*?)```", re.DOTALL)
_TRAILING_COMMA = re.compile(r",\s*(?=[}\]])")
_CLOSERS = {"{": "}", "[": "]"}
_TYPOGRAPHIC_QUOTES = str.maketrans(
    {
        "\u201c": '"',
        "\u201d": '"',
        "\u2018": "'",
        "\u2019": "'",
        "\ufeff": "",
    }
)


def parse_raw_text(text: str) -> Any:
    """Parse generator output, repairing it only when strict JSON fails."""
    stripped = text.strip()
    if not stripped:
        raise InputShapeError("generator response is empty")

    candidates = _recovery_candidates(stripped)
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    for candidate in candidates:
        try:
            literal = ast.literal_eval(candidate)
        except (SyntaxError, ValueError, TypeError, MemoryError, RecursionError):
            continue
        return _jsonable(literal)

    raise InputShapeError(f"generator response is not valid JSON: {stripped[:200]}")


def parse_raw_record(text: str) -> Mapping[str, Any]:
    """Parse ``text`` and require a top-level object."""
    record = parse_raw_text(text)
    if not isinstance(record, Mapping):
        raise InputShapeError(f"expected a top-level object, got {type(record).__name__}")
    return record


def load_raw_record(path: Path | str) -> Mapping[str, Any]:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise ArtifactIOError(source, f"Failed to read generator output: {error}") from error
    return parse_raw_record(text)


def _recovery_candidates(text: str) -> list[str]:
    candidates: list[str] = []
    for source in (text, text.translate(_TYPOGRAPHIC_QUOTES).strip()):
        body = _unfence(source)
        block = _first_balanced_block(body)
        for candidate in (source, body, _TRAILING_COMMA.sub("", block) if block else None):
            if candidate and candidate not in candidates:
                candidates.append(candidate)
    return candidates


def _unfence(text: str) -> str:
    match = _FENCE.match(text)
    return match.group("body").strip() if match else text


def _first_balanced_block(text: str) -> str | None:
    """Return the first ``{...}`` or ``[...]`` span, skipping brackets inside strings."""
    starts = [index for index in (text.find("{"), text.find("[")) if index >= 0]
    if not starts:
        return None
    start = min(starts)

    pending: list[str] = []
    in_string = False
    escaped = False
    for offset, char in enumerate(text[start:], start):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in _CLOSERS:
            pending.append(_CLOSERS[char])
        elif pending and char == pending[-1]:
            pending.pop()
            if not pending:
                return text[start : offset + 1]
    return None


def _jsonable(value: Any) -> Any:
    """Map a Python literal onto the JSON value space."""
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)
