"""
Header normalization for uploaded catalog rows.

"Make Name", "make name" and "make_name" all map to `make_name`;
"Engine Horsepower Hp" maps to `engine_horsepower_hp`.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_key(key: str) -> str:
    return _WHITESPACE_RUN.sub("_", key.lower())


def normalize_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a copy of `row` with canonical snake_case keys. Values are untouched.
    """
    return {normalize_key(key): value for key, value in row.items()}
