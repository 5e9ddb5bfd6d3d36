# common/json_utils.py
# -*- coding: utf-8 -*-
"""
Classification of user supplied agent configuration content.

The installer never rewrites a configuration it is given; these helpers only
decide how loudly to complain about it.
"""

import json
from enum import Enum
from typing import Optional, Tuple, Union


class JsonFileType(str, Enum):
    VALID_JSON = "VALID_JSON"
    MALFORMED_JSON = "MALFORMED_JSON"
    NOT_JSON = "NOT_JSON"


def _looks_like_json(text: str) -> bool:
    return text[:1] in ("{", "[")


def inspect_json_text(
    content: Union[str, bytes],
) -> Tuple[JsonFileType, Optional[str]]:
    """
    Classify ``content`` and describe the first problem, if any.

    Blank content is NOT_JSON. Content that starts like a JSON document
    (``{`` or ``[``) but fails to parse, or is not UTF-8, is MALFORMED_JSON;
    anything else that fails is NOT_JSON.

    Returns:
        A ``(kind, problem)`` tuple where ``problem`` is ``None`` for valid
        JSON and a short description otherwise.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            start = content.lstrip()[:1].decode("ascii", errors="replace")
            kind = (
                JsonFileType.MALFORMED_JSON
                if _looks_like_json(start)
                else JsonFileType.NOT_JSON
            )
            return kind, f"not UTF-8 text, {e.reason} at byte {e.start}"

    stripped = content.strip()
    if not stripped:
        return JsonFileType.NOT_JSON, "content is empty"
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        problem = f"line {e.lineno} column {e.colno}: {e.msg}"
        if _looks_like_json(stripped):
            return JsonFileType.MALFORMED_JSON, problem
        return JsonFileType.NOT_JSON, problem
    return JsonFileType.VALID_JSON, None
