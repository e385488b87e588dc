"""
Parsing (raw input line -> keyword + key/value arguments).

A command line looks like:

    average c/CS2113T a/Midterms

- the first word is the command keyword
- the remaining text (the "tail") holds key/value pairs written as <key>/<value>

Rules:
- a key marker counts only at the start of the tail or after whitespace
- a value runs until the next recognised marker (or the end of the line)
- unrecognised markers stay part of the value
- a repeated key keeps its last value
"""

from __future__ import annotations

import math
import re
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from classbook.errors import InvalidArgumentError


def split_command(line: str) -> Tuple[str, str]:
    """
    Split a raw line into (keyword, tail). The keyword is lower-cased.
    """
    parts = (line or "").strip().split(maxsplit=1)
    if not parts:
        return "", ""
    keyword = parts[0].lower()
    tail = parts[1].strip() if len(parts) > 1 else ""
    return keyword, tail


def _marker_pattern(keys: Iterable[str]) -> re.Pattern[str]:
    # longest keys first so "ab/" is not read as "a" followed by "b/"
    alternatives = "|".join(re.escape(k) for k in sorted(set(keys), key=len, reverse=True))
    return re.compile(rf"(?:^|(?<=\s))({alternatives})/")


def parse_arguments(tail: str, keys: Iterable[str]) -> Mapping[str, str]:
    """
    Extract a read-only key -> value mapping from the argument tail.

    Only keys listed in `keys` are recognised. Text before the first marker
    is ignored. Values are stripped and may be empty.
    """
    keys = list(keys)
    text = tail or ""
    if not keys or not text.strip():
        return MappingProxyType({})

    matches = list(_marker_pattern(keys).finditer(text))
    values: dict[str, str] = {}
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        values[m.group(1)] = text[m.end() : end].strip()

    return MappingProxyType(values)


def parse_number(text: str, label: str) -> float:
    """
    Convert user text into a finite float.
    Raises InvalidArgumentError naming `label` for anything else.
    """
    try:
        value = float((text or "").strip())
    except ValueError:
        raise InvalidArgumentError(f"Invalid {label}: {text!r} is not a number.") from None
    if math.isnan(value) or math.isinf(value):
        raise InvalidArgumentError(f"Invalid {label}: {text!r} is not a finite number.")
    return value
