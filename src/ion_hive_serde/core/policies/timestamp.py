"""
Offset de normalização para timestamps sem fuso (`ion.timestamp.serialization_offset`).

Formatos aceitos:
    - inteiro em minutos: `0`, `330`, `-480`
    - `Z`
    - `+HH:MM` / `-HH:MM`
"""

from __future__ import annotations

import re
from typing import List

from ..config.source import ConfigurationSource
from ..exceptions import ConfigurationError, InvalidOptionValueError, raise_if_any
from ._options import TIMESTAMP_OFFSET_KEY

DEFAULT_OFFSET_MINUTES = 0
_MAX_OFFSET_MINUTES = 24 * 60 - 1

_HHMM = re.compile(r"^(?P<sign>[+-])(?P<hours>\d{2}):(?P<minutes>\d{2})$")
_MINUTES = re.compile(r"^[+-]?\d+$")


def _invalid(raw: str, reason: str) -> InvalidOptionValueError:
    return InvalidOptionValueError(
        message=f"Invalid value for {TIMESTAMP_OFFSET_KEY}: {raw!r} ({reason})",
        details={"key": TIMESTAMP_OFFSET_KEY, "value": raw, "reason": reason},
        hint="Use minutes (e.g. 330), 'Z' or '+HH:MM'.",
    )


def resolve_timestamp_offset(source: ConfigurationSource) -> int:
    """Offset em minutos; default 0."""
    raw = source.get(TIMESTAMP_OFFSET_KEY)
    if raw is None:
        return DEFAULT_OFFSET_MINUTES

    errors: List[ConfigurationError] = []
    value = raw.strip()
    offset = DEFAULT_OFFSET_MINUTES

    if value == "Z":
        offset = 0
    elif _MINUTES.match(value):
        offset = int(value)
    else:
        m = _HHMM.match(value)
        if m is None:
            errors.append(_invalid(raw, "unrecognised format"))
        elif int(m.group("minutes")) > 59:
            errors.append(_invalid(raw, "minutes must be below 60"))
        else:
            offset = int(m.group("hours")) * 60 + int(m.group("minutes"))
            if m.group("sign") == "-":
                offset = -offset

    if not errors and abs(offset) > _MAX_OFFSET_MINUTES:
        errors.append(_invalid(raw, "offset must be within one day"))

    raise_if_any(errors)
    return offset
