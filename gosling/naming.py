"""Conversion of free-form migration names into CamelCase and snake_case."""

from __future__ import annotations

import enum
import unicodedata
from collections.abc import Iterator


class _State(enum.Enum):
    IDLE = 0
    FIRST_ALPHA_NUM = 1
    ALPHA_NUM = 2
    DELIMITER = 3


def _is_alpha_num(ch: str) -> bool:
    return unicodedata.category(ch)[0] in ("L", "N")


def _advance(state: _State, ch: str) -> _State:
    alpha_num = _is_alpha_num(ch)
    if state is _State.IDLE:
        return _State.FIRST_ALPHA_NUM if alpha_num else _State.IDLE
    if state is _State.FIRST_ALPHA_NUM or state is _State.ALPHA_NUM:
        return _State.ALPHA_NUM if alpha_num else _State.DELIMITER
    return _State.FIRST_ALPHA_NUM if alpha_num else _State.IDLE


def _walk(text: str) -> Iterator[tuple[_State, str]]:
    state = _State.IDLE
    for ch in text:
        state = _advance(state, ch)
        yield state, ch


def _upper(ch: str) -> str:
    converted = ch.upper()
    return converted if len(converted) == 1 else ch


def _lower(ch: str) -> str:
    converted = ch.lower()
    return converted if len(converted) == 1 else ch


def camel_case(text: str) -> str:
    """Return ``text`` as CamelCase, dropping every non-alphanumeric run."""
    parts = []
    for state, ch in _walk(text):
        if state is _State.FIRST_ALPHA_NUM:
            parts.append(_upper(ch))
        elif state is _State.ALPHA_NUM:
            parts.append(_lower(ch))
    return "".join(parts)


def snake_case(text: str) -> str:
    """Return ``text`` as lower snake_case."""
    parts = []
    state = _State.IDLE
    for state, ch in _walk(text):
        if state in (_State.FIRST_ALPHA_NUM, _State.ALPHA_NUM):
            parts.append(_lower(ch))
        elif state is _State.DELIMITER:
            parts.append("_")
    result = "".join(parts)
    if state is _State.IDLE and result.endswith("_"):
        return result[:-1]
    return result