"""Shared aggregation helpers for provider responses."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

SEPARATOR = "\n"


class TextBlock(Protocol):
    """A content block: a content-type tag and its text."""

    @property
    def content_type(self) -> str: ...

    @property
    def text(self) -> str: ...


def join_blocks(
    blocks: Iterable[TextBlock],
    is_visible: Callable[[TextBlock], bool],
) -> str:
    """Join the text of visible blocks, in order, without trimming.

    Whitespace is kept so that intentional blank lines inside a block survive;
    callers trim once, after joining every unit.
    """
    return SEPARATOR.join(b.text for b in blocks if is_visible(b))


def join_units(units: Iterable[str]) -> str:
    """Join already-joined unit strings and trim the final result once.

    An empty unit in the middle of *units* produces a blank line; empty
    units at either end are absorbed by the trim.
    """
    return SEPARATOR.join(units).strip()
