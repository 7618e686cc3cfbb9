"""Markup events consumed by the portable-text writer.

The stream mirrors a pull parser: container tags arrive as ``Start``/``End``
pairs, leaf content as ``Text``, ``Code``, ``Html`` and the break events.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TagKind(str, Enum):
    PARAGRAPH = "paragraph"
    BLOCK_QUOTE = "block_quote"
    CODE_BLOCK = "code_block"
    HEADING = "heading"
    LIST = "list"
    ITEM = "item"
    LINK = "link"
    IMAGE = "image"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    STRIKETHROUGH = "strikethrough"
    FOOTNOTE_DEFINITION = "footnote_definition"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"


@dataclass(frozen=True)
class Tag:
    """A container tag and the attributes its kind uses.

    ``level`` is set for headings, ``ordered``/``start`` for lists,
    ``fenced``/``language`` for code blocks, ``href``/``title`` for links and
    images, ``label`` for footnote definitions.
    """

    kind: TagKind
    level: int = 0
    ordered: bool = False
    start: int | None = None
    fenced: bool = False
    language: str | None = None
    href: str = ""
    title: str = ""
    label: str = ""


@dataclass(frozen=True)
class Event:
    """Base class for stream events."""


@dataclass(frozen=True)
class Start(Event):
    tag: Tag


@dataclass(frozen=True)
class End(Event):
    tag: Tag


@dataclass(frozen=True)
class Text(Event):
    text: str


@dataclass(frozen=True)
class Code(Event):
    text: str


@dataclass(frozen=True)
class Html(Event):
    text: str


@dataclass(frozen=True)
class SoftBreak(Event):
    pass


@dataclass(frozen=True)
class HardBreak(Event):
    pass


@dataclass(frozen=True)
class Rule(Event):
    pass


@dataclass(frozen=True)
class FootnoteReference(Event):
    label: str


@dataclass(frozen=True)
class TaskListMarker(Event):
    checked: bool


def start(kind: TagKind, **attrs) -> Start:
    return Start(Tag(kind, **attrs))


def end(kind: TagKind, **attrs) -> End:
    return End(Tag(kind, **attrs))
