from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Union

SPAN_TYPE = "span"
IMAGE_ALT_TYPE = "image-alt"


class Decorator(str, Enum):
    """Static inline decorators, valued by their portable-text mark name."""

    EMPHASIS = "em"
    STRONG = "strong"
    STRIKE = "strike"
    UNDERLINE = "underline"
    CODE = "code"


@dataclass(frozen=True)
class LinkReference:
    key: str


@dataclass(frozen=True)
class AssetReference:
    key: str


Mark = Union[Decorator, LinkReference, AssetReference]


def mark_value(mark: Mark) -> str:
    """Return the string stored in a span's ``marks`` array."""
    if isinstance(mark, Decorator):
        return mark.value
    return mark.key


class ListItemType(str, Enum):
    BULLET = "bullet"
    NUMBERED = "numbered"


@dataclass
class Span:
    text: str
    marks: List[Mark] = field(default_factory=list)
    type: str = SPAN_TYPE


@dataclass(frozen=True)
class PictureSource:
    srcset: str
    width: int | None = None
    height: int | None = None
    mime_type: str | None = None
    media: str | None = None


@dataclass(frozen=True)
class Picture:
    src: str
    alt: str = ""
    width: int | None = None
    height: int | None = None
    sources: tuple[PictureSource, ...] = ()


@dataclass(frozen=True)
class MarkDef:
    """Base class for out-of-line mark definitions."""

    key: str


@dataclass(frozen=True)
class LinkDef(MarkDef):
    href: str


@dataclass(frozen=True)
class ImageDef(MarkDef):
    src: str
    picture: Picture
    caption: str | None = None


@dataclass
class Block:
    """Base class for block-level nodes."""


@dataclass
class TextBlock(Block):
    style: str = "normal"
    children: List[Span] = field(default_factory=list)
    mark_defs: List[MarkDef] = field(default_factory=list)


@dataclass
class ListItemBlock(TextBlock):
    level: int = 1
    list_item: ListItemType = ListItemType.BULLET


@dataclass
class CodeBlock(Block):
    code: str
    language: str | None = None


@dataclass
class Document:
    blocks: List[Block]
    metadata: dict[str, Any] | None = None
