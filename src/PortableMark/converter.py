"""Event-to-tree transducer producing portable-text blocks.

The writer pulls events one at a time and routes them to the block builder.
Image alt text and code block bodies are flattened by an inner loop that
reads ahead to the tag's own ``End`` event.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

from .assets import AssetResolver, IdentityResolver
from .builder import BlockBuilder
from .errors import ConversionError, ResolverFailure, StructuralImbalance, UnresolvedMarkReference
from .events import (
    Code,
    End,
    Event,
    FootnoteReference,
    HardBreak,
    Html,
    Rule,
    SoftBreak,
    Start,
    Tag,
    TagKind,
    TaskListMarker,
    Text,
)
from .model import (
    IMAGE_ALT_TYPE,
    AssetReference,
    Block,
    CodeBlock,
    Decorator,
    ImageDef,
    LinkDef,
    LinkReference,
    ListItemBlock,
    ListItemType,
    TextBlock,
)
from .registry import KeyGenerator
from .stacks import ListContext

log = logging.getLogger(__name__)

INLINE_DECORATORS = {
    TagKind.STRONG: Decorator.STRONG,
    TagKind.EMPHASIS: Decorator.EMPHASIS,
    TagKind.STRIKETHROUGH: Decorator.STRIKE,
}

STRUCTURAL_TAGS = {TagKind.PARAGRAPH, TagKind.HEADING, TagKind.ITEM, TagKind.BLOCK_QUOTE}

IGNORED_TAGS = {
    TagKind.FOOTNOTE_DEFINITION,
    TagKind.TABLE,
    TagKind.TABLE_HEAD,
    TagKind.TABLE_ROW,
    TagKind.TABLE_CELL,
}


class PortableTextWriter:
    def __init__(
        self,
        events: Iterable[Event],
        resolver: AssetResolver | None = None,
        keys: KeyGenerator | None = None,
    ) -> None:
        self._events: Iterator[Event] = iter(events)
        self.resolver = resolver or IdentityResolver()
        self.builder = BlockBuilder(keys)
        self.lists = ListContext()
        # key of each open link, None when it opened outside any block
        self.links: List[str | None] = []
        # paragraphs, headings, items and quotes, outermost first
        self.open_tags: List[TagKind] = []

    def run(self) -> List[Block]:
        for event in self._events:
            try:
                self._dispatch(event)
            except ConversionError as exc:
                if exc.event is None:
                    exc.event = event
                raise
        self._check_balanced()
        self.builder.close_block()
        log.debug("Converted event stream into %d blocks", len(self.builder.blocks))
        return self.builder.blocks

    def _dispatch(self, event: Event) -> None:
        if isinstance(event, Start):
            self._start_tag(event.tag)
        elif isinstance(event, End):
            self._end_tag(event.tag)
        elif isinstance(event, Text):
            self.builder.push_text(event.text)
        elif isinstance(event, Code):
            self.builder.append_span(event.text, self.builder.marks.snapshot() + [Decorator.CODE])
        elif isinstance(event, SoftBreak):
            self.builder.push_text(" ")
        elif isinstance(event, HardBreak):
            self.builder.push_text("\n")
        elif isinstance(event, (Html, Rule, FootnoteReference, TaskListMarker)):
            log.debug("Ignoring %s event", type(event).__name__)
        else:
            raise ConversionError(f"unknown event type {type(event).__name__}")

    @property
    def quote_depth(self) -> int:
        return self.open_tags.count(TagKind.BLOCK_QUOTE)

    def _start_tag(self, tag: Tag) -> None:
        kind = tag.kind
        if kind in STRUCTURAL_TAGS:
            self.open_tags.append(kind)
        if kind == TagKind.PARAGRAPH:
            self.builder.open_block_if_none("blockquote" if self.quote_depth else "normal")
        elif kind == TagKind.BLOCK_QUOTE:
            self.builder.open_block(TextBlock(style="blockquote"))
        elif kind == TagKind.CODE_BLOCK:
            code = self._consume_inner(TagKind.CODE_BLOCK)
            self.builder.append_sealed(CodeBlock(code=code, language=tag.language or None))
        elif kind == TagKind.HEADING:
            if not 1 <= tag.level <= 6:
                raise ConversionError(f"heading level {tag.level} out of range")
            self.builder.open_block(TextBlock(style=f"h{tag.level}"))
        elif kind == TagKind.LIST:
            self.lists.push(ListItemType.NUMBERED if tag.ordered else ListItemType.BULLET)
        elif kind == TagKind.ITEM:
            level, list_item = self.lists.current()
            self.builder.open_block(ListItemBlock(level=level, list_item=list_item))
        elif kind == TagKind.LINK:
            self._start_link(tag)
        elif kind == TagKind.IMAGE:
            self._image(tag)
        elif kind in INLINE_DECORATORS:
            self.builder.marks.push(INLINE_DECORATORS[kind])
        elif kind in IGNORED_TAGS:
            log.debug("Ignoring start of %s", kind.value)

    def _end_tag(self, tag: Tag) -> None:
        kind = tag.kind
        if kind in INLINE_DECORATORS:
            self.builder.marks.remove(INLINE_DECORATORS[kind])
        elif kind == TagKind.LINK:
            self._end_link()
        elif kind == TagKind.LIST:
            self.lists.pop()
        elif kind in STRUCTURAL_TAGS:
            self._pop_open_tag(kind)
            self.builder.close_block()
        elif kind in (TagKind.IMAGE, TagKind.CODE_BLOCK):
            raise StructuralImbalance(f"end of {kind.value} without a matching start")
        elif kind in IGNORED_TAGS:
            log.debug("Ignoring end of %s", kind.value)

    def _pop_open_tag(self, kind: TagKind) -> None:
        if not self.open_tags:
            raise StructuralImbalance(f"end of {kind.value} while no block is open")
        innermost = self.open_tags[-1]
        if innermost != kind:
            raise StructuralImbalance(f"end of {kind.value} while {innermost.value} is open")
        self.open_tags.pop()

    def _start_link(self, tag: Tag) -> None:
        key = self.builder.fresh_key()
        if key is None:
            log.debug("Link to %s outside of a block, no mark registered", tag.href)
            self.links.append(None)
            return
        self.builder.register(LinkDef(key=key, href=tag.href))
        self.builder.marks.push(LinkReference(key))
        self.links.append(key)

    def _end_link(self) -> None:
        if not self.links:
            raise StructuralImbalance("link closed while none is open")
        key = self.links.pop()
        if key is None:
            return
        if self.builder.lookup(key) is None:
            raise UnresolvedMarkReference(f"link mark {key!r} is not defined in the open block")
        self.builder.marks.remove(LinkReference(key))

    def _image(self, tag: Tag) -> None:
        alt = self._consume_inner(TagKind.IMAGE)
        key = self.builder.fresh_key()
        if key is None:
            log.debug("Dropping image %s outside of a block", tag.href)
            return
        try:
            src = self.resolver.resolve(tag.href)
            picture = self.resolver.resolve_picture(tag.href, alt)
        except Exception as exc:
            raise ResolverFailure(f"could not resolve image {tag.href!r}: {exc}", original_error=exc) from exc
        self.builder.register(ImageDef(key=key, src=src, picture=picture, caption=tag.title or None))

        reference = AssetReference(key)
        self.builder.marks.push(reference)
        self.builder.append_span(alt, type=IMAGE_ALT_TYPE)
        self.builder.marks.remove(reference)

    def _consume_inner(self, closing: TagKind) -> str:
        """Flatten events up to the End that closes ``closing`` into a string."""
        depth = 0
        parts: List[str] = []
        for event in self._events:
            if isinstance(event, Start):
                depth += 1
            elif isinstance(event, End):
                if depth == 0:
                    if event.tag.kind != closing:
                        raise StructuralImbalance(
                            f"expected end of {closing.value}, got end of {event.tag.kind.value}", event
                        )
                    return "".join(parts)
                depth -= 1
            elif isinstance(event, (Text, Code, Html)):
                parts.append(event.text)
            elif isinstance(event, (SoftBreak, HardBreak, Rule)):
                parts.append(" ")
        raise StructuralImbalance(f"input ended inside {closing.value}")

    def _check_balanced(self) -> None:
        if self.links:
            raise StructuralImbalance(f"{len(self.links)} link(s) left open at end of input")
        if len(self.builder.marks):
            raise StructuralImbalance(f"marks {self.builder.marks.snapshot()!r} left open at end of input")
        if self.lists.level:
            raise StructuralImbalance(f"{self.lists.level} list(s) left open at end of input")
        if self.open_tags:
            names = ", ".join(kind.value for kind in self.open_tags)
            raise StructuralImbalance(f"{names} left open at end of input")


def convert_events(
    events: Iterable[Event],
    resolver: AssetResolver | None = None,
    keys: KeyGenerator | None = None,
) -> List[Block]:
    """Convert a well-formed event stream into portable-text blocks."""
    return PortableTextWriter(events, resolver=resolver, keys=keys).run()
