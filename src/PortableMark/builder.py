from __future__ import annotations

import logging
from typing import List, Sequence

from .model import SPAN_TYPE, Block, Mark, MarkDef, Span, TextBlock
from .registry import KeyGenerator, MarkDefRegistry
from .stacks import MarkStack

log = logging.getLogger(__name__)


class BlockBuilder:
    """Owns the output blocks and which of them, if any, is receiving spans.

    Only the last block can be open. Closing a block leaves its content in
    place; it just stops accepting children. A text block that is closed or
    superseded before it received any span is discarded.
    """

    def __init__(self, keys: KeyGenerator | None = None) -> None:
        self.blocks: List[Block] = []
        self.marks = MarkStack()
        self.registry = MarkDefRegistry(keys)
        self._open = False

    @property
    def current(self) -> TextBlock | None:
        if self._open:
            block = self.blocks[-1]
            if isinstance(block, TextBlock):
                return block
        return None

    def open_block(self, block: TextBlock) -> TextBlock:
        self.close_block()
        self.blocks.append(block)
        self._open = True
        return block

    def open_block_if_none(self, style: str) -> TextBlock:
        current = self.current
        if current is not None:
            return current
        return self.open_block(TextBlock(style=style))

    def append_sealed(self, block: Block) -> None:
        self.close_block()
        self.blocks.append(block)

    def close_block(self) -> None:
        block = self.current
        if block is not None and not block.children and not block.mark_defs:
            log.debug("Discarding empty %s block", block.style)
            self.blocks.pop()
        self._open = False

    def append_span(self, text: str, marks: Sequence[Mark] | None = None, type: str = SPAN_TYPE) -> Span | None:
        block = self.current
        if block is None:
            log.debug("Dropping text outside of a block: %r", text)
            return None
        span = Span(text=text, marks=list(marks) if marks is not None else self.marks.snapshot(), type=type)
        block.children.append(span)
        return span

    def extend_last_span(self, suffix: str) -> None:
        block = self.current
        if block is None or not block.children:
            log.debug("No span to extend with %r", suffix)
            return
        block.children[-1].text += suffix

    def push_text(self, text: str) -> None:
        """Add plain text, extending the last span when it carries the same marks."""
        block = self.current
        if block is None:
            log.debug("Dropping text outside of a block: %r", text)
            return
        marks = self.marks.snapshot()
        if block.children:
            last = block.children[-1]
            if last.type == SPAN_TYPE and last.marks == marks:
                self.extend_last_span(text)
                return
        self.append_span(text, marks)

    def fresh_key(self) -> str | None:
        block = self.current
        if block is None:
            return None
        return self.registry.fresh_key(block)

    def register(self, mark_def: MarkDef) -> MarkDef:
        return self.registry.register(self.current, mark_def)

    def lookup(self, key: str) -> MarkDef | None:
        block = self.current
        if block is None:
            return None
        return self.registry.lookup(block, key)
