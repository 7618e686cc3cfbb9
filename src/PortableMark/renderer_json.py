from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from .model import (
    Block,
    CodeBlock,
    Document,
    ImageDef,
    LinkDef,
    ListItemBlock,
    MarkDef,
    Picture,
    PictureSource,
    Span,
    TextBlock,
    mark_value,
)


def to_portable_text(blocks: Iterable[Block]) -> list[dict[str, Any]]:
    return [_dispatch_block(block) for block in blocks]


def dumps(doc: Document, include_metadata: bool = False, indent: int | None = 2) -> str:
    payload: Any = to_portable_text(doc.blocks)
    if include_metadata:
        payload = {"metadata": doc.metadata or {}, "blocks": payload}
    return json.dumps(payload, ensure_ascii=False, indent=indent, default=str)


def render_document(
    doc: Document,
    output_path: str | Path,
    include_metadata: bool = False,
    indent: int | None = 2,
) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps(doc, include_metadata=include_metadata, indent=indent) + "\n", encoding="utf-8")


def _dispatch_block(block: Block) -> dict[str, Any]:
    if isinstance(block, ListItemBlock):
        rendered = _render_text_block(block)
        rendered["level"] = block.level
        rendered["listItem"] = block.list_item.value
        return rendered
    if isinstance(block, TextBlock):
        return _render_text_block(block)
    if isinstance(block, CodeBlock):
        rendered = {"_type": "code", "children": [], "markDefs": [], "code": block.code}
        if block.language:
            rendered["language"] = block.language
        return rendered
    raise TypeError(f"Cannot render block of type {type(block).__name__}")


def _render_text_block(block: TextBlock) -> dict[str, Any]:
    return {
        "_type": "block",
        "style": block.style,
        "children": [_render_span(span) for span in block.children],
        "markDefs": [_render_mark_def(mark_def) for mark_def in block.mark_defs],
    }


def _render_span(span: Span) -> dict[str, Any]:
    return {"_type": span.type, "text": span.text, "marks": [mark_value(mark) for mark in span.marks]}


def _render_mark_def(mark_def: MarkDef) -> dict[str, Any]:
    if isinstance(mark_def, LinkDef):
        return {"_key": mark_def.key, "_type": "link", "href": mark_def.href}
    if isinstance(mark_def, ImageDef):
        rendered = {
            "_key": mark_def.key,
            "_type": "image",
            "src": mark_def.src,
            "picture": _render_picture(mark_def.picture),
        }
        if mark_def.caption:
            rendered["caption"] = mark_def.caption
        return rendered
    raise TypeError(f"Cannot render mark definition of type {type(mark_def).__name__}")


def _render_picture(picture: Picture) -> dict[str, Any]:
    return {
        "src": picture.src,
        "alt": picture.alt,
        "width": picture.width,
        "height": picture.height,
        "sources": [_render_source(source) for source in picture.sources],
    }


def _render_source(source: PictureSource) -> dict[str, Any]:
    rendered: dict[str, Any] = {
        "srcset": source.srcset,
        "width": source.width,
        "height": source.height,
        "type": source.mime_type,
    }
    if source.media:
        rendered["media"] = source.media
    return rendered
