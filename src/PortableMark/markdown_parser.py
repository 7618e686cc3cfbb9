from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Sequence

import yaml
from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.front_matter import front_matter_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .assets import AssetResolver
from .config import ConvertOptions
from .converter import convert_events
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
from .model import Document
from .registry import KeyGenerator

log = logging.getLogger(__name__)

# paired block tokens: type prefix -> tag kind
_BLOCK_PAIRS = {
    "paragraph": TagKind.PARAGRAPH,
    "blockquote": TagKind.BLOCK_QUOTE,
    "list_item": TagKind.ITEM,
    "footnote": TagKind.FOOTNOTE_DEFINITION,
    "table": TagKind.TABLE,
    "thead": TagKind.TABLE_HEAD,
    "tr": TagKind.TABLE_ROW,
    "th": TagKind.TABLE_CELL,
    "td": TagKind.TABLE_CELL,
}

_INLINE_PAIRS = {
    "strong": TagKind.STRONG,
    "em": TagKind.EMPHASIS,
    "s": TagKind.STRIKETHROUGH,
}

_TASK_CHECKBOX_CLASS = "task-list-item-checkbox"


def build_markdown(options: ConvertOptions | None = None) -> MarkdownIt:
    options = options or ConvertOptions()
    md = MarkdownIt("commonmark")
    if options.tables:
        md.enable("table")
    if options.strikethrough:
        md.enable("strikethrough")
    if options.front_matter:
        md.use(front_matter_plugin)
    if options.footnotes:
        md.use(footnote_plugin)
    if options.tasklists:
        md.use(tasklists_plugin)
    return md


def tokenize(text: str, options: ConvertOptions | None = None) -> List[Token]:
    return build_markdown(options).parse(text)


def parse_markdown(
    text: str,
    options: ConvertOptions | None = None,
    resolver: AssetResolver | None = None,
    keys: KeyGenerator | None = None,
) -> Document:
    options = options or ConvertOptions()
    tokens = tokenize(text, options)
    metadata = front_matter(tokens) if options.front_matter else None
    blocks = convert_events(
        iter_events(tokens),
        resolver=resolver or options.make_resolver(),
        keys=keys or options.make_keys(),
    )
    return Document(blocks=blocks, metadata=metadata)


def front_matter(tokens: Sequence[Token]) -> dict | None:
    """Load the YAML front matter block, if the document starts with one."""
    for tok in tokens:
        if tok.type != "front_matter":
            continue
        try:
            data = yaml.safe_load(tok.content)
        except yaml.YAMLError as exc:
            log.warning("Ignoring unreadable front matter: %s", exc)
            return None
        if not isinstance(data, dict):
            log.warning("Ignoring front matter that is not a mapping")
            return None
        return data
    return None


def iter_events(tokens: Iterable[Token]) -> Iterator[Event]:
    """Flatten markdown-it block tokens, and their inline children, into events."""
    for tok in tokens:
        if tok.type == "inline":
            yield from _inline_events(tok.children or [])
        elif tok.type == "heading_open":
            yield Start(Tag(TagKind.HEADING, level=int(tok.tag[1])))
        elif tok.type == "heading_close":
            yield End(Tag(TagKind.HEADING, level=int(tok.tag[1])))
        elif tok.type in ("bullet_list_open", "ordered_list_open"):
            yield Start(_list_tag(tok))
        elif tok.type in ("bullet_list_close", "ordered_list_close"):
            yield End(_list_tag(tok))
        elif tok.type in ("fence", "code_block"):
            tag = _code_tag(tok)
            yield Start(tag)
            yield Text(tok.content)
            yield End(tag)
        elif tok.type == "hr":
            yield Rule()
        elif tok.type == "html_block":
            yield Html(tok.content)
        elif tok.type.endswith(("_open", "_close")):
            name, _, side = tok.type.rpartition("_")
            kind = _BLOCK_PAIRS.get(name)
            if kind is None:
                # tbody, footnote block wrapper
                continue
            if kind == TagKind.FOOTNOTE_DEFINITION:
                tag = Tag(kind, label=str((tok.meta or {}).get("label", "")))
            else:
                tag = Tag(kind)
            yield Start(tag) if side == "open" else End(tag)


def _inline_events(children: Sequence[Token]) -> Iterator[Event]:
    links: List[Tag] = []
    after_checkbox = False
    for tok in children:
        trim_space, after_checkbox = after_checkbox, False
        if trim_space and tok.type == "text":
            # the checkbox replaced "[ ]" but left the separating space
            content = tok.content[1:] if tok.content.startswith(" ") else tok.content
            if content:
                yield Text(content)
        elif tok.type in ("text", "text_special"):
            yield Text(tok.content)
        elif tok.type == "softbreak":
            yield SoftBreak()
        elif tok.type == "hardbreak":
            yield HardBreak()
        elif tok.type == "code_inline":
            yield Code(tok.content)
        elif tok.type == "html_inline":
            if _TASK_CHECKBOX_CLASS in tok.content:
                yield TaskListMarker(checked='checked="checked"' in tok.content)
                after_checkbox = True
            else:
                yield Html(tok.content)
        elif tok.type == "link_open":
            tag = Tag(TagKind.LINK, href=str(tok.attrGet("href") or ""), title=str(tok.attrGet("title") or ""))
            links.append(tag)
            yield Start(tag)
        elif tok.type == "link_close":
            yield End(links.pop())
        elif tok.type == "image":
            tag = Tag(TagKind.IMAGE, href=str(tok.attrGet("src") or ""), title=str(tok.attrGet("title") or ""))
            yield Start(tag)
            yield from _inline_events(tok.children or [])
            yield End(tag)
        elif tok.type == "footnote_ref":
            yield FootnoteReference(label=str((tok.meta or {}).get("label", "")))
        elif tok.type.endswith(("_open", "_close")):
            name, _, side = tok.type.rpartition("_")
            kind = _INLINE_PAIRS.get(name)
            if kind is not None:
                yield Start(Tag(kind)) if side == "open" else End(Tag(kind))


def _list_tag(tok: Token) -> Tag:
    if tok.type.startswith("ordered"):
        start = tok.attrGet("start")
        return Tag(TagKind.LIST, ordered=True, start=int(start) if start is not None else 1)
    return Tag(TagKind.LIST)


def _code_tag(tok: Token) -> Tag:
    if tok.type == "fence":
        info = tok.info.strip()
        return Tag(TagKind.CODE_BLOCK, fenced=True, language=info.split()[0] if info else None)
    return Tag(TagKind.CODE_BLOCK)
