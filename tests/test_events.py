from PortableMark import markdown_parser
from PortableMark.config import ConvertOptions
from PortableMark.events import (
    Code,
    End,
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


def events_of(text: str, options: ConvertOptions | None = None):
    return list(markdown_parser.iter_events(markdown_parser.tokenize(text, options)))


def test_heading_events():
    heading = Tag(TagKind.HEADING, level=2)
    assert events_of("## Hi") == [Start(heading), Text("Hi"), End(heading)]


def test_tight_list_keeps_paragraph_events():
    lst = Tag(TagKind.LIST)
    item = Tag(TagKind.ITEM)
    paragraph = Tag(TagKind.PARAGRAPH)
    assert events_of("- a") == [
        Start(lst),
        Start(item),
        Start(paragraph),
        Text("a"),
        End(paragraph),
        End(item),
        End(lst),
    ]


def test_loose_list_keeps_paragraphs():
    events = events_of("- a\n\n- b\n")
    assert events.count(Start(Tag(TagKind.PARAGRAPH))) == 2


def test_ordered_list_start_number():
    events = events_of("3. a\n4. b\n")
    assert events[0] == Start(Tag(TagKind.LIST, ordered=True, start=3))


def test_paragraph_inline_events():
    events = events_of("a *b* `c`  \nd\ne ~~f~~")
    paragraph = Tag(TagKind.PARAGRAPH)
    assert events == [
        Start(paragraph),
        Text("a "),
        Start(Tag(TagKind.EMPHASIS)),
        Text("b"),
        End(Tag(TagKind.EMPHASIS)),
        Text(" "),
        Code("c"),
        HardBreak(),
        Text("d"),
        SoftBreak(),
        Text("e "),
        Start(Tag(TagKind.STRIKETHROUGH)),
        Text("f"),
        End(Tag(TagKind.STRIKETHROUGH)),
        End(paragraph),
    ]


def test_image_alt_events_are_nested():
    image = Tag(TagKind.IMAGE, href="a.png", title="T")
    events = events_of('![alt *x*](a.png "T")')
    assert events[1:-1] == [
        Start(image),
        Text("alt "),
        Start(Tag(TagKind.EMPHASIS)),
        Text("x"),
        End(Tag(TagKind.EMPHASIS)),
        End(image),
    ]


def test_link_events_carry_href_and_title():
    link = Tag(TagKind.LINK, href="https://example.com", title="Example")
    events = events_of('[site](https://example.com "Example")')
    assert events[1:-1] == [Start(link), Text("site"), End(link)]


def test_code_block_events():
    code = Tag(TagKind.CODE_BLOCK, fenced=True, language="rust")
    assert events_of("```rust extra\nfn main() {}\n```\n") == [Start(code), Text("fn main() {}\n"), End(code)]


def test_rule_and_html_block():
    events = events_of("<div>x</div>\n\n---\n")
    assert isinstance(events[0], Html)
    assert events[-1] == Rule()


def test_table_events_use_table_kinds():
    events = events_of("| a | b |\n|---|---|\n| 1 | 2 |\n")
    kinds = [event.tag.kind for event in events if isinstance(event, Start)]
    assert kinds[:4] == [TagKind.TABLE, TagKind.TABLE_HEAD, TagKind.TABLE_ROW, TagKind.TABLE_CELL]


def test_tables_can_be_disabled():
    events = events_of("| a | b |\n|---|---|\n| 1 | 2 |\n", ConvertOptions(tables=False))
    assert Start(Tag(TagKind.TABLE)) not in events


def test_task_list_markers():
    events = events_of("- [ ] todo\n- [x] done\n")
    assert [e.checked for e in events if isinstance(e, TaskListMarker)] == [False, True]
    assert [e.text for e in events if isinstance(e, Text)] == ["todo", "done"]


def test_footnote_reference_and_definition():
    events = events_of("Text[^1]\n\n[^1]: Note\n")
    assert any(isinstance(event, FootnoteReference) for event in events)
    assert any(isinstance(event, Start) and event.tag.kind == TagKind.FOOTNOTE_DEFINITION for event in events)
