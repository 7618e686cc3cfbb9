import json
from pathlib import Path

from PortableMark.model import (
    AssetReference,
    CodeBlock,
    Decorator,
    Document,
    ImageDef,
    LinkDef,
    LinkReference,
    ListItemBlock,
    ListItemType,
    Picture,
    PictureSource,
    Span,
    TextBlock,
)
from PortableMark.renderer_json import dumps, render_document, to_portable_text


def _sample_document() -> Document:
    return Document(
        blocks=[
            TextBlock(
                style="normal",
                children=[
                    Span("See "),
                    Span("docs", [Decorator.EMPHASIS, LinkReference("k1")]),
                    Span("a rock", [AssetReference("k2")], type="image-alt"),
                ],
                mark_defs=[
                    LinkDef("k1", "https://example.com/docs"),
                    ImageDef(
                        "k2",
                        src="https://cdn.example.com/rock.jpg",
                        picture=Picture(
                            src="https://cdn.example.com/rock.jpg",
                            alt="a rock",
                            width=640,
                            height=480,
                            sources=(PictureSource(srcset="https://cdn.example.com/rock.webp", mime_type="image/webp"),),
                        ),
                        caption="Shiprock",
                    ),
                ],
            ),
            ListItemBlock(level=2, list_item=ListItemType.NUMBERED, children=[Span("step")]),
            CodeBlock(code="x = 1\n", language="python"),
        ],
        metadata={"title": "Sample"},
    )


def test_render_creates_json(tmp_path: Path):
    output_file = tmp_path / "out" / "doc.json"
    render_document(_sample_document(), output_file)
    assert output_file.exists()
    data = json.loads(output_file.read_text(encoding="utf-8"))
    assert len(data) == 3


def test_portable_text_field_names():
    text_block, list_block, code_block = to_portable_text(_sample_document().blocks)

    assert text_block["_type"] == "block"
    assert text_block["style"] == "normal"
    assert text_block["children"][1] == {"_type": "span", "text": "docs", "marks": ["em", "k1"]}
    assert text_block["children"][2]["_type"] == "image-alt"
    assert text_block["markDefs"][0] == {"_key": "k1", "_type": "link", "href": "https://example.com/docs"}

    image = text_block["markDefs"][1]
    assert image["_type"] == "image"
    assert image["caption"] == "Shiprock"
    assert image["picture"] == {
        "src": "https://cdn.example.com/rock.jpg",
        "alt": "a rock",
        "width": 640,
        "height": 480,
        "sources": [
            {"srcset": "https://cdn.example.com/rock.webp", "width": None, "height": None, "type": "image/webp"}
        ],
    }

    assert list_block["level"] == 2
    assert list_block["listItem"] == "numbered"
    assert "level" not in text_block and "listItem" not in text_block

    assert code_block == {"_type": "code", "children": [], "markDefs": [], "code": "x = 1\n", "language": "python"}
    assert "style" not in code_block


def test_dumps_with_metadata_keeps_unicode():
    doc = Document(blocks=[TextBlock(children=[Span("Привет")])], metadata={"title": "Пример"})
    payload = json.loads(dumps(doc, include_metadata=True))
    assert payload["metadata"] == {"title": "Пример"}
    assert payload["blocks"][0]["children"][0]["text"] == "Привет"
    assert "Привет" in dumps(doc)
