"""
Typed block and inline content nodes of a DocC document.

Each node kind gets its own record holding exactly the fields that kind
needs. Kinds this module does not know are kept as ``UnknownBlock`` /
``UnknownInline`` so newer documents still parse.
"""

from typing import Any, NamedTuple, Union


# ============================================================================
# Inline nodes
# ============================================================================


class Text(NamedTuple):
    text: str


class CodeVoice(NamedTuple):
    code: str


class Emphasis(NamedTuple):
    inline: tuple = ()


class Strong(NamedTuple):
    inline: tuple = ()


class Strikethrough(NamedTuple):
    inline: tuple = ()


class Subscript(NamedTuple):
    inline: tuple = ()


class Superscript(NamedTuple):
    inline: tuple = ()


class NewTerm(NamedTuple):
    inline: tuple = ()


class InlineHead(NamedTuple):
    inline: tuple = ()


class ReferenceLink(NamedTuple):
    """Inline reference to an entry of the document's reference table."""
    identifier: str
    is_active: bool = True
    overriding_title: str | None = None


class Image(NamedTuple):
    identifier: str


class UnknownInline(NamedTuple):
    kind: str


Inline = Union[
    Text, CodeVoice, Emphasis, Strong, Strikethrough, Subscript, Superscript,
    NewTerm, InlineHead, ReferenceLink, Image, UnknownInline,
]

# Inline kinds that only wrap other inline content
WRAPPER_KINDS = {
    "emphasis": Emphasis,
    "strong": Strong,
    "strikethrough": Strikethrough,
    "subscript": Subscript,
    "superscript": Superscript,
    "newTerm": NewTerm,
    "inlineHead": InlineHead,
}


# ============================================================================
# Block nodes
# ============================================================================


class Heading(NamedTuple):
    level: int
    text: str
    anchor: str | None = None


class Paragraph(NamedTuple):
    inline: tuple = ()


class CodeListing(NamedTuple):
    syntax: str | None
    code: tuple = ()


class Aside(NamedTuple):
    style: str
    name: str | None = None
    content: tuple = ()


class UnorderedList(NamedTuple):
    """Each item is a tuple of blocks."""
    items: tuple = ()


class OrderedList(NamedTuple):
    items: tuple = ()
    start: int = 1


class Table(NamedTuple):
    """Rows of cells; each cell is a tuple of blocks. The first row is the header."""
    rows: tuple = ()


class TermItem(NamedTuple):
    term: tuple
    definition: tuple


class TermList(NamedTuple):
    items: tuple = ()


class Row(NamedTuple):
    """Grid row; each column is a tuple of blocks."""
    columns: tuple = ()


class Tab(NamedTuple):
    title: str
    content: tuple = ()


class TabNavigator(NamedTuple):
    tabs: tuple = ()


class Links(NamedTuple):
    identifiers: tuple = ()


class Small(NamedTuple):
    inline: tuple = ()


class UnknownBlock(NamedTuple):
    kind: str


Block = Union[
    Heading, Paragraph, CodeListing, Aside, UnorderedList, OrderedList, Table,
    TermList, Row, TabNavigator, Links, Small, UnknownBlock,
]


# ============================================================================
# Parsing
# ============================================================================


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_inlines(items: Any) -> tuple:
    """Parse a JSON list of inline content."""
    inlines = []
    for item in _list(items):
        inlines.append(parse_inline(item))
    return tuple(inlines)


def parse_inline(data: Any) -> Inline:
    """Parse one inline node."""
    if not isinstance(data, dict):
        return UnknownInline(type(data).__name__)

    kind = data.get("type", "")
    if kind == "text":
        return Text(_text(data.get("text")))
    if kind == "codeVoice":
        return CodeVoice(_text(data.get("code")))
    if kind in WRAPPER_KINDS:
        return WRAPPER_KINDS[kind](parse_inlines(data.get("inlineContent")))
    if kind == "reference":
        return ReferenceLink(
            identifier=_text(data.get("identifier")),
            is_active=data.get("isActive") is not False,
            overriding_title=_str_or_none(data.get("overridingTitle")) or None,
        )
    if kind == "image":
        return Image(_text(data.get("identifier")))
    return UnknownInline(str(kind))


def parse_blocks(items: Any) -> tuple:
    """Parse a JSON list of block content."""
    # A plain loop keeps each nesting level to two stack frames
    blocks = []
    for item in _list(items):
        blocks.append(parse_block(item))
    return tuple(blocks)


def _parse_cell(cell: Any) -> tuple:
    # Cells are either a bare list of blocks or {"content": [...]}
    if isinstance(cell, dict):
        return parse_blocks(cell.get("content"))
    return parse_blocks(cell)


def _parse_row(row: Any) -> tuple:
    if isinstance(row, dict):
        row = row.get("cells")
    return tuple(_parse_cell(cell) for cell in _list(row))


def _parse_term_item(item: Any) -> TermItem:
    if not isinstance(item, dict):
        return TermItem((), ())
    term = item.get("term")
    definition = item.get("definition")

    if isinstance(term, dict) and "inlineContent" in term:
        term_inline = parse_inlines(term["inlineContent"])
    elif isinstance(term, dict):
        term_inline = (parse_inline(term),)
    else:
        term_inline = parse_inlines(term)

    # Definitions carry block content; older documents use inline content
    if isinstance(definition, dict) and "content" in definition:
        definition_blocks = parse_blocks(definition["content"])
    elif isinstance(definition, dict) and "inlineContent" in definition:
        definition_blocks = (Paragraph(parse_inlines(definition["inlineContent"])),)
    elif isinstance(definition, dict):
        definition_blocks = (Paragraph((parse_inline(definition),)),)
    else:
        definition_blocks = parse_blocks(definition)

    return TermItem(term_inline, definition_blocks)


def parse_block(data: Any) -> Block:
    """Parse one block node."""
    if not isinstance(data, dict):
        return UnknownBlock(type(data).__name__)

    kind = data.get("type", "")

    if kind == "heading":
        level = data.get("level")
        return Heading(
            level=level if isinstance(level, int) else 2,
            text=_text(data.get("text")),
            anchor=_str_or_none(data.get("anchor")),
        )

    if kind == "paragraph":
        return Paragraph(parse_inlines(data.get("inlineContent")))

    if kind == "codeListing":
        code = data.get("code")
        if isinstance(code, str):
            lines = tuple(code.split("\n"))
        else:
            lines = tuple(_text(line) for line in _list(code))
        return CodeListing(syntax=_str_or_none(data.get("syntax")) or None, code=lines)

    if kind == "aside":
        return Aside(
            style=_str_or_none(data.get("style")) or "note",
            name=_str_or_none(data.get("name")) or None,
            content=parse_blocks(data.get("content")),
        )

    if kind == "unorderedList":
        return UnorderedList(tuple(
            parse_blocks(item.get("content") if isinstance(item, dict) else None)
            for item in _list(data.get("items"))
        ))

    if kind == "orderedList":
        start = data.get("start")
        return OrderedList(
            items=tuple(
                parse_blocks(item.get("content") if isinstance(item, dict) else None)
                for item in _list(data.get("items"))
            ),
            start=start if isinstance(start, int) else 1,
        )

    if kind == "table":
        return Table(tuple(_parse_row(row) for row in _list(data.get("rows"))))

    if kind == "termList":
        return TermList(tuple(_parse_term_item(item) for item in _list(data.get("items"))))

    if kind == "row":
        return Row(tuple(
            parse_blocks(column.get("content") if isinstance(column, dict) else None)
            for column in _list(data.get("columns"))
        ))

    if kind == "tabNavigator":
        return TabNavigator(tuple(
            Tab(_text(tab.get("title")), parse_blocks(tab.get("content")))
            for tab in _list(data.get("tabs"))
            if isinstance(tab, dict)
        ))

    if kind == "links":
        return Links(tuple(item for item in _list(data.get("items")) if isinstance(item, str)))

    if kind == "small":
        return Small(parse_inlines(data.get("inlineContent")))

    return UnknownBlock(str(kind))
