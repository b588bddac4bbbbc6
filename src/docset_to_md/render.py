"""
Render a DocumentTree to markdown fragments.

Every function takes a ``RenderContext`` built for one document: its
reference table, the position of the document in the output tree and the
language availability index. Nothing is kept between documents.
"""

import re
from typing import NamedTuple

from docset_to_md.document import DocumentTree, Reference, TopicSection
from docset_to_md.links import LanguageAvailabilityIndex, SourceContext, resolve_link
from docset_to_md.nodes import (
    Aside,
    CodeListing,
    CodeVoice,
    Emphasis,
    Heading,
    Image,
    InlineHead,
    Links,
    NewTerm,
    OrderedList,
    Paragraph,
    ReferenceLink,
    Row,
    Small,
    Strikethrough,
    Strong,
    Subscript,
    Superscript,
    TabNavigator,
    Table,
    TermList,
    Text,
    UnorderedList,
)

# Output language -> language tag used by DocC declarations
DECLARATION_LANGUAGES = {
    "swift": "swift",
    "objc": "occ",
}

ASIDE_TITLES = {
    "note": "Note",
    "warning": "Warning",
    "important": "Important",
    "tip": "Tip",
    "experiment": "Experiment",
}

FRAMEWORK_IN_URL = re.compile(r"documentation/([^/]+)")


class RenderContext(NamedTuple):
    references: dict
    source: SourceContext | None = None
    index: LanguageAvailabilityIndex | None = None
    capitalize_frameworks: bool = False


class TopicItem(NamedTuple):
    title: str
    url: str | None = None
    abstract: str | None = None
    required: bool = False
    deprecated: bool = False
    beta: bool = False


class TopicGroup(NamedTuple):
    title: str
    items: tuple
    kind: str | None = None


class RenderedDocument(NamedTuple):
    title: str
    role: str
    language: str
    framework: str | None = None
    kind: str | None = None
    platforms: tuple = ()
    declaration: str | None = None
    abstract: str | None = None
    body: str | None = None
    parameters: tuple = ()
    topics: tuple = ()
    see_also: tuple = ()
    relationships: tuple = ()
    hierarchy: tuple = ()
    deprecated: bool = False
    beta: bool = False


# ============================================================================
# Links
# ============================================================================


def link_for(ref: Reference, ctx: RenderContext) -> str | None:
    if not ref.url:
        return None
    return resolve_link(
        ref.url, ref.title, ctx.source, ctx.index, ctx.capitalize_frameworks
    )


# ============================================================================
# Inline content
# ============================================================================


def render_inlines(inlines: tuple, ctx: RenderContext) -> str:
    parts = []
    for node in inlines:
        parts.append(render_inline(node, ctx))
    return "".join(parts)


def render_inline(node, ctx: RenderContext) -> str:
    """Render one inline node. Unknown kinds render as an empty string."""
    if isinstance(node, Text):
        return node.text
    if isinstance(node, CodeVoice):
        return f"`{node.code}`"
    if isinstance(node, (Emphasis, NewTerm)):
        return f"*{render_inlines(node.inline, ctx)}*"
    if isinstance(node, (Strong, InlineHead)):
        return f"**{render_inlines(node.inline, ctx)}**"
    if isinstance(node, Strikethrough):
        return f"~~{render_inlines(node.inline, ctx)}~~"
    if isinstance(node, (Subscript, Superscript)):
        return render_inlines(node.inline, ctx)
    if isinstance(node, ReferenceLink):
        return render_reference(node, ctx)
    if isinstance(node, Image):
        return render_image(node.identifier, ctx)
    return ""


def escape_link_text(text: str) -> str:
    """Escape brackets so the text cannot close a markdown link early."""
    return text.replace("[", "\\[").replace("]", "\\]")


def render_reference(node: ReferenceLink, ctx: RenderContext) -> str:
    ref = ctx.references.get(node.identifier)
    title = node.overriding_title or (ref.title if ref else None) or node.identifier
    if ref is not None and ref.url and node.is_active:
        path = link_for(ref, ctx)
        if path:
            return f"[{escape_link_text(title)}]({path})"
    return title


def render_image(identifier: str, ctx: RenderContext) -> str:
    ref = ctx.references.get(identifier)
    if ref is None or ref.type != "image" or not ref.variants:
        return ""
    return f"![{ref.alt or 'Image'}]({ref.variants[0].url})"


# ============================================================================
# Block content
# ============================================================================


def render_blocks(blocks: tuple, ctx: RenderContext) -> str:
    """Render blocks separated by blank lines, skipping empty ones."""
    rendered = []
    for block in blocks:
        text = render_block(block, ctx)
        if text:
            rendered.append(text)
    return "\n\n".join(rendered)


def indent_continuation(text: str, marker: str) -> str:
    """Prefix the first line with ``marker`` and align the following lines under it."""
    lines = text.split("\n")
    pad = " " * len(marker)
    rest = [pad + line if line else "" for line in lines[1:]]
    return "\n".join([marker + lines[0]] + rest)


def render_aside(block: Aside, ctx: RenderContext) -> str:
    title = block.name or ASIDE_TITLES.get(block.style.lower(), "Note")
    lines = render_blocks(block.content, ctx).split("\n")
    quoted = [f"> **{title}**: {lines[0]}"]
    quoted.extend(f"> {line}" if line else ">" for line in lines[1:])
    return "\n".join(quoted)


def render_list(items: tuple, ctx: RenderContext, start: int | None = None) -> str:
    lines = []
    for i, item in enumerate(items):
        marker = "- " if start is None else f"{start + i}. "
        lines.append(indent_continuation(render_blocks(item, ctx), marker))
    return "\n".join(lines)


def render_table_cell(cell: tuple, ctx: RenderContext) -> str:
    text = render_blocks(cell, ctx)
    text = re.sub(r"\s*\n\s*", " ", text)
    return text.replace("|", "\\|")


def render_table(block: Table, ctx: RenderContext) -> str:
    if not block.rows:
        return ""
    rows = [
        "| " + " | ".join(render_table_cell(cell, ctx) for cell in row) + " |"
        for row in block.rows
    ]
    columns = len(block.rows[0]) or 1
    separator = "| " + " | ".join(["---"] * columns) + " |"
    return "\n".join([rows[0], separator] + rows[1:])


def render_term_list(block: TermList, ctx: RenderContext) -> str:
    return "\n\n".join(
        f"**{render_inlines(item.term, ctx)}**: {render_blocks(item.definition, ctx)}"
        for item in block.items
    )


def render_tabs(block: TabNavigator, ctx: RenderContext) -> str:
    parts = []
    for tab in block.tabs:
        content = render_blocks(tab.content, ctx)
        parts.append(f"**{tab.title}**\n\n{content}" if content else f"**{tab.title}**")
    return "\n\n".join(parts)


def render_links(block: Links, ctx: RenderContext) -> str:
    items = [topic_item(identifier, ctx) for identifier in block.identifiers]
    return format_topic_items([item for item in items if item is not None])


def render_block(block, ctx: RenderContext) -> str:
    """Render one block node. Unknown kinds render as an empty string."""
    if isinstance(block, Heading):
        if not block.text:
            return ""
        return "#" * max(1, min(block.level + 1, 6)) + " " + block.text
    if isinstance(block, (Paragraph, Small)):
        return render_inlines(block.inline, ctx)
    if isinstance(block, CodeListing):
        return "```" + (block.syntax or "") + "\n" + "\n".join(block.code) + "\n```"
    if isinstance(block, Aside):
        return render_aside(block, ctx)
    if isinstance(block, UnorderedList):
        return render_list(block.items, ctx)
    if isinstance(block, OrderedList):
        return render_list(block.items, ctx, block.start)
    if isinstance(block, Table):
        return render_table(block, ctx)
    if isinstance(block, TermList):
        return render_term_list(block, ctx)
    if isinstance(block, Row):
        columns = (render_blocks(column, ctx) for column in block.columns)
        return "\n\n".join(text for text in columns if text)
    if isinstance(block, TabNavigator):
        return render_tabs(block, ctx)
    if isinstance(block, Links):
        return render_links(block, ctx)
    return ""


# ============================================================================
# Topics
# ============================================================================


def topic_item(identifier: str, ctx: RenderContext) -> TopicItem | None:
    """List entry for a referenced identifier, or None if it is not in the reference table."""
    ref = ctx.references.get(identifier)
    if ref is None:
        return None
    return TopicItem(
        title=ref.title or identifier,
        url=link_for(ref, ctx),
        abstract=render_inlines(ref.abstract, ctx) or None,
        required=ref.required,
        deprecated=ref.deprecated,
        beta=ref.beta,
    )


def topic_groups(sections: tuple[TopicSection, ...], ctx: RenderContext) -> tuple:
    groups = []
    for section in sections:
        items = [topic_item(identifier, ctx) for identifier in section.identifiers]
        items = [item for item in items if item is not None]
        if items:
            groups.append(TopicGroup(section.title or "Topics", tuple(items), section.kind))
    return tuple(groups)


def format_topic_items(items: list[TopicItem] | tuple) -> str:
    """Markdown list lines: link or title, status markers, then the abstract."""
    lines = []
    for item in items:
        line = f"- [{escape_link_text(item.title)}]({item.url})" if item.url else f"- {item.title}"
        markers = [
            label
            for label, flag in (
                ("Required", item.required),
                ("Deprecated", item.deprecated),
                ("Beta", item.beta),
            )
            if flag
        ]
        if markers:
            line += f" *({', '.join(markers)})*"
        if item.abstract:
            line += f": {item.abstract}"
        lines.append(line)
    return "\n".join(lines)


# ============================================================================
# Documents
# ============================================================================


def select_declaration(tree: DocumentTree, language: str) -> str | None:
    """Declaration text for ``language``, falling back to the first declaration."""
    wanted = DECLARATION_LANGUAGES.get(language, language)
    for section in tree.primary_content_sections:
        if section.kind != "declarations" or not section.declarations:
            continue
        for declaration in section.declarations:
            if wanted in declaration.languages:
                return declaration.text
        return section.declarations[0].text
    return None


def document_framework(tree: DocumentTree) -> str | None:
    if tree.metadata.modules:
        return tree.metadata.modules[0]
    match = FRAMEWORK_IN_URL.search(tree.identifier_url)
    return match.group(1) if match else None


def render_document(
    tree: DocumentTree,
    language: str,
    context: SourceContext | None = None,
    index: LanguageAvailabilityIndex | None = None,
    capitalize_frameworks: bool = False,
) -> RenderedDocument:
    """Render every part of a document for ``language``."""
    ctx = RenderContext(tree.references, context, index, capitalize_frameworks)
    metadata = tree.metadata

    body_parts = [
        render_blocks(section.content, ctx)
        for section in tree.primary_content_sections
        if section.kind == "content"
    ]
    body = "\n\n".join(part for part in body_parts if part)

    parameters = ()
    for section in tree.primary_content_sections:
        if section.kind == "parameters" and section.parameters:
            parameters = tuple(
                (param.name, render_blocks(param.content, ctx)) for param in section.parameters
            )
            break

    hierarchy = ()
    if tree.hierarchy:
        hierarchy = tuple(
            ref.title if (ref := tree.references.get(identifier)) and ref.title else identifier
            for identifier in tree.hierarchy[0]
        )

    return RenderedDocument(
        title=metadata.title,
        role=metadata.role,
        language=language,
        framework=document_framework(tree),
        kind=tree.kind,
        platforms=metadata.platforms,
        declaration=select_declaration(tree, language),
        abstract=render_inlines(tree.abstract, ctx) or None,
        body=body or None,
        parameters=parameters,
        topics=topic_groups(tree.topic_sections, ctx),
        see_also=topic_groups(tree.see_also_sections, ctx),
        relationships=topic_groups(tree.relationship_sections, ctx),
        hierarchy=hierarchy,
        deprecated=any(platform.deprecated for platform in metadata.platforms),
        beta=any(platform.beta for platform in metadata.platforms),
    )
