"""
Assemble a markdown page from a rendered document.

Page order: title, metadata, breadcrumb, abstract, declaration, parameters,
body, topics, relationships, see also.
"""

from docset_to_md.document import Platform
from docset_to_md.render import RenderedDocument, TopicItem, format_topic_items, indent_continuation

ROLE_NAMES = {
    "collection": "Framework",
    "collectionGroup": "Collection",
    "symbol": "Symbol",
    "article": "Article",
    "sampleCode": "Sample Code",
    "dictionarySymbol": "Dictionary",
    "restRequestSymbol": "REST Request",
}

DECLARATION_FENCES = {
    "swift": "swift",
    "objc": "objectivec",
}


def format_role(role: str) -> str:
    return ROLE_NAMES.get(role, role)


def format_platforms(platforms: tuple[Platform, ...]) -> str:
    """``iOS 2.0+, macOS 10.15+ (beta)``"""
    parts = []
    for platform in platforms:
        text = platform.name
        if platform.introduced_at:
            text += f" {platform.introduced_at}+"
        if platform.deprecated:
            text += " (deprecated)"
        if platform.beta:
            text += " (beta)"
        parts.append(text)
    return ", ".join(parts)


def format_metadata(doc: RenderedDocument) -> str:
    lines = []
    if doc.framework:
        lines.append(f"**Framework**: {doc.framework}")
    if doc.role and doc.role != "unknown":
        lines.append(f"**Type**: {format_role(doc.role)}")
    if doc.platforms:
        lines.append(f"**Platforms**: {format_platforms(doc.platforms)}")
    if doc.deprecated:
        lines.append("**Status**: Deprecated")
    elif doc.beta:
        lines.append("**Status**: Beta")
    # Two trailing spaces force a markdown line break
    return "  \n".join(lines)


def format_parameters(parameters: tuple) -> str:
    return "\n\n".join(
        indent_continuation(f"**{name}**: {description}", "- ")
        for name, description in parameters
    )


def generate_markdown(doc: RenderedDocument) -> str:
    """Build the full markdown page for a document."""
    sections = [f"# {doc.title}"]

    metadata = format_metadata(doc)
    if metadata:
        sections.append(metadata)

    if len(doc.hierarchy) > 1:
        sections.append("> " + " > ".join(doc.hierarchy))

    if doc.abstract:
        sections.append(doc.abstract)

    if doc.declaration:
        fence = DECLARATION_FENCES.get(doc.language, doc.language)
        sections.append("## Declaration")
        sections.append(f"```{fence}\n{doc.declaration}\n```")

    if doc.parameters:
        sections.append("## Parameters")
        sections.append(format_parameters(doc.parameters))

    if doc.body:
        sections.append(doc.body)

    if doc.topics:
        sections.append("## Topics")
        for group in doc.topics:
            sections.append(f"### {group.title}")
            sections.append(format_topic_items(group.items))

    if doc.relationships:
        sections.append("## Relationships")
        for group in doc.relationships:
            sections.append(f"### {group.title}")
            sections.append(format_topic_items(group.items))

    if doc.see_also:
        sections.append("## See Also")
        for group in doc.see_also:
            if group.title != "Topics":
                sections.append(f"### {group.title}")
            sections.append(format_topic_items(group.items))

    return "\n\n".join(sections)


def generate_index(title: str, description: str | None = None, items: list[TopicItem] | None = None) -> str:
    """Index page listing the documents of a directory."""
    sections = [f"# {title}"]
    if description:
        sections.append(description)
    if items:
        sections.append("## Contents")
        sections.append(format_topic_items(items))
    return "\n\n".join(sections)
