"""
Typed view of a DocC JSON document.

``parse_document`` accepts any dict that passed extraction and fills in
defaults for everything that is missing.
"""

from typing import Any, NamedTuple

from docset_to_md.nodes import parse_blocks, parse_inlines


class Platform(NamedTuple):
    name: str
    introduced_at: str | None = None
    deprecated: bool = False
    beta: bool = False


class Metadata(NamedTuple):
    title: str = "Untitled"
    role: str = "unknown"
    role_heading: str | None = None
    modules: tuple = ()
    platforms: tuple = ()
    symbol_kind: str | None = None


class ImageVariant(NamedTuple):
    url: str
    traits: tuple = ()


class Reference(NamedTuple):
    identifier: str
    type: str | None = None
    title: str | None = None
    url: str | None = None
    kind: str | None = None
    role: str | None = None
    abstract: tuple = ()
    required: bool = False
    deprecated: bool = False
    beta: bool = False
    alt: str | None = None
    variants: tuple = ()


class Declaration(NamedTuple):
    languages: tuple
    platforms: tuple
    tokens: tuple

    @property
    def text(self) -> str:
        return "".join(self.tokens)


class Parameter(NamedTuple):
    name: str
    content: tuple


class ContentSection(NamedTuple):
    """
    One primary content section.

    ``kind`` is ``declarations``, ``content``, ``parameters`` or anything
    newer; only the fields of that kind are filled.
    """
    kind: str
    content: tuple = ()
    declarations: tuple = ()
    parameters: tuple = ()


class TopicSection(NamedTuple):
    title: str | None
    identifiers: tuple
    kind: str | None = None


class DocumentTree(NamedTuple):
    identifier_url: str
    interface_language: str | None
    metadata: Metadata
    abstract: tuple
    primary_content_sections: tuple
    topic_sections: tuple
    see_also_sections: tuple
    relationship_sections: tuple
    references: dict
    hierarchy: tuple
    kind: str | None = None


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_platform(data: dict) -> Platform:
    return Platform(
        name=str(data.get("name", "")),
        introduced_at=_str_or_none(data.get("introducedAt")),
        deprecated=bool(data.get("deprecated", False)),
        beta=bool(data.get("beta", False)),
    )


def parse_metadata(data: dict) -> Metadata:
    title = data.get("title")
    role = data.get("role")
    return Metadata(
        title=title if isinstance(title, str) and title else "Untitled",
        role=role if isinstance(role, str) and role else "unknown",
        role_heading=_str_or_none(data.get("roleHeading")),
        modules=tuple(
            str(module["name"])
            for module in _list(data.get("modules"))
            if isinstance(module, dict) and "name" in module
        ),
        platforms=tuple(
            parse_platform(platform)
            for platform in _list(data.get("platforms"))
            if isinstance(platform, dict)
        ),
        symbol_kind=_str_or_none(data.get("symbolKind")),
    )


def parse_reference(identifier: str, data: dict) -> Reference:
    return Reference(
        identifier=str(data.get("identifier", identifier)),
        type=_str_or_none(data.get("type")),
        title=_str_or_none(data.get("title")),
        url=_str_or_none(data.get("url")),
        kind=_str_or_none(data.get("kind")),
        role=_str_or_none(data.get("role")),
        abstract=parse_inlines(data.get("abstract")),
        required=bool(data.get("required", False)),
        deprecated=bool(data.get("deprecated", False)),
        beta=bool(data.get("beta", False)),
        alt=_str_or_none(data.get("alt")),
        variants=tuple(
            ImageVariant(str(variant["url"]), tuple(_list(variant.get("traits"))))
            for variant in _list(data.get("variants"))
            if isinstance(variant, dict) and "url" in variant
        ),
    )


def parse_declaration(data: dict) -> Declaration:
    return Declaration(
        languages=tuple(_list(data.get("languages"))),
        platforms=tuple(_list(data.get("platforms"))),
        tokens=tuple(
            _text(tok.get("text"))
            for tok in _list(data.get("tokens"))
            if isinstance(tok, dict)
        ),
    )


def parse_content_section(data: dict) -> ContentSection:
    return ContentSection(
        kind=str(data.get("kind", "")),
        content=parse_blocks(data.get("content")),
        declarations=tuple(
            parse_declaration(decl)
            for decl in _list(data.get("declarations"))
            if isinstance(decl, dict)
        ),
        parameters=tuple(
            Parameter(_text(param.get("name")), parse_blocks(param.get("content")))
            for param in _list(data.get("parameters"))
            if isinstance(param, dict)
        ),
    )


def parse_topic_sections(items: Any) -> tuple:
    return tuple(
        TopicSection(
            title=_str_or_none(section.get("title")),
            identifiers=tuple(str(i) for i in _list(section.get("identifiers"))),
            kind=_str_or_none(section.get("kind")),
        )
        for section in _list(items)
        if isinstance(section, dict)
    )


def parse_document(data: dict[str, Any]) -> DocumentTree:
    """Build a DocumentTree from a raw DocC JSON object."""
    identifier = _dict(data.get("identifier"))
    references = {
        key: parse_reference(key, value)
        for key, value in _dict(data.get("references")).items()
        if isinstance(value, dict)
    }
    paths = _list(_dict(data.get("hierarchy")).get("paths"))
    hierarchy = tuple(
        tuple(str(i) for i in path) for path in paths if isinstance(path, list)
    )

    return DocumentTree(
        identifier_url=str(identifier.get("url", "")),
        interface_language=_str_or_none(identifier.get("interfaceLanguage")),
        metadata=parse_metadata(_dict(data.get("metadata"))),
        abstract=parse_inlines(data.get("abstract")),
        primary_content_sections=tuple(
            parse_content_section(section)
            for section in _list(data.get("primaryContentSections"))
            if isinstance(section, dict)
        ),
        topic_sections=parse_topic_sections(data.get("topicSections")),
        see_also_sections=parse_topic_sections(data.get("seeAlsoSections")),
        relationship_sections=parse_topic_sections(data.get("relationshipsSections")),
        references=references,
        hierarchy=hierarchy,
        kind=_str_or_none(data.get("kind")),
    )
