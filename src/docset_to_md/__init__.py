"""
docset_to_md - Convert Apple DocC docsets to Markdown.

This package provides tools for:
- Locating and extracting DocC JSON documents from a docset (keys, blobs, extract)
- Fetching documents missing from the docset (remote)
- Rendering documents to Markdown with relative cross links (render, links, markdown)
- Converting a whole docset and checking its links (convert, validate)
"""

from docset_to_md.keys import (
    InvalidKeyFormat,
    DecodedKey,
    decode,
    token,
    language_of,
    framework_of,
    doc_path,
    path_segments,
    make_key,
)

from docset_to_md.blobs import (
    ContainerRef,
    CacheDb,
    ContainerStore,
    brotli_decompress,
)

from docset_to_md.extract import (
    ContentExtractor,
    extract,
    is_docc_docset,
)

from docset_to_md.remote import (
    DownloadStats,
    RemoteFetcher,
    api_url,
)

from docset_to_md.document import (
    DocumentTree,
    Reference,
    parse_document,
)

from docset_to_md.paths import (
    sanitize_filename,
    framework_display_name,
    entry_relpath,
)

from docset_to_md.links import (
    SourceContext,
    LanguageAvailabilityIndex,
    resolve_link,
)

from docset_to_md.render import (
    RenderedDocument,
    TopicItem,
    TopicGroup,
    render_document,
    render_blocks,
    render_block,
    render_inline,
)

from docset_to_md.markdown import (
    generate_markdown,
    generate_index,
)

from docset_to_md.dsidx import (
    IndexEntry,
    EntryFilter,
    SearchIndex,
)

from docset_to_md.convert import (
    ConvertOptions,
    ConversionResult,
    DocsetConverter,
    EntryRenderer,
    write_markdown,
)

from docset_to_md.validate import (
    validate_links,
    format_validation_report,
)

__version__ = "0.1.0"
