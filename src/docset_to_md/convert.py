"""
Convert an Apple DocC docset into a tree of markdown files.

Usage:
    docset-to-md <docset> <output> [--language swift|objc ...] [--type T ...]
                 [--framework F ...] [--limit N] [--download]
                 [--capitalize-frameworks] [--validate]

Output layout:
    swift/_index.md
    swift/uikit/_index.md
    swift/uikit/uiwindow.md
    swift/uikit/uiwindow/rootviewcontroller.md
    objective-c/...
"""

import argparse
import sys
import time
from pathlib import Path, PurePosixPath
from typing import NamedTuple, Sequence

from docset_to_md import keys
from docset_to_md.document import parse_document
from docset_to_md.dsidx import TOP_LEVEL_TYPES, EntryFilter, IndexEntry, SearchIndex
from docset_to_md.extract import DSIDX_PATH, ContentExtractor, is_docc_docset
from docset_to_md.links import LanguageAvailabilityIndex, SourceContext, resolve_link
from docset_to_md.markdown import generate_index, generate_markdown
from docset_to_md.paths import (
    INDEX_FILENAME,
    LANGUAGE_DIRECTORIES,
    LANGUAGE_TITLES,
    entry_relpath,
    framework_directory,
    language_directory,
)
from docset_to_md.render import RenderedDocument, TopicItem, render_document
from docset_to_md.validate import format_validation_report, validate_links


class ConvertOptions(NamedTuple):
    output_dir: Path
    languages: tuple = ()
    types: tuple = ()
    frameworks: tuple = ()
    limit: int | None = None
    download: bool = False
    capitalize_frameworks: bool = False
    batch_size: int = 500
    validate: bool = False


class ConversionResult(NamedTuple):
    processed: int = 0
    written: int = 0
    failed: int = 0
    skipped: int = 0
    downloaded: int = 0
    indexes: int = 0
    elapsed: float = 0.0


def write_markdown(path: Path, content: str) -> None:
    """Write a markdown file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class EntryRenderer:
    """Renders request keys to markdown using one docset's content and language index."""

    def __init__(
        self,
        extractor: ContentExtractor,
        index: LanguageAvailabilityIndex | None = None,
        capitalize_frameworks: bool = False,
    ) -> None:
        self.extractor = extractor
        self.index = index
        self.capitalize_frameworks = capitalize_frameworks

    def render_entry(self, request_key: str, language: str | None = None) -> RenderedDocument | None:
        """Render the document behind a request key, or None if there is no content for it."""
        data = self.extractor.extract_by_request_key(request_key)
        if data is None:
            return None
        try:
            return render_document(
                parse_document(data),
                language or keys.language_of(request_key),
                SourceContext.from_request_key(request_key),
                self.index,
                self.capitalize_frameworks,
            )
        except RecursionError:
            print(f"Error processing {request_key}: content nested too deeply", file=sys.stderr)
            return None

    def resolve_link(
        self, target_url: str, target_title: str | None, context: SourceContext | None
    ) -> str | None:
        return resolve_link(
            target_url, target_title, context, self.index, self.capitalize_frameworks
        )


class DocsetConverter:
    """Runs a conversion over the entries of a docset's search index."""

    def __init__(self, docset_path: Path, options: ConvertOptions) -> None:
        self.docset_path = docset_path
        self.options = options
        # framework -> language -> items for the framework index page
        self.framework_items: dict[str, dict[str, list[TopicItem]]] = {}
        # (language, framework) pairs with a converted framework root document
        self.framework_roots: set[tuple[str, str]] = set()
        self.written_paths: set[PurePosixPath] = set()

    def entry_filter(self) -> EntryFilter:
        return EntryFilter(
            types=tuple(self.options.types),
            frameworks=tuple(self.options.frameworks),
            languages=tuple(self.options.languages),
            limit=self.options.limit,
        )

    def convert(self) -> ConversionResult:
        start = time.monotonic()
        processed = written = failed = skipped = 0
        self.framework_items.clear()
        self.framework_roots.clear()
        self.written_paths.clear()
        self.options.output_dir.mkdir(parents=True, exist_ok=True)

        with SearchIndex(self.docset_path / DSIDX_PATH) as search_index, \
                ContentExtractor.from_docset(self.docset_path, self.options.download) as extractor:
            renderer = EntryRenderer(
                extractor,
                search_index.build_language_availability(),
                self.options.capitalize_frameworks,
            )

            for entry in search_index.iter_entries(self.entry_filter()):
                processed += 1
                try:
                    status = self.convert_entry(entry, renderer)
                except Exception as e:
                    print(f"Error processing {entry.request_key}: {e}", file=sys.stderr)
                    status = "failed"

                if status == "written":
                    written += 1
                elif status == "skipped":
                    skipped += 1
                else:
                    failed += 1

                if self.options.batch_size and processed % self.options.batch_size == 0:
                    extractor.clear_cache()
                    print(f"Processed {processed} entries...")

            downloaded = extractor.download_count()

        indexes = self.write_indexes()
        return ConversionResult(
            processed=processed,
            written=written,
            failed=failed,
            skipped=skipped,
            downloaded=downloaded,
            indexes=indexes,
            elapsed=time.monotonic() - start,
        )

    def convert_entry(self, entry: IndexEntry, renderer: EntryRenderer) -> str:
        """Convert one entry. Returns ``written``, ``skipped`` or ``failed``."""
        relpath = entry_relpath(entry.request_key, entry.name, self.options.capitalize_frameworks)
        if relpath in self.written_paths:
            return "skipped"

        doc = renderer.render_entry(entry.request_key, entry.language)
        if doc is None:
            return "failed"

        write_markdown(self.options.output_dir / relpath, generate_markdown(doc))
        self.written_paths.add(relpath)
        self.track_for_index(entry, doc, relpath)
        return "written"

    def track_for_index(self, entry: IndexEntry, doc: RenderedDocument, relpath: PurePosixPath) -> None:
        framework = keys.framework_of(entry.request_key)
        if framework is None:
            return

        by_language = self.framework_items.setdefault(framework, {})
        items = by_language.setdefault(entry.language, [])

        if not keys.path_segments(entry.request_key):
            self.framework_roots.add((entry.language, framework))
            return

        if entry.type in TOP_LEVEL_TYPES:
            fw_root = PurePosixPath(
                language_directory(entry.language),
                framework_directory(framework, self.options.capitalize_frameworks),
            )
            items.append(TopicItem(
                title=entry.name,
                url=f"./{relpath.relative_to(fw_root).as_posix()}",
                abstract=doc.abstract,
                deprecated=doc.deprecated,
                beta=doc.beta,
            ))

    def write_indexes(self) -> int:
        """Write framework and language index pages. Returns how many were written."""
        count = 0
        capitalize = self.options.capitalize_frameworks
        indexed: dict[str, list[str]] = {language: [] for language in LANGUAGE_DIRECTORIES}

        for framework in sorted(self.framework_items):
            for language, items in self.framework_items[framework].items():
                fw_dir = framework_directory(framework, capitalize)
                if (language, framework) in self.framework_roots:
                    indexed[language].append(fw_dir)
                    continue
                if not items:
                    continue
                content = generate_index(
                    fw_dir,
                    f"Documentation for the {fw_dir} framework.",
                    sorted(items, key=lambda item: item.title.lower()),
                )
                write_markdown(
                    self.options.output_dir / language_directory(language) / fw_dir / INDEX_FILENAME,
                    content,
                )
                indexed[language].append(fw_dir)
                count += 1

        for language, fw_dirs in indexed.items():
            if not fw_dirs:
                continue
            title = LANGUAGE_TITLES[language]
            content = generate_index(
                f"{title} Documentation",
                f"API documentation in {title}.",
                [TopicItem(fw_dir, f"./{fw_dir}/{INDEX_FILENAME}") for fw_dir in sorted(fw_dirs)],
            )
            write_markdown(self.options.output_dir / language_directory(language) / INDEX_FILENAME, content)
            count += 1

        return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert an Apple DocC docset to markdown")
    parser.add_argument("docset", help="Path to the .docset directory.")
    parser.add_argument("output", help="Output directory.")
    parser.add_argument(
        "--language",
        action="append",
        choices=sorted(LANGUAGE_DIRECTORIES),
        help="Only convert entries in this language (repeatable).",
    )
    parser.add_argument("--type", action="append", help="Only convert entries of this type (repeatable).")
    parser.add_argument("--framework", action="append", help="Only convert this framework (repeatable).")
    parser.add_argument("--limit", type=int, help="Maximum number of entries to convert.")
    parser.add_argument(
        "--download",
        action="store_true",
        help="Fetch documents missing from the docset from developer.apple.com.",
    )
    parser.add_argument(
        "--capitalize-frameworks",
        action="store_true",
        help="Use display names (UIKit, Foundation) for framework directories.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=500,
        help="Clear the decompression cache after this many entries (default: 500).",
    )
    parser.add_argument("--validate", action="store_true", help="Check links after converting.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    docset_path = Path(args.docset)
    if not is_docc_docset(docset_path):
        print(f"Error: Not a DocC docset: {docset_path}", file=sys.stderr)
        return 1

    options = ConvertOptions(
        output_dir=Path(args.output),
        languages=tuple(args.language or ()),
        types=tuple(args.type or ()),
        frameworks=tuple(args.framework or ()),
        limit=args.limit,
        download=args.download,
        capitalize_frameworks=args.capitalize_frameworks,
        batch_size=args.batch_size,
        validate=args.validate,
    )

    print(f"Converting {docset_path} to {options.output_dir}...")
    result = DocsetConverter(docset_path, options).convert()
    print(
        f"Done. Processed {result.processed} entries: {result.written} written, "
        f"{result.failed} failed, {result.skipped} skipped, {result.indexes} index pages "
        f"in {result.elapsed:.1f}s."
    )
    if options.download:
        print(f"Downloaded {result.downloaded} documents.")

    if options.validate:
        print()
        print("--- Link Validation ---")
        print(format_validation_report(validate_links(options.output_dir)))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
