"""
Check that relative links in a converted tree point at files that exist.
"""

import os
import re
from pathlib import Path
from typing import NamedTuple

LINK_PATTERN = re.compile(r"\[((?:\\.|[^\]\\])+)\]\(([^)]+\.md)\)")

MAX_REPORTED_LINKS = 100


class Link(NamedTuple):
    text: str
    path: str


class BrokenLink(NamedTuple):
    source_file: str
    text: str
    path: str
    resolved_path: str


class ValidationResult(NamedTuple):
    files: int
    total_links: int
    valid_links: int
    broken_links: list
    absolute_links: list


def find_markdown_files(root: Path) -> list[Path]:
    if not root.is_dir():
        return []
    return sorted(root.rglob("*.md"))


def extract_links(content: str) -> list[Link]:
    """All ``[text](target.md)`` links in a markdown document."""
    return [Link(m.group(1), m.group(2)) for m in LINK_PATTERN.finditer(content)]


def validate_links(root: Path) -> ValidationResult:
    """Resolve every relative link against the file that contains it."""
    files = find_markdown_files(root)
    existing = {os.path.normpath(path) for path in files}
    broken = []
    absolute = []
    total = 0
    valid = 0

    for md_file in files:
        for link in extract_links(md_file.read_text(encoding="utf-8")):
            if link.path.startswith(("http://", "https://")):
                continue
            total += 1
            source = md_file.relative_to(root).as_posix()
            if link.path.startswith("/"):
                absolute.append((source, link.path))
                continue

            resolved = os.path.normpath(md_file.parent / link.path)
            if resolved in existing:
                valid += 1
            else:
                broken.append(BrokenLink(
                    source_file=source,
                    text=link.text,
                    path=link.path,
                    resolved_path=Path(os.path.relpath(resolved, root)).as_posix(),
                ))

    return ValidationResult(len(files), total, valid, broken, absolute)


def format_validation_report(result: ValidationResult) -> str:
    lines = [
        f"Files: {result.files}",
        f"Total links: {result.total_links}",
        f"  Valid: {result.valid_links}",
        f"  Broken: {len(result.broken_links)}",
    ]
    if result.absolute_links:
        lines.append(f"  Absolute (should be relative): {len(result.absolute_links)}")

    if result.broken_links:
        lines.append("")
        lines.append(f"Broken links ({len(result.broken_links)}):")
        by_source: dict[str, list[BrokenLink]] = {}
        for link in result.broken_links[:MAX_REPORTED_LINKS]:
            by_source.setdefault(link.source_file, []).append(link)
        for source, links in by_source.items():
            lines.append(f"  {source}")
            for link in links:
                lines.append(f"    [{link.text}]({link.path}) -> {link.resolved_path}")
        hidden = len(result.broken_links) - MAX_REPORTED_LINKS
        if hidden > 0:
            lines.append(f"  ... and {hidden} more")

    return "\n".join(lines)
