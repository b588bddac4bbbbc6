"""
Output layout shared by the file writer and the link resolver.

Documents are written to ``{language}/{framework}/{dirs...}/{name}.md``;
a framework root goes to ``{language}/{framework}/_index.md``. The writer
and the resolver must build names with the same functions here or links
break silently.
"""

import re
from pathlib import PurePosixPath

from docset_to_md import keys

INDEX_FILENAME = "_index.md"

MAX_FILENAME_LENGTH = 100

# Language -> output directory
LANGUAGE_DIRECTORIES = {
    "swift": "swift",
    "objc": "objective-c",
}

LANGUAGE_TITLES = {
    "swift": "Swift",
    "objc": "Objective-C",
}

# Lower-case framework name -> display name
FRAMEWORK_DISPLAY_NAMES = {
    "uikit": "UIKit",
    "appkit": "AppKit",
    "swiftui": "SwiftUI",
    "foundation": "Foundation",
    "corefoundation": "CoreFoundation",
    "coredata": "CoreData",
    "coregraphics": "CoreGraphics",
    "coreanimation": "CoreAnimation",
    "corelocation": "CoreLocation",
    "coreml": "CoreML",
    "avfoundation": "AVFoundation",
    "webkit": "WebKit",
    "mapkit": "MapKit",
    "healthkit": "HealthKit",
    "homekit": "HomeKit",
    "cloudkit": "CloudKit",
    "gamekit": "GameKit",
    "spritekit": "SpriteKit",
    "scenekit": "SceneKit",
    "metalkit": "MetalKit",
    "realitykit": "RealityKit",
    "arkit": "ARKit",
    "vision": "Vision",
    "naturallanguage": "NaturalLanguage",
    "createml": "CreateML",
    "combine": "Combine",
    "swift": "Swift",
    "dispatch": "Dispatch",
    "os": "os",
    "xcode": "Xcode",
}

INVALID_CHARS = re.compile(r'[<>:"/\\|?*]')
WHITESPACE = re.compile(r"\s+")
UNDERSCORES = re.compile(r"__+")


def sanitize_filename(name: str) -> str:
    """
    Turn a title or URL segment into a file name stem.

    Method signatures keep their argument labels:
    ``init(frame:)`` -> ``init_frame``,
    ``tableView(_:cellForRowAt:)`` -> ``tableview_cellforrowat``.
    """
    if "(" in name:
        method, _, params = name.partition("(")
        params = params.replace("(", "").replace(")", "")
        labels = []
        for part in params.split(":"):
            words = part.split()
            if not words:
                continue
            label = words[-1]
            if label != "_":
                labels.append(label)
        name = "_".join([method] + labels)

    sanitized = INVALID_CHARS.sub("_", name)
    sanitized = WHITESPACE.sub("_", sanitized)
    sanitized = UNDERSCORES.sub("_", sanitized)
    sanitized = sanitized.strip("_")
    sanitized = sanitized[:MAX_FILENAME_LENGTH]
    return (sanitized or "unnamed").lower()


def language_directory(language: str) -> str:
    return LANGUAGE_DIRECTORIES[language]


def other_language(language: str) -> str:
    return "objc" if language == "swift" else "swift"


def framework_display_name(framework: str) -> str:
    """Display name for a framework; unknown names get their first letter capitalized."""
    lowered = framework.lower()
    if lowered in FRAMEWORK_DISPLAY_NAMES:
        return FRAMEWORK_DISPLAY_NAMES[lowered]
    return framework[:1].upper() + framework[1:]


def framework_directory(framework: str, capitalize: bool = False) -> str:
    """Directory name of a framework in the output tree."""
    if capitalize:
        return framework_display_name(framework)
    return framework.lower()


def entry_relpath(request_key: str, name: str = "", capitalize: bool = False) -> PurePosixPath:
    """
    Output path of an entry relative to the output root.

    ``ls/documentation/uikit/uiwindow`` -> ``swift/uikit/uiwindow.md``;
    ``ls/documentation/uikit`` -> ``swift/uikit/_index.md``. Keys without a
    documentation path fall back to ``{language}/other/{name}.md``.
    """
    language = keys.language_of(request_key)
    root = PurePosixPath(language_directory(language))
    framework = keys.framework_of(request_key)
    if framework is None:
        return root / "other" / f"{sanitize_filename(name)}.md"

    segments = keys.path_segments(request_key)
    fw_dir = root / framework_directory(framework, capitalize)
    if not segments:
        return fw_dir / INDEX_FILENAME

    dirs = [sanitize_filename(segment) for segment in segments[:-1]]
    return fw_dir.joinpath(*dirs, f"{sanitize_filename(segments[-1])}.md")
