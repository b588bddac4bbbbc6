"""Tests for docset_to_md.markdown module."""

from docset_to_md.document import Platform, parse_document
from docset_to_md.links import SourceContext
from docset_to_md.markdown import format_platforms, format_role, generate_index, generate_markdown
from docset_to_md.render import RenderedDocument, TopicGroup, TopicItem, render_document


class TestFormatters:
    """Tests for format_role and format_platforms functions."""

    def test_known_roles(self):
        assert format_role("collection") == "Framework"
        assert format_role("sampleCode") == "Sample Code"
        assert format_role("restRequestSymbol") == "REST Request"

    def test_unknown_role_passes_through(self):
        assert format_role("pseudoSymbol") == "pseudoSymbol"

    def test_platforms(self):
        platforms = (
            Platform("iOS", "2.0"),
            Platform("macOS", None, deprecated=True),
            Platform("visionOS", "1.0", beta=True),
        )
        assert format_platforms(platforms) == "iOS 2.0+, macOS (deprecated), visionOS 1.0+ (beta)"


class TestGenerateMarkdown:
    """Tests for generate_markdown function."""

    def test_minimal(self):
        doc = RenderedDocument(title="UIWindow", role="symbol", language="swift")
        assert generate_markdown(doc) == "# UIWindow\n\n**Type**: Symbol"

    def test_unknown_role_has_no_metadata(self):
        doc = RenderedDocument(title="Thing", role="unknown", language="swift")
        assert generate_markdown(doc) == "# Thing"

    def test_metadata_block(self):
        doc = RenderedDocument(
            title="UIWindow",
            role="symbol",
            language="swift",
            framework="UIKit",
            platforms=(Platform("iOS", "2.0"),),
            deprecated=True,
            beta=True,
        )
        assert generate_markdown(doc).split("\n\n")[1] == (
            "**Framework**: UIKit  \n**Type**: Symbol  \n**Platforms**: iOS 2.0+  \n**Status**: Deprecated"
        )

    def test_objc_declaration_fence(self):
        doc = RenderedDocument(title="UIWindow", role="unknown", language="objc", declaration="@interface UIWindow")
        assert "## Declaration\n\n```objectivec\n@interface UIWindow\n```" in generate_markdown(doc)

    def test_breadcrumb_needs_two_levels(self):
        single = RenderedDocument(title="X", role="unknown", language="swift", hierarchy=("UIKit",))
        double = single._replace(hierarchy=("UIKit", "UIView"))
        assert ">" not in generate_markdown(single)
        assert "> UIKit > UIView" in generate_markdown(double)

    def test_parameters(self):
        doc = RenderedDocument(
            title="f",
            role="unknown",
            language="swift",
            parameters=(("a", "First.\n\nMore."), ("b", "Second.")),
        )
        assert "## Parameters\n\n- **a**: First.\n\n  More.\n\n- **b**: Second." in generate_markdown(doc)

    def test_see_also_topics_group_has_no_heading(self):
        doc = RenderedDocument(
            title="X",
            role="unknown",
            language="swift",
            see_also=(
                TopicGroup("Topics", (TopicItem("A", "./a.md"),)),
                TopicGroup("Related", (TopicItem("B"),)),
            ),
        )
        assert generate_markdown(doc).endswith("## See Also\n\n- [A](./a.md)\n\n### Related\n\n- B")

    def test_full_page_order(self, uiwindow_json):
        context = SourceContext.from_request_key("ls/documentation/uikit/uiwindow")
        markdown = generate_markdown(render_document(parse_document(uiwindow_json), "swift", context))
        headings = [
            "# UIWindow",
            "> UIKit > UIView",
            "The backdrop for your app's user interface.",
            "## Declaration",
            "## Parameters",
            "### Overview",
            "## Topics",
            "### Configuring the Window",
            "## Relationships",
            "### Inherits From",
            "## See Also",
            "### Strings",
        ]
        positions = [markdown.index(heading) for heading in headings]
        assert positions == sorted(positions)
        assert "- [makeKeyAndVisible()](./uiwindow/makekeyandvisible.md) *(Required)*" in markdown
        assert "- [init(frame:)](./uiwindow/init_frame.md) *(Deprecated, Beta)*" in markdown
        assert (
            "- [UIView](./uiview.md): An object that manages the content for a rectangular area." in markdown
        )
        assert "**Status**: Beta" in markdown


class TestGenerateIndex:
    """Tests for generate_index function."""

    def test_with_items(self):
        content = generate_index(
            "uikit",
            "Documentation for the uikit framework.",
            [TopicItem("UIView", "./uiview.md"), TopicItem("UIWindow", "./uiwindow.md", deprecated=True)],
        )
        assert content == (
            "# uikit\n\nDocumentation for the uikit framework.\n\n## Contents\n\n"
            "- [UIView](./uiview.md)\n- [UIWindow](./uiwindow.md) *(Deprecated)*"
        )

    def test_title_only(self):
        assert generate_index("Empty") == "# Empty"
