"""
Tests for converting markdown into ContentAST trees.
"""

from InlineBlanks.contentast import ContentAST
from InlineBlanks.markdown_tree import MarkdownTreeRenderer, markdown_to_tree
from InlineBlanks.walker import flatten


class TestMarkdownToTree:
    """Tests for markdown_to_tree()."""

    def test_returns_section_of_paragraphs(self):
        tree = markdown_to_tree("First.\n\nSecond.")

        assert isinstance(tree, ContentAST.Section)
        assert [type(node) for node in tree.elements if not isinstance(node, ContentAST.Text)] == [
            ContentAST.Paragraph,
            ContentAST.Paragraph,
        ]

    def test_inline_formatting_becomes_elements(self):
        tree = markdown_to_tree("Hello **[a]** and *b*.")
        paragraph = tree.elements[0]

        assert paragraph.elements == [
            ContentAST.Text("Hello "),
            ContentAST.Strong([ContentAST.Text("[a]")], tag="strong"),
            ContentAST.Text(" and "),
            ContentAST.Emphasis([ContentAST.Text("b")], tag="em"),
            ContentAST.Text("."),
        ]

    def test_brackets_without_reference_stay_text(self):
        tree = markdown_to_tree("The capital is [Paris|Lyon] and [Rome].")
        assert flatten(tree) == "The capital is [Paris|Lyon] and [Rome].\n"

    def test_backslash_escapes_are_resolved(self):
        tree = markdown_to_tree(r"Use \*literal\* [x]")
        assert flatten(tree) == "Use *literal* [x]\n"

    def test_lists_keep_items(self):
        tree = markdown_to_tree("- one [a]\n- two")
        listing = tree.elements[0]

        assert listing.tag == "ul"
        items = [node for node in listing.elements if isinstance(node, ContentAST.ListItem)]
        assert len(items) == 2
        assert flatten(listing) == "one [a]\ntwo"

    def test_pipe_table_is_left_as_text(self):
        source = "| a | b |\n|---|---|\n| [x] | y |"
        tree = markdown_to_tree(source)

        assert not any(isinstance(node, ContentAST.Table) for node in tree.elements)
        assert flatten(tree) == source + "\n"

    def test_empty_source(self):
        tree = markdown_to_tree("")
        assert isinstance(tree, ContentAST.Section)
        assert flatten(tree) == ""


class TestMarkdownTreeRenderer:
    """Tests for the tag strategies and blank markers."""

    def test_marker_becomes_span_by_default(self):
        tree = MarkdownTreeRenderer().render('x <span data-blank="3"></span> y')
        spans = [node for node in tree.elements[0].elements if isinstance(node, ContentAST.Span)]

        assert len(spans) == 1
        assert spans[0].attributes == {"data-blank": "3"}

    def test_override_replaces_conversion(self):
        def _marker(tag, attributes, children):
            if "data-blank" in attributes:
                return ContentAST.BlankMarker(int(attributes["data-blank"]))
            return ContentAST.Span(children, attributes=attributes)

        tree = MarkdownTreeRenderer(overrides={"span": _marker}).render('x <span data-blank="3"></span> y')
        markers = [node for node in tree.elements[0].elements if isinstance(node, ContentAST.BlankMarker)]

        assert [marker.index for marker in markers] == [3]

    def test_override_returning_none_drops_node(self):
        renderer = MarkdownTreeRenderer(overrides={"strong": lambda tag, attributes, children: None})
        tree = renderer.render("keep **drop** keep")
        assert flatten(tree) == "keep  keep\n"

    def test_tables_option_builds_table(self):
        tree = MarkdownTreeRenderer(tables=True).render("| a | b |\n|---|---|\n| c | d |")
        tables = [node for node in tree.elements if isinstance(node, ContentAST.Table)]

        assert len(tables) == 1
        assert len(tables[0].rows()) == 2
        header_cells = tables[0].rows()[0].cells()
        assert [cell.tag for cell in header_cells] == ["th", "th"]


class TestRawHtml:
    """Authored HTML becomes real elements, not escaped text."""

    def test_inline_tag_wraps_blank_text(self):
        tree = markdown_to_tree("Capital: <b>[Paris]</b>.")
        paragraph = tree.elements[0]

        assert paragraph.elements == [
            ContentAST.Text("Capital: "),
            ContentAST.Strong([ContentAST.Text("[Paris]")], tag="b"),
            ContentAST.Text("."),
        ]

    def test_block_html_keeps_attributes(self):
        tree = markdown_to_tree('<div class="note">Fill [a] in.</div>')
        divs = [node for node in tree.elements if isinstance(node, ContentAST.Div)]

        assert len(divs) == 1
        assert divs[0].attributes == {"class": "note"}
        assert "[a]" in flatten(divs[0])

    def test_entities_are_decoded(self):
        tree = markdown_to_tree("R&amp;D and 1 &lt; 2 [x]")
        assert flatten(tree) == "R&D and 1 < 2 [x]\n"
        assert "R&amp;D and 1 &lt; 2" in tree.render("html")

    def test_hint_tag_becomes_hint_block(self):
        tree = markdown_to_tree('Before. <hint title="Geography">On the *Seine*.</hint>')
        hints = [node for node in tree.elements[0].elements if isinstance(node, ContentAST.Hint)]

        assert len(hints) == 1
        assert hints[0].title == "Geography"
        assert not hints[0].is_open
        assert isinstance(hints[0].elements[1], ContentAST.Emphasis)
