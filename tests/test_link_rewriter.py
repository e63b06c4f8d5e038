"""
Tests for making links below the project URL relative.
"""

import textwrap

from core.link_rewriter import remove_project_url
from models.events import RemovedProjectUrl

PROJECT = "https://example.org/p/"


class TestRemoveProjectUrl:

    def test_inline_link(self, events):
        result = remove_project_url("See [goals](https://example.org/p/goals.html).\n", PROJECT, events.append)
        assert result == "See [goals](goals.html).\n"
        assert events == [RemovedProjectUrl("https://example.org/p/goals.html", "goals.html")]
        assert events[0].message == "Replaced URL 'https://example.org/p/goals.html' with 'goals.html'"

    def test_other_links_are_kept(self, events):
        content = "[a](https://example.org/other/a.html) and [b](b.html)\n"
        assert remove_project_url(content, PROJECT, events.append) == content
        assert events == []

    def test_image(self):
        result = remove_project_url("![logo](https://example.org/p/images/logo.png)", PROJECT)
        assert result == "![logo](images/logo.png)"

    def test_title_and_angle_brackets_are_kept(self):
        content = '[a](<https://example.org/p/a b.html> "Title")\n'
        assert remove_project_url(content, PROJECT) == '[a](<a b.html> "Title")\n'

    def test_link_text_containing_project_url(self):
        content = "[https://example.org/p/x](https://example.org/p/x.html)"
        assert remove_project_url(content, PROJECT) == "[https://example.org/p/x](x.html)"

    def test_image_inside_link_both_relocated(self, events):
        content = "[![logo](https://example.org/p/logo.png)](https://example.org/p/index.html)"
        assert remove_project_url(content, PROJECT, events.append) == "[![logo](logo.png)](index.html)"
        assert [event.relative_url for event in events] == ["logo.png", "index.html"]

    def test_reference_definition(self, events):
        content = textwrap.dedent("""\
            Read the [docs][docs].

            [docs]: https://example.org/p/docs.html
        """)
        expected = textwrap.dedent("""\
            Read the [docs][docs].

            [docs]: docs.html
        """)
        assert remove_project_url(content, PROJECT, events.append) == expected
        assert len(events) == 1

    def test_reference_definition_with_project_url_in_label(self):
        content = "[https://example.org/p/]: https://example.org/p/index.html\n"
        assert remove_project_url(content, PROJECT) == "[https://example.org/p/]: index.html\n"

    def test_reference_link_label_is_kept(self, events):
        content = "[site][https://example.org/p/]\n\n[https://example.org/p/]: https://example.org/p/index.html\n"
        expected = "[site][https://example.org/p/]\n\n[https://example.org/p/]: index.html\n"
        assert remove_project_url(content, PROJECT, events.append) == expected
        assert len(events) == 1

    def test_autolink_is_kept(self, events):
        content = "<https://example.org/p/a.html>\n"
        assert remove_project_url(content, PROJECT, events.append) == content
        assert events == []

    def test_reference_definition_with_project_url_in_title(self, events):
        content = '[r]: https://example.org/p/a "https://example.org/p/"\n'
        expected = '[r]: a "https://example.org/p/"\n'
        assert remove_project_url(content, PROJECT, events.append) == expected
        assert events == [RemovedProjectUrl("https://example.org/p/a", "a")]

    def test_link_in_table_cell_with_escaped_pipe(self, events):
        content = "| a |\n|---|\n| x \\| y [T](https://example.org/p/a) |\n"
        assert remove_project_url(content, PROJECT, events.append) == "| a |\n|---|\n| x \\| y [T](a) |\n"
        assert len(events) == 1

    def test_link_over_two_lines_in_blockquote(self):
        content = "> A [long\n> link](https://example.org/p/x.html) here\n"
        assert remove_project_url(content, PROJECT) == "> A [long\n> link](x.html) here\n"

    def test_link_in_table_cell(self):
        content = textwrap.dedent("""\
            | Goal | Docs |
            | ---- | ---- |
            | run  | [run](https://example.org/p/run.html) |
        """)
        result = remove_project_url(content, PROJECT)
        assert "| run  | [run](run.html) |" in result

    def test_crlf_is_preserved(self):
        content = "x\r\n[a](https://example.org/p/a.html)\r\ny\r\n"
        assert remove_project_url(content, PROJECT) == "x\r\n[a](a.html)\r\ny\r\n"

    def test_blank_project_url_is_a_no_op(self, events):
        content = "[a](https://example.org/p/a.html)"
        assert remove_project_url(content, None, events.append) == content
        assert remove_project_url(content, "   ", events.append) == content
        assert events == []

    def test_is_idempotent(self):
        content = "[a](https://example.org/p/a.html) ![b](https://example.org/p/b.png)\n"
        once = remove_project_url(content, PROJECT)
        assert remove_project_url(once, PROJECT) == once
