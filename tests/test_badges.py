"""
Tests for recognizing and removing badges.
"""

import pytest

from core.badges import BadgeClassifier, remove_badges
from core.errors import ConfigurationError
from core.parser import parse_markdown
from models.events import RemovedBadgeWithLink, RemovedBadgeWithoutLink

PATTERNS = ["https://img.shields.io/.*", "https://snyk.io/test/.*/badge.svg"]


class TestBadgeClassifier:

    def test_matches_whole_url(self):
        classifier = BadgeClassifier(PATTERNS)
        assert classifier.is_badge_url("https://snyk.io/test/github/x/badge.svg")
        assert not classifier.is_badge_url("https://snyk.io/test/github/x/badge.svg.png")
        assert not classifier.is_badge_url("see https://img.shields.io/x")

    def test_query_suffix_is_ignored(self):
        classifier = BadgeClassifier(PATTERNS)
        assert classifier.is_badge_url("https://snyk.io/test/github/x/badge.svg?targetFile=pom.xml")
        assert classifier.is_badge_url("https://snyk.io/test/github/x/badge.svg&style=flat")

    def test_first_matching_pattern(self):
        classifier = BadgeClassifier(["https://.*", "https://img.shields.io/.*"])
        assert classifier.matching_pattern("https://img.shields.io/x") == "https://.*"
        assert classifier.matching_pattern(None) is None

    def test_invalid_pattern(self):
        with pytest.raises(ConfigurationError) as exc_info:
            BadgeClassifier(["https://img.shields.io/(unclosed"])
        assert "unclosed" in str(exc_info.value)

    def test_empty_classifier_is_false(self):
        assert not BadgeClassifier([])
        assert not BadgeClassifier(None)
        assert BadgeClassifier(PATTERNS)

    def test_link_with_only_a_badge(self):
        classifier = BadgeClassifier(PATTERNS)
        document = parse_markdown("[![b](https://img.shields.io/b)](https://ci.example.org)")
        link, = document.nodes_of_kind('link')
        image, = document.nodes_of_kind('image')
        assert classifier.badge_link_target(link) is image

    def test_link_with_text_and_badge_is_not_a_badge_link(self):
        classifier = BadgeClassifier(PATTERNS)
        document = parse_markdown("[CI ![b](https://img.shields.io/b)](https://ci.example.org)")
        link, = document.nodes_of_kind('link')
        assert classifier.badge_link_target(link) is None


class TestRemoveBadges:

    def test_badge_on_its_own_line(self):
        assert remove_badges("x\n![badge](https://img.shields.io/b)\ny", PATTERNS) == "x\ny"

    def test_badge_inside_text(self):
        assert remove_badges("text ![badge](https://img.shields.io/b) more", PATTERNS) == "text more"

    def test_badge_with_link(self, events):
        content = "[![badge](https://img.shields.io/b)](https://ci.example.org)"
        assert remove_badges(content, PATTERNS, events.append) == ""
        assert events == [RemovedBadgeWithLink("https://img.shields.io/b", "badge", "https://ci.example.org")]
        assert events[0].context == "https://ci.example.org"

    def test_badge_without_link_event(self, events):
        remove_badges("a ![Build](https://img.shields.io/build)", PATTERNS, events.append)
        assert events == [RemovedBadgeWithoutLink("https://img.shields.io/build", "Build")]
        assert events[0].message == "Removed badge 'Build' with URL 'https://img.shields.io/build'"

    def test_crlf_line_is_removed_completely(self):
        content = "x\r\n![b](https://img.shields.io/b)\r\ny"
        assert remove_badges(content, PATTERNS) == "x\r\ny"

    def test_badge_at_end_of_text(self):
        assert remove_badges("x\n![b](https://img.shields.io/b)", PATTERNS) == "x\n"

    def test_only_one_space_is_absorbed(self):
        assert remove_badges("a  ![b](https://img.shields.io/b)!", PATTERNS) == "a !"

    def test_consecutive_badges_on_one_line(self):
        content = "Badges: ![a](https://img.shields.io/a) ![b](https://img.shields.io/b)\n"
        assert remove_badges(content, PATTERNS) == "Badges:\n"

    def test_badges_on_consecutive_lines(self, events):
        content = (
            "# Title\n"
            "[![a](https://img.shields.io/a)](https://a.example.org)\n"
            "![b](https://img.shields.io/b)\n"
            "\n"
            "Text\n"
        )
        assert remove_badges(content, PATTERNS, events.append) == "# Title\n\nText\n"
        assert [event.kind for event in events] == ["RemovedBadgeWithLink", "RemovedBadgeWithoutLink"]

    def test_badge_in_list_item(self):
        content = "* ![b](https://img.shields.io/b) first\n* second\n"
        assert remove_badges(content, PATTERNS) == "* first\n* second\n"

    def test_badge_in_blockquote(self):
        content = "> Intro\n> ![b](https://img.shields.io/b)\n> More\n"
        assert remove_badges(content, PATTERNS) == "> Intro\n>\n> More\n"

    def test_other_images_are_kept(self, events):
        content = "![logo](images/logo.png) [![x](images/x.png)](https://img.shields.io/x)\n"
        assert remove_badges(content, PATTERNS, events.append) == content
        assert events == []

    def test_badge_nested_in_link_with_text(self):
        content = "[CI ![b](https://img.shields.io/b)](https://ci.example.org)"
        assert remove_badges(content, PATTERNS) == "[CI](https://ci.example.org)"

    def test_label_includes_code_and_emphasis(self, events):
        remove_badges("x ![*Build* `main`](https://img.shields.io/b)", PATTERNS, events.append)
        assert events[0].label == "Build main"

    def test_no_patterns_is_a_no_op(self, events):
        content = "![b](https://img.shields.io/b)"
        assert remove_badges(content, [], events.append) == content
        assert events == []

    def test_output_is_never_longer(self):
        content = "A ![b](https://img.shields.io/b) [![c](https://img.shields.io/c)](https://x.org) z\n"
        result = remove_badges(content, PATTERNS)
        assert len(result) <= len(content)
        assert remove_badges(result, PATTERNS) == result

    def test_badge_in_table_cell_with_escaped_pipe(self, events):
        content = "| a |\n|---|\n| x \\| y ![b](https://img.shields.io/a) |\n"
        assert remove_badges(content, PATTERNS, events.append) == "| a |\n|---|\n| x \\| y |\n"
        assert [event.image_url for event in events] == ["https://img.shields.io/a"]
