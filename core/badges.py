# core/badges.py

import re
from typing import Iterable, List, Optional, Pattern

from models.document import Document, Node
from models.events import Observer, RemovedBadgeWithLink, RemovedBadgeWithoutLink, notify
from .emitter import Emitter
from .errors import ConfigurationError
from .parser import extract_text, parse_markdown
from .spans import span_of

# Badge URLs may carry an arbitrary query string, introduced by '?' or '&'.
OPTIONAL_QUERY_REGEX = r'(?:[?&].*)?'

LINE_BREAKS = '\r\n'


class BadgeClassifier:
    """Recognizes badge images (and links wrapping them) by their URL."""

    def __init__(self, badge_patterns: Iterable[str]):
        self.patterns: List[str] = list(badge_patterns or [])
        self._compiled: List[Pattern] = []
        for pattern in self.patterns:
            try:
                self._compiled.append(re.compile(f'(?:{pattern}){OPTIONAL_QUERY_REGEX}', re.DOTALL))
            except re.error as e:
                raise ConfigurationError(f"Invalid badge pattern '{pattern}': {e}") from e

    def __bool__(self):
        return bool(self.patterns)

    def matching_pattern(self, url: Optional[str]) -> Optional[str]:
        """Returns the first pattern that matches the whole URL, if any."""
        if url is None:
            return None
        for pattern, compiled in zip(self.patterns, self._compiled):
            if compiled.fullmatch(url):
                return pattern
        return None

    def is_badge_url(self, url: Optional[str]) -> bool:
        return self.matching_pattern(url) is not None

    def is_badge_image(self, node: Node) -> bool:
        return node.kind == 'image' and self.is_badge_url(node.destination)

    def badge_link_target(self, node: Node) -> Optional[Node]:
        """Returns the badge image if the link consists of nothing else, otherwise None."""
        if node.kind != 'link' or len(node.children) != 1:
            return None
        image = node.first_child
        return image if self.is_badge_image(image) else None


class BadgeRemover:
    """
    Removes badges from a document in a single forward pass.

    A badge on a line of its own is removed together with that line's
    terminator. Any other badge is removed together with one space directly
    in front of it.
    """

    def __init__(self, document: Document, classifier: BadgeClassifier, observer: Optional[Observer] = None):
        self.document = document
        self.classifier = classifier
        self.observer = observer
        self.emitter = Emitter(document.source)

    def rewrite(self) -> str:
        self._visit_children(self.document.root)
        return self.emitter.flush()

    def _visit_children(self, node: Node):
        for child in node.children:
            if not self._visit(child):
                self._visit_children(child)

    def _visit(self, node: Node) -> bool:
        """Handles a node; returns True if its subtree has been consumed."""
        if node.kind == 'link':
            image = self.classifier.badge_link_target(node)
            if image is None:
                return False
            self._remove(node)
            notify(self.observer, RemovedBadgeWithLink(image.destination, extract_text(node), node.destination))
            return True
        if node.kind == 'image':
            if not self.classifier.is_badge_image(node):
                return False
            self._remove(node)
            notify(self.observer, RemovedBadgeWithoutLink(node.destination, extract_text(node)))
            return True
        return False

    def _is_full_line(self, start: int, end: int) -> bool:
        source = self.document.source
        starts_line = start == 0 or source[start - 1] in LINE_BREAKS
        ends_line = end == len(source) or source[end] in LINE_BREAKS
        return starts_line and ends_line

    def _remove(self, node: Node):
        source = self.document.source
        start, end = span_of(node)
        if self._is_full_line(start, end):
            self.emitter.emit_through(start)
            self.emitter.skip_to(end)
            self.emitter.skip_char('\r')
            self.emitter.skip_char('\n')
        else:
            if start > 0 and source[start - 1] == ' ':
                start -= 1
            self.emitter.emit_through(start)
            self.emitter.skip_to(end)


def remove_badges(content: str, badge_patterns, observer: Optional[Observer] = None) -> str:
    """
    Removes all badges matching any of the given patterns.

    `badge_patterns` is either a list of pattern strings or a prepared
    BadgeClassifier. Without patterns the content is returned untouched.
    """
    classifier = badge_patterns if isinstance(badge_patterns, BadgeClassifier) else BadgeClassifier(badge_patterns)
    if not classifier:
        return content
    return BadgeRemover(parse_markdown(content), classifier, observer).rewrite()
