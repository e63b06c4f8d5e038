# core/link_rewriter.py

from typing import Optional

from models.document import Document, Node
from models.events import Observer, RemovedProjectUrl, notify
from .emitter import Emitter
from .parser import parse_markdown
from .spans import end_of, start_of


class ProjectUrlRelocator:
    """
    Makes every link, image and reference definition that points below the
    project URL relative to it, by cutting the project URL out of the
    destination as written in the source.
    """

    def __init__(self, document: Document, project_url: str, observer: Optional[Observer] = None):
        self.document = document
        self.project_url = project_url
        self.observer = observer
        self.emitter = Emitter(document.source)

    def rewrite(self) -> str:
        self._visit_children(self.document.root)
        return self.emitter.flush()

    def _visit_children(self, node: Node):
        for child in node.children:
            self._visit(child)

    def _visit(self, node: Node):
        if node.kind == 'definition':
            self._relocate_definition(node)
        elif node.kind in ('link', 'image'):
            # The visible text comes before the destination in the source.
            self._visit_children(node)
            self._relocate_link(node)
        else:
            self._visit_children(node)

    def _points_below_project(self, node: Node) -> bool:
        return bool(node.destination) and node.destination.startswith(self.project_url)

    def _relocate_definition(self, node: Node):
        if not self._points_below_project(node):
            return
        # The destination is the first thing after the label; a title may follow it.
        label_end = node.text_end if node.text_end is not None else start_of(node)
        index = self.document.source.find(self.project_url, label_end, end_of(node))
        if index >= 0:
            self._remove(index, node.destination)

    def _relocate_link(self, node: Node):
        if not self._points_below_project(node):
            return
        # Reference links and autolinks have no inline destination after their text.
        text_end = node.text_end
        if text_end is None or not self.document.source.startswith('(', text_end + 1):
            return
        index = self.document.source.find(self.project_url, text_end, end_of(node))
        if index >= 0:
            self._remove(index, node.destination)

    def _remove(self, index: int, destination: str):
        self.emitter.emit_through(index)
        self.emitter.skip_to(index + len(self.project_url))
        notify(self.observer, RemovedProjectUrl(destination, destination[len(self.project_url):]))


def remove_project_url(content: str, project_url: Optional[str], observer: Optional[Observer] = None) -> str:
    """
    Removes the project URL from all link and image destinations that start with it.

    A blank project URL leaves the content untouched.
    """
    if not project_url or not project_url.strip():
        return content
    return ProjectUrlRelocator(parse_markdown(content), project_url, observer).rewrite()
