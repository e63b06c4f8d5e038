# core/spans.py

from models.document import Node
from .errors import SpanError


def _checked_spans(node: Node):
    if not node.spans:
        raise SpanError(f"Node of kind '{node.kind}' has no source spans")
    for span in node.spans:
        if span.input_index < 0 or span.length < 0:
            raise SpanError(f"Node of kind '{node.kind}' has a malformed source span {span}")
    return node.spans


def start_of(node: Node) -> int:
    """Returns the absolute offset at which the node starts in the original text."""
    return min(span.input_index for span in _checked_spans(node))


def end_of(node: Node) -> int:
    """
    Returns the absolute offset just past the end of the node.

    A node can own several disjoint spans (one per source line for content that
    continues over a soft line break), so this is the maximum over all of them.
    """
    return max(span.end for span in _checked_spans(node))


def span_of(node: Node):
    start = start_of(node)
    end = end_of(node)
    if end < start:
        raise SpanError(f"Node of kind '{node.kind}' ends at {end} before it starts at {start}")
    return start, end
