# models/document.py
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

@dataclass(frozen=True)
class SourceSpan:
    """A (start offset, length) pair locating part of a node in the original text."""
    input_index: int
    length: int

    @property
    def end(self) -> int:
        return self.input_index + self.length

@dataclass(eq=False)
class Node:
    """
    A single node of a parsed Markdown document.

    `kind` is the markdown-it-py token type without its `_open` suffix
    ("paragraph", "link", "image", "definition", "text", ...). Links, images
    and reference definitions carry their `destination`; text-like nodes carry
    their `literal`. For links, images and reference definitions `text_end` is
    the absolute offset of the `]` that closes the visible text or the label.
    """
    kind: str
    destination: Optional[str] = None
    literal: str = ""
    text_end: Optional[int] = None
    spans: List[SourceSpan] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    parent: Optional["Node"] = field(default=None, repr=False)

    def append(self, child: "Node") -> "Node":
        child.parent = self
        self.children.append(child)
        return child

    @property
    def first_child(self) -> Optional["Node"]:
        return self.children[0] if self.children else None

    def walk(self) -> Iterator["Node"]:
        """Yields this node and all of its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

@dataclass
class Document:
    """The original, unparsed text together with the tree parsed from it."""
    source: str
    root: Node

    def nodes_of_kind(self, kind: str) -> List[Node]:
        return [node for node in self.root.walk() if node.kind == kind]
