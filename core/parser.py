# core/parser.py

import re
from bisect import bisect_right
from typing import Dict, List, Optional

from markdown_it import MarkdownIt
from markdown_it.helpers import parseLinkLabel
from markdown_it.rules_inline import autolink, image, link
from markdown_it.token import Token

from models.document import Document, Node, SourceSpan
from .errors import SpanError

# markdown-it splits lines on the same terminators when it normalizes its input.
LINE_BREAK_PATTERN = re.compile(r'\r\n|\r|\n')

TEXT_KINDS = ('text', 'code_inline')
CELL_KINDS = ('th', 'td')

_parser = None

# --- INLINE OFFSET TRACKING ---
# markdown-it-py only reports line ranges for block tokens. The link, image and
# autolink rules are wrapped so that the tokens they create remember where they
# start and end within the inline content, and where their visible text ends.

def _shift(tokens: Optional[List[Token]], offset: int):
    """Makes offsets recorded inside an image's alt text relative to the enclosing content."""
    for token in tokens or []:
        if 'span' in token.meta:
            start, end = token.meta['span']
            token.meta['span'] = (start + offset, end + offset)
            token.meta['text_end'] += offset
        _shift(token.children, offset)

def _tracked(rule, opener: str, bracket_offset: Optional[int], disable_nested: bool = False):
    def tracked_rule(state, silent: bool) -> bool:
        start = state.pos
        first_token = len(state.tokens)
        if not rule(state, silent):
            return False
        if silent:
            return True

        # A pending text token may have been flushed in front of the opener.
        token = next(t for t in state.tokens[first_token:] if t.type == opener)
        token.meta['span'] = (start, state.pos)
        if bracket_offset is None:
            # <url>: there is no separate link text, the closing '>' ends it.
            token.meta['text_end'] = state.pos - 1
        else:
            bracket = start + bracket_offset
            token.meta['text_end'] = parseLinkLabel(state, bracket, disable_nested)
            if opener == 'image':
                _shift(token.children, bracket + 1)
        return True
    return tracked_rule

def create_markdown_parser() -> MarkdownIt:
    """
    Creates a CommonMark parser (plus tables and strikethrough) that keeps
    reference definitions in the token stream and records inline offsets.
    """
    md = MarkdownIt("commonmark", {"inline_definitions": True})
    md.enable(["table", "strikethrough"])
    md.inline.ruler.at("link", _tracked(link, "link_open", 0, disable_nested=True))
    md.inline.ruler.at("image", _tracked(image, "image", 1))
    md.inline.ruler.at("autolink", _tracked(autolink, "link_open", None))
    return md

def get_markdown_parser() -> MarkdownIt:
    """Helper function to build the parser once and cache it."""
    global _parser
    if _parser is None:
        _parser = create_markdown_parser()
    return _parser

# --- SOURCE POSITIONS ---

class LineTable:
    """Start and end offsets (excluding the terminator) of every line of the source."""

    def __init__(self, source: str):
        self.source = source
        self.starts = [0]
        self.ends = []
        for match in LINE_BREAK_PATTERN.finditer(source):
            self.ends.append(match.start())
            self.starts.append(match.end())
        self.ends.append(len(source))
        # Columns already claimed by inline content, for lines shared by several cells.
        self.claimed: Dict[int, int] = {}

    def __len__(self):
        return len(self.starts)

    def text(self, index: int) -> str:
        return self.source[self.starts[index]:self.ends[index]]

    def spans(self, first: int, last: int) -> List[SourceSpan]:
        if last <= first:
            last = first + 1
        return [
            SourceSpan(self.starts[index], self.ends[index] - self.starts[index])
            for index in range(first, min(last, len(self)))
        ]

def _align(raw: str, text: str, column: int) -> Optional[List[int]]:
    """
    Matches a line of inline content against its source line, starting at
    `column`. Returns the source column of every character, plus the column
    just past the last one, or None if the text does not match there.
    """
    columns = []
    for char in text:
        # Table rows drop the backslash of an escaped pipe from the cell content.
        if char == '|' and raw.startswith('\\|', column):
            column += 1
        if column >= len(raw):
            return None
        # NUL characters are replaced with U+FFFD when the input is normalized.
        if raw[column] != char and not (char == '\ufffd' and raw[column] == '\0'):
            return None
        columns.append(column)
        column += 1
    columns.append(column)
    return columns

def _locate(raw: str, text: str, is_last: bool, prefer_first: bool, search_from: int) -> Optional[List[int]]:
    """Finds where a line of inline content sits within its source line; see `_align`."""
    # Block markers and indentation are removed from the front of a line,
    # trailing whitespace only from the end of the last line.
    end = len(raw.rstrip()) if is_last else len(raw)
    if not text:
        return [search_from] if prefer_first else [max(search_from, end)]

    first_match = None
    column = raw.find(text[0], search_from)
    while column >= 0:
        columns = _align(raw, text, column)
        if columns is not None:
            if prefer_first or columns[-1] == end:
                return columns
            if first_match is None:
                first_match = columns
        column = raw.find(text[0], column + 1)
    if first_match is not None:
        return first_match

    # Tabs in the indentation are expanded to spaces at the front of the content.
    stripped = text.lstrip(' ')
    if stripped and len(stripped) < len(text):
        columns = _align(raw, stripped, end - len(stripped))
        if columns is not None and columns[0] >= search_from:
            return [columns[0]] * (len(text) - len(stripped)) + columns
    return None

class InlineOffsets:
    """Maps offsets within the content of an `inline` token to offsets within the source."""

    def __init__(self, lines: LineTable, token: Token, line_map: Optional[List[int]], prefer_first: bool = False):
        self._content = token.content
        self._starts: List[int] = []
        # Source offset of every character of each content line plus its end,
        # or None for a line that could not be found in the source.
        self._offsets: List[Optional[List[int]]] = []
        self._line_numbers: List[int] = []
        if line_map is None:
            # Only an error if something inside actually needs a position.
            return

        content_lines = token.content.split('\n')
        position = 0
        for i, text in enumerate(content_lines):
            index = line_map[0] + i
            if index >= len(lines):
                raise SpanError(f"Inline content continues past line {len(lines)}", repr(text[:40]))
            search_from = lines.claimed.get(index, 0)
            columns = _locate(lines.text(index), text, i == len(content_lines) - 1, prefer_first, search_from)
            if columns is not None:
                lines.claimed[index] = columns[-1]
                columns = [lines.starts[index] + column for column in columns]

            self._starts.append(position)
            self._offsets.append(columns)
            self._line_numbers.append(index + 1)
            position += len(text) + 1

    def _line_of(self, offset: int) -> int:
        if not self._starts:
            raise SpanError("Inline content without a line map", repr(self._content[:40]))
        return bisect_right(self._starts, offset) - 1

    def _offsets_of(self, index: int) -> List[int]:
        offsets = self._offsets[index]
        if offsets is None:
            text = self._content[self._starts[index]:].split('\n', 1)[0]
            raise SpanError(f"Cannot locate inline content in line {self._line_numbers[index]}", repr(text[:40]))
        return offsets

    def to_source(self, offset: int) -> int:
        index = self._line_of(offset)
        return self._offsets_of(index)[offset - self._starts[index]]

    def spans(self, start: int, end: int) -> List[SourceSpan]:
        """Returns one span per content line that the range [start, end) touches."""
        spans = []
        first = self._line_of(start)
        last = self._line_of(max(start, end - 1))
        for index in range(first, last + 1):
            line_start = self._starts[index]
            offsets = self._offsets_of(index)
            segment_start = max(start, line_start)
            segment_end = min(end, line_start + len(offsets) - 1)
            if segment_end > segment_start:
                source_start = offsets[segment_start - line_start]
                source_end = offsets[segment_end - 1 - line_start] + 1
                spans.append(SourceSpan(source_start, source_end - source_start))
        return spans

# --- TREE BUILDING ---

def _kind_of(token: Token) -> str:
    if token.nesting == 1 and token.type.endswith('_open'):
        return token.type[:-len('_open')]
    return token.type

def _inline_node(token: Token, offsets: InlineOffsets) -> Node:
    node = Node(_kind_of(token), literal=token.content)
    if node.kind == 'link':
        node.destination = token.attrGet('href')
    elif node.kind == 'image':
        node.destination = token.attrGet('src')

    if 'span' in token.meta:
        start, end = token.meta['span']
        node.spans = offsets.spans(start, end)
        node.text_end = offsets.to_source(token.meta['text_end'])
    return node

def _build_inline(tokens: List[Token], parent: Node, offsets: InlineOffsets):
    stack = [parent]
    for token in tokens:
        if token.nesting == -1:
            stack.pop()
            continue
        node = stack[-1].append(_inline_node(token, offsets))
        if token.nesting == 1:
            stack.append(node)
        elif token.type == 'image':
            _build_inline(token.children or [], node, offsets)

def _label_end(source: str, start: int) -> Optional[int]:
    """Returns the offset of the ']' that closes the first label at or after `start`."""
    index = source.find('[', start)
    if index < 0:
        return None
    index += 1
    while index < len(source):
        char = source[index]
        if char == '\\':
            index += 2
            continue
        if char == ']':
            return index
        index += 1
    return None

def _block_node(token: Token, lines: LineTable) -> Node:
    node = Node(_kind_of(token), literal=token.content)
    if token.map is not None:
        node.spans = lines.spans(*token.map)
    if node.kind == 'definition':
        node.destination = token.meta.get('url')
        if node.spans:
            node.text_end = _label_end(lines.source, node.spans[0].input_index)
    return node

def _build_blocks(tokens: List[Token], root: Node, lines: LineTable):
    stack = [root]
    # Line maps of the open blocks; table body cells do not always carry their own.
    maps = [None]
    for token in tokens:
        if token.nesting == -1:
            stack.pop()
            maps.pop()
            continue
        if token.type == 'inline':
            # Inline children hang directly off their block (paragraph, heading, cell).
            parent = stack[-1]
            line_map = token.map or next((m for m in reversed(maps) if m is not None), None)
            offsets = InlineOffsets(lines, token, line_map, prefer_first=parent.kind in CELL_KINDS)
            _build_inline(token.children or [], parent, offsets)
            continue
        node = stack[-1].append(_block_node(token, lines))
        if token.nesting == 1:
            stack.append(node)
            maps.append(token.map)

def parse_markdown(source: str, md: Optional[MarkdownIt] = None) -> Document:
    """
    Parses Markdown text into a `Document` whose nodes know their position in `source`.
    """
    md = md or get_markdown_parser()
    lines = LineTable(source)
    root = Node('document', spans=[SourceSpan(0, len(source))])
    _build_blocks(md.parse(source), root, lines)
    return Document(source, root)

def extract_text(node: Node) -> str:
    """Concatenates the literal text nested under a node, in document order."""
    parts = []
    for child in node.children:
        if child.kind in TEXT_KINDS:
            parts.append(child.literal)
        else:
            parts.append(extract_text(child))
    return "".join(parts)
