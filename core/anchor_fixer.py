# core/anchor_fixer.py

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from models.events import FixedAnchor, Observer, notify
from .errors import ConfigurationError

# Matches the value of src and href attributes in generated HTML.
TAG_PATTERN = re.compile(r'(?:src|href)="([^"]*)"')

@dataclass(frozen=True)
class Replacement:
    """A literal search string and the text that replaces it."""
    search: str
    replace: str

    def __str__(self):
        return f"{self.search} => {self.replace}"

    @classmethod
    def parse(cls, value: str) -> "Replacement":
        """Parses 'SEARCH=REPLACE', as given on the command line."""
        search, sep, replace = value.partition('=')
        if not sep or not search:
            raise ConfigurationError(f"Invalid replacement '{value}', expected SEARCH=REPLACE")
        return cls(search, replace)

# The site renderer escapes '(', ')' and '%' in anchors as '.28', '.29' and '.25'.
DEFAULT_REPLACEMENTS = [
    Replacement('.28', '('),
    Replacement('.29', ')'),
    Replacement('.25', '%'),
]

def to_replacements(values: Optional[Iterable]) -> List[Replacement]:
    """Accepts Replacement objects, {'search': ..., 'replace': ...} dicts or 'SEARCH=REPLACE' strings."""
    if values is None:
        return list(DEFAULT_REPLACEMENTS)
    replacements = []
    for value in values:
        if isinstance(value, Replacement):
            replacements.append(value)
        elif isinstance(value, dict):
            if 'search' not in value or not value['search']:
                raise ConfigurationError(f"Replacement without a search string: {value}")
            replacements.append(Replacement(str(value['search']), str(value.get('replace') or '')))
        else:
            replacements.append(Replacement.parse(str(value)))
    return replacements

def fix_url(url: str, replacements: Iterable[Replacement]) -> str:
    """Applies the replacements to the URL one after the other."""
    result = url
    for replacement in replacements:
        result = result.replace(replacement.search, replacement.replace)
    return result

def fix_site_anchors(content: str, replacements: Optional[Iterable[Replacement]] = None,
                     observer: Optional[Observer] = None, context=None) -> str:
    """
    Fixes incorrectly escaped characters in the src and href attributes of
    generated HTML. Everything outside of those attribute values is kept as is.
    """
    replacements = to_replacements(replacements)
    result = []
    index = 0
    for match in TAG_PATTERN.finditer(content):
        start, end = match.span(1)
        url = match.group(1)
        fixed_url = fix_url(url, replacements)

        result.append(content[index:start])
        result.append(fixed_url)
        index = end

        if fixed_url != url:
            notify(observer, FixedAnchor(context, url, fixed_url))
    result.append(content[index:])
    return "".join(result)
