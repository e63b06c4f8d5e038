# core/processing.py

from typing import Iterable, Optional, Union

from models.events import Observer
from .badges import BadgeClassifier, remove_badges
from .link_rewriter import remove_project_url

SITE_HEADER_TEMPLATE = "<head>\n  <title>{title}</title>\n</head>\n\n"

def rewrite_site_index(content: str, project_url: Optional[str],
                       badge_patterns: Union[Iterable[str], BadgeClassifier],
                       observer: Optional[Observer] = None) -> str:
    """
    Turns a README into the body of a site index page.

    Runs two independent passes, each over a fresh parse of the current text:
    first links below the project URL are made relative, then badges are removed.
    """
    # Compile the patterns before touching the content, so bad patterns fail early.
    classifier = badge_patterns if isinstance(badge_patterns, BadgeClassifier) else BadgeClassifier(badge_patterns)

    content = remove_project_url(content, project_url, observer)
    content = remove_badges(content, classifier, observer)
    return content

def build_site_header(title: str) -> str:
    """Returns the HTML head block that gives the generated page its title."""
    return SITE_HEADER_TEMPLATE.format(title=title)

def generate_site_index(content: str, title: str, project_url: Optional[str],
                        badge_patterns: Union[Iterable[str], BadgeClassifier],
                        observer: Optional[Observer] = None) -> str:
    return build_site_header(title) + rewrite_site_index(content, project_url, badge_patterns, observer)
