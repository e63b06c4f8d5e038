# reporting.py

from collections import Counter
from datetime import datetime
from html import escape
from itertools import groupby
from typing import List

import config
from models.events import ReplacementEvent

HTML_TEMPLATE = """
<!DOCTYPE html><html lang="en"><head><meta charset="UTF-8"><title>{report_title}</title>
<style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; line-height: 1.6; margin: 0; background-color: #f9f9f9; color: #333; }}
    .container {{ max-width: 900px; margin: 2em auto; background: white; padding: 2em; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }}
    h1, h2 {{ color: #333; border-bottom: 2px solid #eee; padding-bottom: 0.5em; }}
    ul {{ list-style-type: none; padding-left: 0; }}
    li {{ background-color: #fdfdfd; border: 1px solid #eee; padding: 10px; margin-bottom: 5px; border-radius: 4px; }}
    code {{ background-color: #eef; padding: 2px 5px; border-radius: 3px; font-size: 0.9em; word-break: break-all; }}
    .summary-item strong {{ color: #005a9c; }}
    .footer {{ text-align: center; color: #777; font-size: 0.9em; margin-top: 2em; }}
</style></head>
<body><div class="container"><h1>{report_title}</h1>{summary_html}{sections_html}
<div class="footer"><p>Report generated on {generation_date}</p></div>
</div></body></html>
"""

SECTION_TITLES = {
    'RemovedProjectUrl': "Relative Links",
    'RemovedBadgeWithLink': "Removed Badges With Link",
    'RemovedBadgeWithoutLink': "Removed Badges Without Link",
    'FixedAnchor': "Fixed Anchors",
}

def print_event(event: ReplacementEvent):
    """Observer that prints each change as it happens."""
    print(f"  -> {event.message}")

class EventCollector:
    """Observer that keeps all events, optionally printing them as well."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.events: List[ReplacementEvent] = []

    def __call__(self, event: ReplacementEvent):
        self.events.append(event)
        if self.verbose:
            print_event(event)

def _event_item(event: ReplacementEvent) -> str:
    item = f"<li>{escape(event.message)}"
    if event.context:
        item += f"<br><small>Context: <code>{escape(event.context)}</code></small>"
    return item + "</li>"

def build_sections(events: List[ReplacementEvent]) -> list:
    """Groups the events by kind, keeping the document order within each group."""
    order = list(SECTION_TITLES)
    ordered = sorted(events, key=lambda e: order.index(e.kind) if e.kind in order else len(order))
    sections = []
    for kind, group in groupby(ordered, key=lambda e: e.kind):
        items = "".join(_event_item(event) for event in group)
        sections.append({'title': SECTION_TITLES.get(kind, kind), 'content': f"<ul>{items}</ul>"})
    return sections

def generate_html_report(report_title: str, summary_items: dict, sections: list, output_filename: str):
    report_dir = config.REPORT_DIR
    report_dir.mkdir(parents=True, exist_ok=True)

    summary_html = "<h2>Summary</h2><ul>"
    for key, value in summary_items.items():
        summary_html += f'<li class="summary-item">{escape(key)}: <strong>{escape(str(value))}</strong></li>'
    summary_html += "</ul>"

    sections_html = ""
    for section in sections:
        sections_html += f"<h2>{escape(section['title'])}</h2>"
        sections_html += section['content']

    final_html = HTML_TEMPLATE.format(
        report_title=escape(report_title),
        summary_html=summary_html,
        sections_html=sections_html,
        generation_date=datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    )

    report_path = report_dir / output_filename
    with open(report_path, 'w', encoding='utf-8') as f:
        f.write(final_html)

    print(f"\n✅ Report successfully generated: {report_path.resolve()}")
    return report_path

def generate_change_report(report_title: str, events: List[ReplacementEvent], output_filename: str, **summary):
    """Writes an HTML report listing every change, with counts per kind of change."""
    counts = Counter(event.kind for event in events)
    summary_items = dict(summary)
    summary_items["Total changes"] = len(events)
    for kind, title in SECTION_TITLES.items():
        if counts.get(kind):
            summary_items[title] = counts[kind]
    return generate_html_report(report_title, summary_items, build_sections(events), output_filename)
