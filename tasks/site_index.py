# tasks/site_index.py

from pathlib import Path

import config
from core.badges import BadgeClassifier
from core.errors import RewriteError, TaskError
from core.file_system import read_text, resolve_encoding, write_text
from core.processing import generate_site_index
from reporting import EventCollector, generate_change_report

def run_site_index(source_file, target_file, title="Overview", project_url=None, badge_patterns=None,
                   encoding=None, skip=False, verbose=False, report=False):
    """
    Generates the Markdown site index from a README: adds an HTML title, makes
    links below the project URL relative and removes badges.
    """
    if skip:
        print("Generating the site index is skipped.")
        return None

    source_file = Path(source_file)
    target_file = Path(target_file)

    # Settings are validated before anything is read or written.
    encoding = resolve_encoding(encoding)
    classifier = BadgeClassifier(badge_patterns or [])

    print(f"🚀 Generating site index from '{source_file}'...")
    collector = EventCollector(verbose=verbose)

    try:
        content = read_text(source_file, encoding)
    except OSError as e:
        raise TaskError(f"Could not read '{source_file}': {e}") from e

    try:
        output = generate_site_index(content, title, project_url, classifier, collector)
    except RewriteError as e:
        raise e.with_context(str(source_file))

    try:
        write_text(target_file, output, encoding)
    except OSError as e:
        raise TaskError(f"Could not write '{target_file}': {e}") from e

    print(f"  -> {len(collector.events)} change(s) made.")
    print(f"✅ Generated site index '{target_file}' from '{source_file}'.")

    if report:
        generate_change_report(
            f"Site Index: {source_file.name}",
            collector.events,
            config.SITE_INDEX_REPORT_FILENAME,
            **{"Source": str(source_file), "Target": str(target_file)}
        )
    return collector.events
