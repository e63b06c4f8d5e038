# tasks/fix_anchors.py

from pathlib import Path

import config
from core.anchor_fixer import fix_site_anchors, to_replacements
from core.errors import TaskError
from core.file_system import read_text, resolve_encoding, write_text
from reporting import EventCollector, generate_change_report

def fix_anchors_in_file(path: Path, encoding: str, replacements, observer=None) -> bool:
    """Fixes the anchors in a single file in place. Returns whether the file changed."""
    print(f"Fixing anchors in '{path}'...")
    try:
        content = read_text(path, encoding)
    except OSError as e:
        raise TaskError(f"Could not read '{path}': {e}") from e

    fixed_content = fix_site_anchors(content, replacements, observer, context=path)

    try:
        write_text(path, fixed_content, encoding)
    except OSError as e:
        raise TaskError(f"Could not write '{path}': {e}") from e
    return fixed_content != content

def run_fix_anchors(files, replacements=None, encoding=None, verbose=False, report=False):
    """
    Repairs anchors in generated site files where '(', ')' and '%' have been
    replaced by '.28', '.29' and '.25'.
    """
    encoding = resolve_encoding(encoding)
    replacements = to_replacements(replacements)

    print(f"🚀 Fixing anchors in {len(files)} file(s)...")
    collector = EventCollector(verbose=verbose)
    updated_files_count = 0
    for path in files:
        if fix_anchors_in_file(Path(path), encoding, replacements, collector):
            updated_files_count += 1

    print(f"\n✨ Anchor fixing finished. Updated {updated_files_count} file(s).")

    if report:
        generate_change_report("Fixed Site Anchors", collector.events, config.FIX_ANCHORS_REPORT_FILENAME,
                               **{"Files processed": len(files), "Files updated": updated_files_count})
    return collector.events
