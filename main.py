import argparse
import sys

import config
from core.errors import ConfigurationError, RewriteError, TaskError
from tasks.site_index import run_site_index
from tasks.fix_anchors import run_fix_anchors
from tasks.license import run_license
from tasks.join_paths import run_join_paths

def build_parser():
    parser = argparse.ArgumentParser(
        description="Helpers for building a project's documentation site: site index, anchors, license and paths."
    )
    parser.add_argument(
        '--config',
        type=str,
        help="A YAML file with settings that override the packaged defaults."
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    site_index_parser = subparsers.add_parser(
        "site-index",
        help="Generate the Markdown site index from the README."
    )
    site_index_parser.add_argument('--source', dest='source_file', help="The source Markdown file.")
    site_index_parser.add_argument('--target', dest='target_file', help="The site index file to generate.")
    site_index_parser.add_argument('--title', help="The HTML title to add.")
    site_index_parser.add_argument(
        '--project-url',
        help="The URL of the project site. Links starting with it are made relative."
    )
    site_index_parser.add_argument(
        '--badge-pattern',
        dest='badge_patterns',
        action='append',
        help="A regular expression for badge image URLs. Can be repeated; replaces the configured patterns."
    )
    site_index_parser.add_argument('--encoding', help="The encoding for reading and writing.")
    site_index_parser.add_argument('--skip', action='store_true', help="Skip generating the site index.")
    site_index_parser.add_argument('--verbose', action='store_true', help="Print every change that is made.")
    site_index_parser.add_argument('--report', action='store_true', help="Write an HTML report of all changes.")
    site_index_parser.set_defaults(handler=run_site_index)

    fix_anchors_parser = subparsers.add_parser(
        "fix-anchors",
        help="Fix '.28', '.29' and '.25' in src and href attributes of generated site files."
    )
    fix_anchors_parser.add_argument('files', nargs='+', help="The files to fix in place.")
    fix_anchors_parser.add_argument(
        '--replace',
        dest='replacements',
        action='append',
        help="A replacement as SEARCH=REPLACE. Can be repeated; replaces the configured replacements."
    )
    fix_anchors_parser.add_argument('--encoding', help="The encoding for reading and writing.")
    fix_anchors_parser.add_argument('--verbose', action='store_true', help="Print every fixed anchor.")
    fix_anchors_parser.add_argument('--report', action='store_true', help="Write an HTML report of all changes.")
    fix_anchors_parser.set_defaults(handler=run_fix_anchors)

    license_parser = subparsers.add_parser(
        "license",
        help="Find the license file and copy it into the build directory."
    )
    license_parser.add_argument('--base-dir', default=".", help="The directory to start looking in.")
    license_parser.add_argument('--filename', help="The name of the license file.")
    license_parser.add_argument('--max-parent-count', type=int, help="The maximum number of parent directories to check.")
    license_parser.add_argument('--target-dir', help="The directory to copy the license file to.")
    license_parser.add_argument('--skip', action='store_true', help="Skip adding the license file.")
    license_parser.set_defaults(handler=run_license)

    join_paths_parser = subparsers.add_parser(
        "join-paths",
        help="Join paths with the platform-specific path separator."
    )
    join_paths_parser.add_argument('paths', nargs='+', help="The paths to join.")
    join_paths_parser.add_argument('--property', dest='property_name', help="Record the result under this name.")
    join_paths_parser.add_argument(
        '--properties-file',
        default="build/paths.properties",
        help="The properties file to record the result in."
    )
    join_paths_parser.set_defaults(handler=run_join_paths)

    return parser

def _pick(value, section: dict, key: str):
    """Command-line values win over configured ones."""
    return value if value is not None else section.get(key)

def dispatch(args, settings: dict):
    if args.command == 'site-index':
        section = settings.get('SITE_INDEX', {})
        return args.handler(
            source_file=_pick(args.source_file, section, 'source_file'),
            target_file=_pick(args.target_file, section, 'target_file'),
            title=_pick(args.title, section, 'title'),
            project_url=_pick(args.project_url, section, 'project_url'),
            badge_patterns=_pick(args.badge_patterns, section, 'badge_patterns'),
            encoding=_pick(args.encoding, section, 'encoding'),
            skip=args.skip,
            verbose=args.verbose,
            report=args.report
        )
    elif args.command == 'fix-anchors':
        section = settings.get('FIX_ANCHORS', {})
        return args.handler(
            files=args.files,
            replacements=_pick(args.replacements, section, 'replacements'),
            encoding=_pick(args.encoding, section, 'encoding'),
            verbose=args.verbose,
            report=args.report
        )
    elif args.command == 'license':
        section = settings.get('LICENSE', {})
        return args.handler(
            base_dir=args.base_dir,
            filename=_pick(args.filename, section, 'filename'),
            max_parent_count=_pick(args.max_parent_count, section, 'max_parent_count') or 0,
            target_dir=_pick(args.target_dir, section, 'target_dir'),
            markers=section.get('project_markers'),
            skip=args.skip
        )
    elif args.command == 'join-paths':
        return args.handler(
            paths=args.paths,
            property_name=args.property_name,
            properties_file=args.properties_file
        )

def main(argv=None):
    """
    The main entry point for the command-line interface.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = config.load_settings(args.config)
        dispatch(args, settings)
    except (ConfigurationError, RewriteError, TaskError) as e:
        print(f"❌ {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
