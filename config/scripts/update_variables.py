"""
Sync GitHub repository variables into a Fabric variable library file.

Reads repository variables named <prefix>_<env>_<NAME>, strips the
<prefix>_<env>_ part and merges them into variables.json. Existing entries
that are not fetched again are kept.

Usage:
    python update_variables.py -f ./variables.json
    python update_variables.py -p prod -e production -f /path/to/variables.json
    python update_variables.py -p vt -e dev -f ./config/variables.json -r owner/repo

Requires the GitHub CLI (gh) to be installed and authenticated.
"""

# fmt: off
# isort: skip_file
import argparse
import sys
from pathlib import Path

# Add config directory to Python path to find fabric_ci module
config_dir = Path(__file__).parent.parent
if str(config_dir) not in sys.path:
    sys.path.insert(0, str(config_dir))

from fabric_ci import bootstrap, fetch_repository_variables
from fabric_ci.utils import ensure_utf8_stdout, load_ci_config
from fabric_ci.variable_library import (
    build_variables, count_variables, filter_variables, merge_stats,
    merge_variables, read_existing_variables, variable_prefix,
    write_variable_library
)
# fmt: on


def parse_args(argv=None, defaults=None):
    defaults = defaults or {}
    parser = argparse.ArgumentParser(
        description='Write GitHub repository variables to a Fabric variables.json file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python update_variables.py -f ./variables.json
  python update_variables.py -p prod -e production -f /path/to/variables.json
  python update_variables.py -p vt -e dev -f ./config/variables.json -r owner/repo
        """
    )
    parser.add_argument('--prefix', '-p', default=defaults.get('prefix', 'vt'),
                        help='Variable prefix to filter (default: %(default)s)')
    parser.add_argument('--env', '-e', dest='environment', default=defaults.get('environment', 'dev'),
                        help='Environment to filter (default: %(default)s)')
    parser.add_argument('--file', '-f', dest='file_path', required=True,
                        help='Path to variables.json file')
    parser.add_argument('--repo', '-r',
                        help='GitHub repository (owner/repo format)')
    parser.add_argument('--escape-values', action='store_true',
                        help='Store values JSON-escaped (legacy variables.json format)')
    return parser.parse_args(argv)


def print_summary(file_path, stats):
    print()
    print(f"✓ Successfully wrote variables to: {file_path}")
    print(f"  Total variables: {stats['total']}")
    if stats['updated'] or stats['added'] or stats['unchanged']:
        print(f"  Updated: {stats['updated']}")
        print(f"  Added: {stats['added']}")
        print(f"  Unchanged: {stats['unchanged']}")


def sync_variables(args):
    """
    Fetch, filter, merge and write the variable library.

    Returns:
        bool: True on success (including "nothing to sync")
    """
    file_path = Path(args.file_path)

    print("Fetching variables from GitHub...")
    print(f"Prefix: {args.prefix}")
    print(f"Environment: {args.environment}")
    print(f"Output file: {file_path}")

    fetched = fetch_repository_variables(args.repo)
    if fetched is None:
        return False

    filtered = filter_variables(fetched, args.prefix, args.environment)

    if not filtered:
        print(f"⚠ No variables found with prefix '{variable_prefix(args.prefix, args.environment)}'")
        if not file_path.exists():
            print("Creating empty variables.json file...")
            write_variable_library(file_path, [])
            print_summary(file_path, merge_stats([], [], []))
        else:
            print("Keeping existing file unchanged.")
            print()
            print(f"✓ File unchanged: {file_path}")
            print(f"  Total variables: {count_variables(file_path)}")
        return True

    existing = read_existing_variables(file_path)
    new = build_variables(filtered, escape_values=args.escape_values)

    print("Merging variables...")
    merged = merge_variables(existing, new)
    stats = merge_stats(existing, new, merged)

    write_variable_library(file_path, merged)
    print_summary(file_path, stats)
    return True


def main(argv=None):
    bootstrap()
    ensure_utf8_stdout()

    defaults = load_ci_config().get('variable_library') or {}
    args = parse_args(argv, defaults)

    success = sync_variables(args)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
