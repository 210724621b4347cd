"""Read GitHub repository variables through the GitHub CLI."""

import json

from .utils import get_gh_cli_path, run_command


def build_variable_list_command(repo=None):
    cmd = [get_gh_cli_path(), 'variable', 'list', '--json', 'name,value']
    if repo:
        cmd.extend(['--repo', repo])
    return cmd


def fetch_repository_variables(repo=None):
    """
    List the repository variables visible to the authenticated `gh` session.

    Args:
        repo: Optional 'owner/repo' override (defaults to the current checkout)

    Returns:
        list: [{'name', 'value'}] dicts, or None if `gh` failed
    """
    result = run_command(build_variable_list_command(repo))

    if result.returncode != 0:
        print("✗ Failed to list GitHub variables")
        print(f"  stderr: {result.stderr.strip()}")
        return None

    if not result.stdout.strip():
        return []

    try:
        variables = json.loads(result.stdout)
    except json.JSONDecodeError:
        print("✗ Failed to parse GitHub variables: Invalid JSON")
        print(f"  stdout: {result.stdout}")
        return None

    return [{'name': v.get('name', ''), 'value': v.get('value', '')} for v in variables]
