"""
Create (or reuse) the Fabric workspace for a branch and connect it to Git.

This script is designed to be called from a GitHub Actions job. The workspace
is named <WS_PREFIX>-<branch> (slashes in the branch become hyphens), created
on CAPACITY_ID when missing, and linked to the branch of GITHUB_REPOSITORY
through a pre-configured Fabric Git connection.

Environment variables:
    WS_PREFIX:            Workspace name prefix
    CAPACITY_ID:          Fabric capacity for new workspaces
    AZURE_CLIENT_ID, AZURE_CLIENT_SECRET, AZURE_TENANT_ID: Service principal
    FABRIC_CONNECTION_ID: Fabric connection ID for the GitHub repository
    GITHUB_REPOSITORY:    owner/repo
    BRANCH_NAME:          Branch to link (default: GITHUB_REF_NAME)
    GITHUB_OUTPUT:        Set by Actions; receives workspace_id=<id>
    CONFIG_FILE:          Optional settings file (default: config/templates/fabric-ci.yml)
"""

# fmt: off
# isort: skip_file
import os
import sys
from pathlib import Path

# Add config directory to Python path to find fabric_ci module
config_dir = Path(__file__).parent.parent
if str(config_dir) not in sys.path:
    sys.path.insert(0, str(config_dir))

# Import from fabric_ci modules (must be after sys.path modification)
from fabric_ci import (
    auth, bootstrap, get_fabric_token, get_or_create_workspace,
    connect_workspace_to_git, workspace_name_for_branch
)
from fabric_ci.utils import ensure_utf8_stdout, get_missing_env, load_ci_config, write_github_output
# fmt: on

REQUIRED_ENV = [
    'WS_PREFIX',
    'CAPACITY_ID',
    'AZURE_CLIENT_ID',
    'AZURE_CLIENT_SECRET',
    'AZURE_TENANT_ID',
    'FABRIC_CONNECTION_ID',
    'GITHUB_REPOSITORY',
]

PORTAL_URL = "https://app.fabric.microsoft.com/groups"


def get_branch():
    return os.getenv('BRANCH_NAME') or os.getenv('GITHUB_REF_NAME')


def split_repository(full_name):
    """Split 'owner/repo' on the first slash. Without a slash both parts are the full name."""
    owner, sep, name = full_name.partition('/')
    if not sep:
        return full_name, full_name
    return owner, name


def build_git_config(config, owner, repo_name, branch):
    git_settings = config.get('git') or {}
    return {
        'provider': git_settings.get('provider', 'GitHub'),
        'organization': owner,
        'project': git_settings.get('project'),
        'repository': repo_name,
        'branch': branch,
        'directory': git_settings.get('directory', '/')
    }


def main():
    bootstrap()
    ensure_utf8_stdout()

    # Fail fast before any network call
    missing = get_missing_env(REQUIRED_ENV)
    branch = get_branch()
    if not branch:
        missing.append('BRANCH_NAME (or GITHUB_REF_NAME)')
    if missing:
        print(f"ERROR: Missing required environment variables: {', '.join(missing)}")
        sys.exit(1)

    owner, repo_name = split_repository(os.environ['GITHUB_REPOSITORY'])
    workspace_name = workspace_name_for_branch(os.environ['WS_PREFIX'], branch)
    capacity_id = os.environ['CAPACITY_ID']
    git_config = build_git_config(load_ci_config(), owner, repo_name, branch)

    print("=" * 60)
    print(f">> Target Workspace: '{workspace_name}'")
    print(f">> Repo: {owner}/{repo_name} (Branch: {branch})")
    print("=" * 60)

    print("\n=== AUTHENTICATING ===")
    if not auth(os.environ['AZURE_CLIENT_ID'], os.environ['AZURE_CLIENT_SECRET'], os.environ['AZURE_TENANT_ID']):
        print("\nERROR: Authentication failed. Cannot proceed with workspace creation.")
        sys.exit(1)

    token = get_fabric_token()
    if not token:
        sys.exit(1)

    print("\n=== CHECK / CREATE WORKSPACE ===")
    workspace_id, _ = get_or_create_workspace(token, workspace_name, capacity_id)
    if not workspace_id:
        sys.exit(1)

    write_github_output('workspace_id', workspace_id)

    print("\n=== CONNECT TO GIT ===")
    connection_id = os.environ['FABRIC_CONNECTION_ID']
    print(f">> Connection ID: {connection_id}")
    if not connect_workspace_to_git(token, workspace_id, git_config, connection_id):
        sys.exit(1)

    print("\n>> All done! Fabric workspace ready.")
    print(f">> {PORTAL_URL}/{workspace_id}")


if __name__ == "__main__":
    main()
