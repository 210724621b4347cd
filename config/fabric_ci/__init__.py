"""
Fabric CI - Reusable modules for Microsoft Fabric CI/CD automation.

This package contains common functionality for:
- Authentication (Azure CLI service principal login)
- Workspace provisioning per branch
- Git integration
- GitHub repository variables
- Variable library files
- Utility functions
"""

import os
from pathlib import Path

from .auth import auth, get_fabric_token
from .workspace import workspace_name_for_branch, get_workspace_id, create_workspace, get_or_create_workspace
from .git_integration import connect_workspace_to_git
from .github_variables import fetch_repository_variables
from .variable_library import filter_variables, escape_json_value, merge_variables, merge_stats
from .utils import run_command, load_config, get_missing_env, write_github_output


def bootstrap():
    """Load .env file for local development (skipped in GitHub Actions)."""
    if not os.getenv('GITHUB_ACTIONS'):
        from dotenv import load_dotenv
        # Walk up from fabric_ci package to find project root .env
        env_file = Path(__file__).parent.parent.parent / '.env'
        if env_file.exists():
            load_dotenv(env_file)


__all__ = [
    'bootstrap',
    'auth',
    'get_fabric_token',
    'workspace_name_for_branch',
    'get_workspace_id',
    'create_workspace',
    'get_or_create_workspace',
    'connect_workspace_to_git',
    'fetch_repository_variables',
    'filter_variables',
    'escape_json_value',
    'merge_variables',
    'merge_stats',
    'run_command',
    'load_config',
    'get_missing_env',
    'write_github_output'
]
