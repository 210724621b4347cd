"""Utility functions shared by the Fabric CI scripts."""

import os
import re
import shutil
import subprocess
import sys
from pathlib import Path

import yaml

REPOSITORY_ROOT = Path(__file__).parent.parent.parent
DEFAULT_CONFIG_FILE = 'config/templates/fabric-ci.yml'

# Only the braced ${VAR} form is substituted
ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def get_cli_path(name):
    """
    Resolve the full path of a command line tool.

    Args:
        name: Executable name (e.g., 'az', 'gh')

    Returns:
        str: Absolute path when found on PATH, otherwise the bare name
    """
    return shutil.which(name) or name


def get_az_cli_path():
    return get_cli_path('az')


def get_gh_cli_path():
    return get_cli_path('gh')


def run_command(cmd):
    """
    Run an external command and capture its output.

    A missing executable is reported as a failed command (returncode 127)
    instead of raising, so callers only need to check the return code.

    Args:
        cmd: Command as a list of arguments

    Returns:
        subprocess.CompletedProcess with text stdout/stderr
    """
    try:
        return subprocess.run(cmd, capture_output=True, text=True, encoding='utf-8')
    except FileNotFoundError as e:
        return subprocess.CompletedProcess(cmd, 127, stdout='', stderr=str(e))


def load_config(config_path):
    """
    Load a YAML configuration file.

    ${VAR} references are expanded from the environment before parsing.
    Unset variables and the bare $VAR form are left as-is.

    Args:
        config_path: Path to the YAML file

    Returns:
        dict: Parsed configuration (empty dict for an empty file)
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        content = expand_env_references(f.read())
    return yaml.safe_load(content) or {}


def expand_env_references(text):
    """Replace ${VAR} with its environment value; unset variables and bare $VAR stay as-is."""
    return ENV_REFERENCE.sub(lambda match: os.environ.get(match.group(1), match.group(0)), text)


def load_ci_config(config_file=None):
    """
    Load the Fabric CI settings file.

    The path comes from the argument, then CONFIG_FILE, then the default
    template. Relative paths resolve against the repository root. A missing
    file yields an empty config so built-in defaults apply.
    """
    config_file = config_file or os.getenv('CONFIG_FILE') or DEFAULT_CONFIG_FILE
    config_path = Path(config_file)
    if not config_path.is_absolute():
        config_path = REPOSITORY_ROOT / config_path

    if not config_path.exists():
        print(f"⚠ Config not found: {config_path} (using defaults)")
        return {}

    return load_config(str(config_path))


def get_missing_env(names):
    """Return the names from `names` that are unset or blank in the environment."""
    return [name for name in names if not os.getenv(name, '').strip()]


def write_github_output(name, value):
    """
    Append a `name=value` pair to the GitHub Actions step output file.

    Returns:
        bool: True if GITHUB_OUTPUT is set and the pair was written
    """
    output_file = os.getenv('GITHUB_OUTPUT')
    if not output_file:
        return False

    with open(output_file, 'a', encoding='utf-8') as f:
        f.write(f"{name}={value}\n")
    return True


def ensure_utf8_stdout():
    """Status lines use ✓/✗ markers; make sure stdout can encode them."""
    encoding = (getattr(sys.stdout, 'encoding', None) or '').lower()
    if encoding != 'utf-8' and hasattr(sys.stdout, 'reconfigure'):
        sys.stdout.reconfigure(encoding='utf-8')
