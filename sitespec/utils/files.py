"""Utility functions for file and directory management in sitespec."""

import json
from pathlib import Path

WORKSPACE_DIR = '.sitespec'
STORE_FILENAME = 'adapters.json'


def get_project_root() -> Path:
    """Find the project root by searching upwards from the Current Working Directory.

    Stops at the first directory containing a marker file.
    """
    current_path = Path.cwd()

    markers = {'.git', 'pyproject.toml', WORKSPACE_DIR, 'requirements.txt'}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in markers):
            return parent

    # No markers found (e.g. running in /tmp)
    return current_path


def get_workspace_path() -> Path:
    """Return the path to the .sitespec directory in the project root."""
    return get_project_root() / WORKSPACE_DIR


def get_store_path() -> Path:
    """Return the default path of the adapter store file."""
    return get_workspace_path() / STORE_FILENAME


def get_logs_path() -> Path:
    """Return the path to the logs directory in .sitespec."""
    return get_workspace_path() / 'logs'


def is_initialized() -> bool:
    """Check if the .sitespec directory exists and holds an adapter store."""
    workspace = get_workspace_path()
    return workspace.is_dir() and (workspace / STORE_FILENAME).exists()


def init_sitespec() -> Path:
    """Initialize the .sitespec directory and return the adapter store path.

    Creates the logs directory, an empty adapter store and a .gitignore that keeps
    the generated files out of source control.
    """
    workspace = get_workspace_path()
    logs_dir = workspace / 'logs'
    logs_dir.mkdir(parents=True, exist_ok=True)

    store_file = workspace / STORE_FILENAME
    if not store_file.exists():
        with open(store_file, 'w', encoding='utf-8') as f:
            json.dump({'adapters': []}, f, indent=2)

    gitignore = workspace / '.gitignore'
    if not gitignore.exists():
        gitignore.write_text('# Automatically created by sitespec\n*\n')

    return store_file
