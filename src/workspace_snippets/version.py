"""Version management for update-workspace-snippets."""

import re
from importlib import metadata
from pathlib import Path


def get_version() -> str:
    """
    Get the current version.
    
    First asks the installed distribution, then falls back to pyproject.toml
    parsing for source checkouts.
    
    Returns:
        str: Version string
    """
    try:
        return metadata.version("update-workspace-snippets")
    except metadata.PackageNotFoundError:
        pass
    
    # Running from a source checkout
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        content = pyproject_path.read_text(encoding='utf-8')
        match = re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
        if match:
            return match.group(1)
    
    return "unknown"


__version__ = get_version()
