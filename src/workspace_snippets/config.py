"""Configuration management for update-workspace-snippets."""

import os
import json


CONFIG_DIR = os.path.expanduser("~/.workspace-snippets")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

DEFAULTS = {
    "url_prefix": "https://github.com/",
    "timeout": 60,
}

# Environment variables override the config file
ENV_VARS = {
    "url_prefix": "WORKSPACE_SNIPPETS_URL_PREFIX",
    "timeout": "WORKSPACE_SNIPPETS_TIMEOUT",
}


def get_config():
    """Get the current configuration.
    
    Built-in defaults are overlaid by the config file, if there is one, and
    then by environment variables.
    
    Returns:
        dict: Current configuration.
    
    Raises:
        ValueError: If the config file isn't a JSON object or a value can't be parsed.
    """
    config = dict(DEFAULTS)
    if os.path.exists(CONFIG_FILE):
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            stored = json.load(f)
        if not isinstance(stored, dict):
            raise ValueError(f"{CONFIG_FILE} must contain a JSON object")
        config.update({key: value for key, value in stored.items() if key in DEFAULTS})
    
    for key, var in ENV_VARS.items():
        if os.environ.get(var):
            config[key] = os.environ[var]
    
    try:
        config["timeout"] = float(config["timeout"])
    except (TypeError, ValueError):
        raise ValueError(f"invalid timeout: {config['timeout']!r}")
    return config


def get_url_prefix():
    """Get the URL prefix the GitHub remote must start with.
    
    Returns:
        str: URL prefix.
    """
    return get_config()["url_prefix"]


def get_timeout():
    """Get the archive download timeout.
    
    Returns:
        float: Timeout in seconds.
    """
    return get_config()["timeout"]
