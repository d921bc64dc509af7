"""Configuration management for chanlog.

Three-layer config resolution (highest priority wins):
  1. CLI flags — explicit on the command line
  2. Project config — .chanlog.json in the working directory or a parent
  3. Global config — ~/.chanlog/config.json
  4. Built-in defaults

Recognized keys:
  base_path      Base name of the channel files (default "Log")
  status         Status prefix for status channels (default none)
  viewer         Command that opens the error log at shutdown
  launch_viewer  Whether to open the error log at all (default true)
"""

import json
import os
from pathlib import Path

from chanlog.lib.log_lib import DEFAULT_LOG_BASENAME, default_viewer

PROJECT_CONFIG_NAME = ".chanlog.json"

CONFIG_KEYS = ["base_path", "status", "viewer", "launch_viewer"]

# Keys holding on/off switches; JSON may spell them as strings
BOOL_KEYS = {"launch_viewer"}

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def get_defaults():
    """Return the built-in defaults for every config key."""
    return {
        "base_path": DEFAULT_LOG_BASENAME,
        "status": None,
        "viewer": default_viewer(),
        "launch_viewer": True,
    }


def parse_bool(value):
    """Interpret a config value as a boolean.

    Accepts real booleans, 0/1, and the strings true/false, yes/no,
    on/off, 1/0 (case-insensitive). Returns None for anything else.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
def get_global_config_dir():
    """Return the global config directory (~/.chanlog/)."""
    return Path.home() / ".chanlog"


def get_global_config_path():
    """Return path to the global config file."""
    return get_global_config_dir() / "config.json"


def find_project_config(start_dir=None):
    """Walk up from start_dir looking for .chanlog.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------
def load_json(path):
    """Load a JSON object file, returning empty dict on error."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, IsADirectoryError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_global_config():
    """Load the global config file."""
    return load_json(get_global_config_path())


def load_project_config(start_dir=None):
    """Load the nearest .chanlog.json walking upward from start_dir."""
    path = find_project_config(start_dir)
    if path:
        return load_json(path), path
    return {}, None


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------
def resolve_config(args, keys=None, start_dir=None):
    """Resolve config values using three-layer precedence.

    For each key in `keys`, checks (in order):
      1. CLI args (from argparse namespace)
      2. Project .chanlog.json (or the file named by args.config)
      3. Global ~/.chanlog/config.json
      4. Built-in defaults

    Returns a dict with resolved values.
    """
    if keys is None:
        keys = CONFIG_KEYS

    explicit = getattr(args, "config", None)
    if explicit:
        project_cfg = load_json(explicit)
    else:
        project_cfg, _ = load_project_config(start_dir)
    global_cfg = load_global_config()
    defaults = get_defaults()

    resolved = {}
    for key in keys:
        # Normalize key: argparse uses underscores, JSON may use either
        arg_key = key.replace("-", "_")
        json_key = arg_key.replace("_", "-")

        # Layer 1: CLI
        cli_val = getattr(args, arg_key, None)
        if cli_val is not None:
            resolved[arg_key] = cli_val
            continue

        # Layers 2 and 3: project config, then global config
        for cfg in (project_cfg, global_cfg):
            val = cfg.get(arg_key, cfg.get(json_key))
            if val is not None and arg_key in BOOL_KEYS:
                # Unrecognized spellings count as unset
                val = parse_bool(val)
            if val is not None:
                resolved[arg_key] = val
                break
        else:
            # Layer 4: defaults
            resolved[arg_key] = defaults.get(arg_key)

    return resolved


# ---------------------------------------------------------------------------
# Config writing
# ---------------------------------------------------------------------------
def save_project_config(data, directory=None):
    """Write .chanlog.json to the given directory (default: cwd)."""
    target = Path(directory or os.getcwd()) / PROJECT_CONFIG_NAME
    with open(target, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return target


def save_global_config(data):
    """Write the global config file."""
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = get_global_config_path()
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return config_path
