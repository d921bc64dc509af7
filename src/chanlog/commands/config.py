"""chanlog config — show or change persistent settings.

Settings live in .chanlog.json in the current directory, or with
--global in ~/.chanlog/config.json:

    chanlog config                            # show resolved settings
    chanlog config set base_path logs/Run
    chanlog config set launch_viewer off --global
    chanlog config unset status
"""

import argparse
from pathlib import Path

from chanlog.config import (
    BOOL_KEYS, CONFIG_KEYS, PROJECT_CONFIG_NAME,
    get_global_config_path, load_json, parse_bool, resolve_config,
    save_global_config, save_project_config,
)
from chanlog.output import print_error, print_ok


def register(subparsers, parents):
    """Register the 'config' subcommand."""
    p = subparsers.add_parser(
        "config",
        parents=parents,
        help="Show or change persistent settings",
        description=(
            "Show the resolved settings, or set/unset one KEY in the\n"
            f"project config. Keys: {', '.join(CONFIG_KEYS)}."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("action", nargs="?", choices=["show", "set", "unset"],
                   default="show", help="What to do (default: show)")
    p.add_argument("key", nargs="?", metavar="KEY", help="Setting name")
    p.add_argument("value", nargs="?", metavar="VALUE", help="New value (set only)")
    p.add_argument("--global", dest="global_scope", action="store_true",
                   help="Edit ~/.chanlog/config.json instead of .chanlog.json")
    p.set_defaults(func=run)


def _show(args):
    settings = resolve_config(args)
    for key in CONFIG_KEYS:
        print(f"  {key}: {settings[key]}")
    return 0


def run(args):
    """Execute the config command."""
    if args.action == "show":
        return _show(args)

    key = (args.key or "").replace("-", "_")
    if key not in CONFIG_KEYS:
        print_error(f"Unknown config key '{args.key}' "
                    f"(expected one of: {', '.join(CONFIG_KEYS)})")
        return 2

    if args.global_scope:
        data = load_json(get_global_config_path())
    else:
        data = load_json(Path.cwd() / PROJECT_CONFIG_NAME)

    if args.action == "unset":
        data.pop(key, None)
        data.pop(key.replace("_", "-"), None)
    else:
        if args.value is None:
            print_error(f"No value given for '{key}'")
            return 2
        value = args.value
        if key in BOOL_KEYS:
            value = parse_bool(value)
            if value is None:
                print_error(f"'{args.value}' is not an on/off value for '{key}'")
                return 2
        data[key] = value

    path = save_global_config(data) if args.global_scope else save_project_config(data)
    verb = "removed from" if args.action == "unset" else "saved to"
    print_ok(f"{key} {verb} {path}")
    return 0
