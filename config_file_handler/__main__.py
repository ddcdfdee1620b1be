# __main__.py (command line access to a config file)
import argparse
import json
import logging
import sys

from .errors import ConfigFileError
from .handler import cleanup_all, find_existing, find_or_create
from .paths import resolve_search_paths
from .utils import safe_load_json


def build_parser():
    parser = argparse.ArgumentParser(
        prog="config-file-handler",
        description="Locate, create and inspect an application's JSON config file.",
    )
    parser.add_argument("--extra", action="append", default=[], metavar="DIR",
                        help="extra directory to search (repeatable, checked last)")
    parser.add_argument("--system-cache", action="store_true",
                        help="also search the system-wide cache directory")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in [
        ("paths", "print the directories searched, in priority order"),
        ("locate", "find the config file, creating an empty one if missing"),
        ("show", "print the config file's JSON payload (fails if there is none)"),
        ("cleanup", "delete the config file from every searched directory"),
    ]:
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("name", help="config file name, e.g. myapp.config")
    return parser


def run(args):
    search_paths = resolve_search_paths(args.extra, include_system_cache=args.system_cache)

    if args.command == "paths":
        for path in search_paths:
            print(path / args.name)
    elif args.command == "locate":
        path, created = find_or_create(args.name, {}, search_paths)
        print(path)
        print(f"created: {'yes' if created else 'no'}")
    elif args.command == "show":
        path = find_existing(args.name, search_paths)
        print(json.dumps(safe_load_json(path), indent=4))
    elif args.command == "cleanup":
        removed = cleanup_all(args.name, search_paths)
        for path in removed:
            print(f"removed {path}")
        if not removed:
            print("nothing to remove")


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        run(args)
    except ConfigFileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
