
"""CLI entrypoint for brdgme-cli."""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from typing import Optional

from brdgme_cli.config import load_settings
from brdgme_cli.protocol.errors import UnknownGame
from brdgme_cli.protocol.models import encode_response
from brdgme_cli.registry import load_plugins
from brdgme_cli.runtime.dispatcher import error_response, serve, write_response


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="brdgme-cli")
    parser.add_argument("--config", help="Path to config.toml")
    parser.add_argument("--log-level", help="Logging level, written to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-games")
    run_parser = subparsers.add_parser("run")
    run_parser.add_argument("--game", help="Game engine id")
    run_parser.add_argument("--request", help="JSON request string, read from stdin if omitted")

    args = parser.parse_args(argv)

    settings = load_settings(
        game=getattr(args, "game", None),
        log_level=args.log_level,
        config_path=args.config,
    )
    logging.basicConfig(stream=sys.stderr, level=settings.log_level, format=LOG_FORMAT)

    plugins = load_plugins()

    if args.command == "list-games":
        print(json.dumps(sorted(plugins.keys()), indent=2))
        return 0

    plugin = plugins.get(settings.game)
    if plugin is None:
        write_response(encode_response(error_response(UnknownGame(settings.game))), sys.stdout)
        return 0

    stream_in = io.StringIO(args.request) if args.request is not None else sys.stdin
    serve(plugin, stream_in, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
