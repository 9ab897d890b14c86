"""
Module: cli

Purpose:
    Command-line entry point.

        b18-render <game-name> <version> [author] [options]
        b18-render debug [options]

    `debug` serves the built site and blocks, for previewing pages in a
    browser; nothing is captured.

Key Functions:
    - main(): Parse arguments, configure logging, run

Dependencies:
    - argparse (std)
    - controller: render_game
    - render.server: ContentServer

Used By:
    - b18-render console script, python -m b18_render
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import RenderConfig
from .controller import RenderError, render_game
from .render import DEFAULT_NAVIGATION_TIMEOUT_MS, DEFAULT_PORT, ContentServer, ServerError

logger = logging.getLogger(__name__)

DEBUG_COMMAND = "debug"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="b18-render",
        description="Render Board18 print assets (map, market, tokens, tile sheets) for a game.",
    )
    parser.add_argument("bname", help=f"Game name, or '{DEBUG_COMMAND}' to only serve the site")
    parser.add_argument("version", nargs="?", help="Package version")
    parser.add_argument("author", nargs="?", default=None, help="Author recorded in the manifest")

    parser.add_argument("--games-dir", type=Path, default=Path("src/data/games"),
                        help="Directory of <game>.json files")
    parser.add_argument("--tiles", type=Path, default=Path("src/data/tiles.json"),
                        help="Tile catalog JSON")
    parser.add_argument("--site-dir", type=Path, default=Path("dist/site"),
                        help="Built site to serve")
    parser.add_argument("--output-dir", type=Path, default=Path("render"),
                        help="Render output root")
    parser.add_argument("--config", type=Path, default=Path("src/config.json"),
                        help="Layout config layered over the defaults")
    parser.add_argument("--variation", type=int, default=0,
                        help="Map variant for games with alternative maps")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Content server port")
    parser.add_argument("--timeout", type=int, default=DEFAULT_NAVIGATION_TIMEOUT_MS,
                        help="Per-page network idle deadline in milliseconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _serve(args: argparse.Namespace) -> int:
    server = ContentServer(args.site_dir, port=args.port)
    try:
        server.serve_forever()
    except ServerError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    if args.bname == DEBUG_COMMAND:
        return _serve(args)

    if not args.version:
        parser.error("version is required")

    try:
        config = RenderConfig(
            bname=args.bname,
            version=args.version,
            author=args.author,
            games_dir=args.games_dir,
            tiles_path=args.tiles,
            site_dir=args.site_dir,
            user_config=args.config,
            output_root=args.output_dir,
            port=args.port,
            timeout_ms=args.timeout,
            variation=args.variation,
        )
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        return 1

    try:
        result = render_game(config)
    except RenderError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Wrote {result.manifest_path} and {result.archive_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
