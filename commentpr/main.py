"""commentpr entry point.

Runs the HTTP server that turns blog comment form posts into pull
requests. Usage: commentpr [--config config.yaml] [--check].
"""

import argparse
import logging
import sys
from pathlib import Path

from commentpr.config import load_config
from commentpr.logging import CommentLogging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="commentpr",
        description="Receive blog comment form posts and publish them as GitHub pull requests",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, configure logging, serve."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("commentpr").warning("config.yaml not found, using config.example.yaml")

    config = load_config(config_path)

    if args.check:
        print("Config OK:", config.github.repository, config.github.branch or "(default branch)")
        return 0

    log = CommentLogging(config.logging).setup().getChild("main")
    log.info(
        "commentpr started | repo=%s | folder=%s | origin check=%s",
        config.github.repository,
        config.comments.folder,
        config.allowed_site is not None,
    )

    from commentpr.webhook.server import run_server

    try:
        run_server(config)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        log.exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
