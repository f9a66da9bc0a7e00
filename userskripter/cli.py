"""Command line entry point for userskripter."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from userskripter.build import UserscriptBuild
from userskripter.config import DEFAULT_CONFIG_PATH, load_config
from userskripter.core import PathTraversalError
from userskripter.engine import compiler_arguments, resolve_opt_ins
from userskripter.exceptions import ConfigurationError

_LOGGER = logging.getLogger("userskripter.cli")

_CONFIG_ENV = "USERSKRIPTER_CONFIG"
_BUILD_DIR_ENV = "USERSKRIPTER_BUILD_DIR"
_LOG_LEVEL_ENV = "USERSKRIPTER_LOG_LEVEL"


def _load_env_file(path: str | None = None) -> None:
    """Load environment overrides from a ``.env`` file when one exists."""

    load_dotenv(dotenv_path=path or os.path.join(os.getcwd(), ".env"))


def _configure_logging() -> None:
    log_level = os.getenv(_LOG_LEVEL_ENV, "INFO")
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Userscript metadata generator")
    parser.add_argument(
        "--config",
        default=os.getenv(_CONFIG_ENV, DEFAULT_CONFIG_PATH),
        help=f"Path to the JSON configuration (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--build-dir",
        dest="build_dir",
        default=os.getenv(_BUILD_DIR_ENV, "build"),
        help="Build output directory (default: build)",
    )
    parser.add_argument("--log-path", dest="log_path", help="Override the JSONL build-event log location")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("print", help="Print the userscript metadata block")
    subparsers.add_parser("meta", help="Write the *.meta.js file")

    user_parser = subparsers.add_parser("user", help="Write the *.user.js file")
    user_parser.add_argument("--payload", help="Compiled script to append after the header")

    constants_parser = subparsers.add_parser("constants", help="Write the Kotlin metadata constants file")
    constants_parser.add_argument("--stdout", action="store_true", help="Print the source instead of writing it")

    generate_parser = subparsers.add_parser("generate", help="Write every enabled artifact")
    generate_parser.add_argument("--payload", help="Compiled script to append after the header")

    subparsers.add_parser("opt-ins", help="Print compiler opt-in arguments for the granted APIs")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the userskripter CLI."""

    _load_env_file()
    _configure_logging()

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configuration = load_config(args.config, build_dir=args.build_dir)
        build = UserscriptBuild(configuration, log_path=args.log_path)

        if args.command == "print":
            sys.stdout.write(build.render_header())
            return 0

        if args.command == "meta":
            print(build.write_meta_file())
            return 0

        if args.command == "user":
            print(build.write_user_file(args.payload))
            return 0

        if args.command == "constants":
            if args.stdout:
                sys.stdout.write(build.render_constants())
            else:
                print(build.write_constants_file())
            return 0

        if args.command == "generate":
            for artifact, path in build.generate(args.payload).items():
                print(f"{artifact}: {path}")
            return 0

        if args.command == "opt-ins":
            grants = configuration.metadata.grant or []
            for argument in compiler_arguments(resolve_opt_ins(configuration.settings, grants)):
                print(argument)
            return 0
    except (ConfigurationError, PathTraversalError) as exc:
        _LOGGER.error("%s", exc)
        return 1
    except OSError as exc:
        _LOGGER.error("Failed to write userscript artifacts: %s", exc)
        return 1

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
