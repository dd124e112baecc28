"""CLI entrypoint for the unogen utility compiler."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from unogen import __version__
from unogen.config import load_config, resolve_config
from unogen.constants.branding import CLI_DESCRIPTION
from unogen.constants.config import CONFIG_FILENAME, PRESET_NONE
from unogen.constants.io import CSS_TEMP_PREFIX, CSS_TEMP_SUFFIX, REPORT_TEMP_PREFIX, REPORT_TEMP_SUFFIX
from unogen.engine import GenerateResult, UnoGenerator, create_generator
from unogen.exceptions import ConfigError, UnoError
from unogen.io import read_text_file, write_json_atomic, write_text_atomic
from unogen.types import JsonObject

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="unogen",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate CSS for utility tokens")
    generate.add_argument("tokens", nargs="*", help="Utility tokens to compile")
    generate.add_argument(
        "-i",
        "--input",
        type=Path,
        action="append",
        default=[],
        help="Source file to extract tokens from (repeat flag for multiple files)",
    )
    generate.add_argument("-c", "--config", type=Path, help=f"Explicit config file (default: ./{CONFIG_FILENAME})")
    generate.add_argument("-o", "--output", type=Path, default=None, help="Write CSS here instead of stdout")
    generate.add_argument("--report", type=Path, default=None, help="Write a JSON report of matched tokens")
    generate.add_argument("--minify", action="store_true", help="Omit layer comments and newlines")
    generate.add_argument("--no-preflights", action="store_true", help="Skip preflight CSS")
    generate.add_argument("--no-safelist", action="store_true", help="Skip safelisted tokens")
    generate.add_argument("--scope", default=None, help="Selector used to scope every generated rule")
    generate.add_argument("--no-preset", action="store_true", help="Ignore the preset named in the config")
    generate.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    validate = subparsers.add_parser("validate-config", help="Validate a config file without generating")
    validate.add_argument("-c", "--config", type=Path, required=True, help="Config file to validate")
    validate.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")

    if args.command == "validate-config":
        return _handle_validate_config(args)

    if args.command != "generate":
        parser.error(f"Unsupported command: {args.command}")

    config_path = args.config
    if config_path is None and Path(CONFIG_FILENAME).exists():
        config_path = Path(CONFIG_FILENAME)

    try:
        user_config = load_config(config_path, preset=PRESET_NONE if args.no_preset else None)
        generator = create_generator(user_config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    try:
        sources = {str(path): read_text_file(path) for path in args.input}
    except OSError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 1

    try:
        tokens, result = asyncio.run(_generate(generator, args, sources))
    except UnoError as exc:
        print(f"Generation error: {exc}", file=sys.stderr)
        return 1

    if args.output is not None:
        write_text_atomic(
            path=args.output,
            content=f"{result.css}\n",
            temp_prefix=CSS_TEMP_PREFIX,
            temp_suffix=CSS_TEMP_SUFFIX,
        )
        logger.info("Wrote %d matched token(s) to %s", len(result.matched), args.output)
    else:
        print(result.css)

    if args.report is not None:
        write_json_atomic(
            path=args.report,
            payload=build_report(tokens, result),
            temp_prefix=REPORT_TEMP_PREFIX,
            temp_suffix=REPORT_TEMP_SUFFIX,
        )

    return 0


async def _generate(
    generator: UnoGenerator,
    args: argparse.Namespace,
    sources: dict[str, str],
) -> tuple[list[str], GenerateResult]:
    tokens = dict.fromkeys(args.tokens)
    for source_id, text in sources.items():
        tokens.update(dict.fromkeys(await generator.apply_extractors(text, source_id)))

    result = await generator.generate(
        list(tokens),
        preflights=not args.no_preflights,
        safelist=not args.no_safelist,
        minify=args.minify,
        scope=args.scope,
    )
    return list(tokens), result


def build_report(tokens: list[str], result: GenerateResult) -> JsonObject:
    """Summarize a generation run as JSON-serializable data."""
    unmatched = [token for token in tokens if token not in result.matched and token not in result.failures]
    return {
        "matched": sorted(result.matched),
        "unmatched": sorted(unmatched),
        "failed": {token: str(error) for token, error in sorted(result.failures.items())},
        "layers": list(result.layers),
    }


def _handle_validate_config(args: argparse.Namespace) -> int:
    """Load and resolve the config, reporting problems."""
    try:
        resolve_config(load_config(args.config))
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    print("Configuration is valid.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
