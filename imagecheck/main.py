"""Entry point — wires Config → InferenceClient → terminal or Telegram front end."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from imagecheck.config import Config
from imagecheck.console import analyze_paths
from imagecheck.constants import MSG_STARTING, PROVIDERS
from imagecheck.errors import ConfigurationError
from imagecheck.inference.factory import build_client
from imagecheck.telegram.client import TelegramClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(console=Console(stderr=True), rich_tracebacks=True))


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="imagecheck",
        description="Ask a hosted vision model whether an image is AI-generated.",
    )
    parser.add_argument("images", nargs="*", type=Path, help="image files to analyze")
    parser.add_argument("--provider", choices=PROVIDERS, help="override INFERENCE_PROVIDER")
    parser.add_argument("--model", help="override INFERENCE_MODEL")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--plain", action="store_const", const="plain", dest="output",
                        help="print plain text instead of panels")
    output.add_argument("--json", action="store_const", const="json", dest="output",
                        help="print the validated result as JSON")
    parser.add_argument("--telegram", action="store_true", help="run the Telegram bot")
    args = parser.parse_args(argv)
    match (args.telegram, args.images):
        case (False, []):
            parser.error("give at least one image, or --telegram")
        case _:
            pass
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        config = Config.from_env().with_overrides(args.provider, args.model)
        if args.telegram:
            config.require_telegram()
        _setup_logging(config.log_level)
        client = build_client(config)
    except ConfigurationError as exc:
        Console(stderr=True).print(f"[red]Configuration error:[/red] {exc}")
        return 2

    logger = logging.getLogger(__name__)
    logger.info(MSG_STARTING)

    match args.telegram:
        case True:
            TelegramClient(config, client).run()
            return 0
        case False:
            return asyncio.run(_run_cli(client, args.images, args.output or "rich"))


async def _run_cli(client, paths: list[Path], output: str) -> int:
    async with client:
        return await analyze_paths(client, paths, Console(), output=output)


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
