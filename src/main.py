"""Main application entry point for reelsmith."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

from services.video_pipeline import VideoPipeline
from utils.config import load_config, setup_logging, validate_config

logger = logging.getLogger(__name__)

console = Console()


async def create_video(description: str, local_files: list[str], config: dict) -> int:
    """Run the pipeline once and report the outcome.

    Returns:
        Process exit code
    """
    for problem in validate_config(config):
        logger.warning(f"Configuration: {problem}")

    missing = [f for f in local_files if not Path(f).exists()]
    if missing:
        console.print(f"[red]Local file(s) not found:[/red] {', '.join(missing)}")
        return 2

    pipeline = VideoPipeline.from_config(config)
    result = await pipeline.create_video(description, local_files)

    if not result.success:
        console.print(f"[red]Video creation failed:[/red] {result.error}")
        return 1

    if result.video_path:
        console.print(f"[green]Video created:[/green] {result.video_path}")
    else:
        console.print("[yellow]Renderer finished but did not report an output path.[/yellow]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reelsmith",
        description="Turn a text description into a short video from stock footage.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create one video")
    create.add_argument("description", help="What the video should be about")
    create.add_argument(
        "-f",
        "--file",
        dest="files",
        action="append",
        default=[],
        help="Local image/video file to include (repeatable)",
    )

    serve = subparsers.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        from api.server import run

        run(host=args.host, port=args.port, log_level=args.log_level, json_logs=args.json_logs)
        return 0

    setup_logging(args.log_level)
    try:
        return asyncio.run(create_video(args.description, args.files, load_config()))
    except KeyboardInterrupt:
        console.print("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
