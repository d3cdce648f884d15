import argparse
import asyncio
import sys
from typing import List, Optional

from docstruct.core.container import Container
from docstruct.core.exceptions import DocstructError
from docstruct.logging import logger, set_verbosity
from docstruct.structify.pipeline import StructifyPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docstruct",
        description="Restructure plain text into paragraphs and titled sections",
    )
    parser.add_argument(
        "--verbosity",
        type=int,
        default=1,
        choices=range(0, 4),
        help="The verbosity level (0-3)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    structify = subparsers.add_parser("structify-text", help="Split a text file into paragraphs and sections")
    structify.add_argument("--file", "-f", required=True, help="The text file to structify")
    structify.add_argument(
        "--no-sections",
        action="store_true",
        help="Stop after writing paragraphs",
    )
    return parser


async def run_structify_command(args: argparse.Namespace, container: Optional[Container] = None):
    container = container or Container()
    try:
        pipeline = StructifyPipeline(
            container.get_chat_provider(),
            with_sections=not args.no_sections,
        )
        await pipeline.run(args.file)
    finally:
        await container.shutdown()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbosity(args.verbosity)

    try:
        if args.command == "structify-text":
            asyncio.run(run_structify_command(args))
    except DocstructError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e.filename}")
        return 1
    except UnicodeDecodeError as e:
        logger.error(f"Input is not valid UTF-8: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
