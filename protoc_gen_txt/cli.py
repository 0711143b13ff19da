"""Command line entry point.

Run by protoc as ``protoc-gen-txt``: reads a CodeGeneratorRequest from
standard input and writes a CodeGeneratorResponse to standard output.
For template development a saved request can be rendered straight into a
directory instead.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Any, BinaryIO, Callable

from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError
from rich.tree import Tree

from .codegen.descriptors import FlatIndex, build_index
from .codegen.generator import build_response, error_response, generate
from .errors import InputError
from .logging_config import configure_logging, get_console, get_logger

logger = get_logger(__name__)

WRITE_BASE_DELAY = 0.05
WRITE_MAX_DELAY = 0.5


def read_request(source: str | Path | None = None) -> plugin_pb2.CodeGeneratorRequest:
    """Read and decode a request from ``source`` or standard input.

    Args:
        source: Path to a serialized request; standard input when None.

    Returns:
        The decoded request.

    Raises:
        InputError: If nothing was read or the bytes do not decode.
    """
    origin = str(source) if source else "standard input"
    try:
        if source:
            data = Path(source).read_bytes()
        else:
            data = sys.stdin.buffer.read()
    except OSError as e:
        raise InputError(f"error reading from {origin}: {e}") from e

    if not data:
        raise InputError("no input provided")

    try:
        return plugin_pb2.CodeGeneratorRequest.FromString(data)
    except DecodeError as e:
        raise InputError(f"error unmarshalling from {origin}: {e}") from e


def write_response(
    stream: BinaryIO,
    data: bytes,
    base_delay: float = WRITE_BASE_DELAY,
    max_delay: float = WRITE_MAX_DELAY,
    sleep: Callable[[float], Any] = time.sleep,
) -> None:
    """Write all of ``data``, retrying failed or partial writes with backoff.

    Args:
        stream: Binary output stream.
        data: Serialized response.
        base_delay: First retry delay in seconds.
        max_delay: Upper bound for the retry delay.
        sleep: Sleep function (replaceable for tests).
    """
    remaining = memoryview(data)
    delay = base_delay

    while remaining:
        try:
            written = stream.write(remaining)
            failed = not written
        except OSError as e:
            written = getattr(e, "characters_written", 0)
            failed = True
            logger.warning("Error writing output to standard out: %s", e)

        remaining = remaining[written or 0 :]
        if failed:
            sleep(delay)
            delay = min(delay * 2, max_delay)

    while True:
        try:
            stream.flush()
            return
        except OSError as e:
            logger.warning("Error flushing standard out: %s", e)
            sleep(delay)
            delay = min(delay * 2, max_delay)


def build_index_tree(index: FlatIndex, label: str = "Types") -> Tree:
    """Render a flat index as a rich tree, one branch per node kind."""
    tree = Tree(f"[bold]{label}[/bold]")

    files = tree.add(f"📄 files ({len(index.files)})")
    for name in index.files:
        files.add(name)

    for kind, entries in (
        ("messages", index.messages),
        ("enums", index.enums),
        ("extensions", index.extensions),
        ("services", index.services),
    ):
        branch = tree.add(f"{kind} ({len(entries)})")
        for name in entries:
            branch.add(f"[cyan]{name}[/cyan]")

    return tree


def write_output_dir(files: dict[str, str], output_dir: Path) -> None:
    """Write generated files below ``output_dir``."""
    console = get_console()
    for name, content in files.items():
        target = output_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        console.print(f"✅ [green]Wrote {target}[/green]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protoc-gen-txt",
        description="protoc plugin rendering Jinja2 templates against proto descriptors",
    )
    parser.add_argument(
        "--request",
        type=Path,
        help="read a serialized CodeGeneratorRequest from this file instead of stdin",
    )
    parser.add_argument(
        "--parameter",
        help="override the parameter string carried by the request",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="write generated files into this directory instead of replying on stdout",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="print the visible type index to stderr",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: $PROTOC_GEN_TXT_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the plugin.

    Returns:
        Exit code. Failures are reported inside the response, so plugin mode
        exits 0; directory mode exits 1 when generation fails.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    console = get_console()

    try:
        request = read_request(args.request)
    except InputError as e:
        response = error_response(str(e))
    else:
        if args.parameter is not None:
            request.parameter = args.parameter

        if args.tree:
            console.print(build_index_tree(build_index(request), "Visible types"))

        result = generate(request)
        for warning in result.warnings:
            logger.warning(warning)

        if args.output_dir:
            if not result.success:
                console.print(f"❌ [red]{result.error_message}[/red]")
                return 1
            write_output_dir(result.files, args.output_dir)
            return 0

        response = build_response(result)

    if response.error:
        logger.error("Error in response: %s", response.error)

    write_response(sys.stdout.buffer, response.SerializeToString())
    return 0


if __name__ == "__main__":
    sys.exit(main())
