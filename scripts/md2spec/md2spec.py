"""md2spec - Markdown agent spec → YAML/JSON converter.

Usage:
    md2spec <spec.md> [-f yaml|json] [-o output]
    md2spec <dir> [-f yaml|json]

In directory mode every ``spec.md`` inside an ``ai-agent-*`` directory
(searched recursively) is converted. Without ``-o`` each output goes to a
``dist`` directory beside its ``ai-agent-*`` directory, so
``team/ai-agent-rust/spec.md`` becomes ``team/dist/rust.<format>``.
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from . import __version__
from .converter import to_json, to_yaml
from .errors import ConversionError
from .log import configure_logging, logger
from .parser import parse_spec

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .schema import Spec

__all__ = [
    "DIST_DIR_NAME",
    "FORMATS",
    "SPEC_DIR_PREFIX",
    "SPEC_FILENAME",
    "convert",
    "convert_batch",
    "default_output_path",
    "find_specs",
    "main",
]

SPEC_FILENAME = "spec.md"
SPEC_DIR_PREFIX = "ai-agent-"
DIST_DIR_NAME = "dist"

_SERIALIZERS: dict[str, Callable[[Spec], str]] = {
    "yaml": to_yaml,
    "json": to_json,
}
FORMATS = tuple(_SERIALIZERS)


def find_specs(input_dir: Path) -> list[Path]:
    """All ``spec.md`` files whose directory is named ``ai-agent-*``, sorted."""
    return sorted(
        path for path in input_dir.rglob(SPEC_FILENAME) if path.is_file() and path.parent.name.startswith(SPEC_DIR_PREFIX)
    )


def default_output_path(path: Path, spec: Spec, fmt: str) -> Path:
    """Output location when none is given: ``<spec dir>/../dist/<agent>.<fmt>``.

    The agent name comes from the ``ai-agent-`` directory when there is one,
    otherwise from the parsed spec name (lowercased, spaces to dashes).
    """
    parent = path.parent.name
    if parent.startswith(SPEC_DIR_PREFIX):
        agent = parent[len(SPEC_DIR_PREFIX):]
    else:
        agent = re.sub(r"\s+", "-", (spec.name or "spec").lower())
    return path.parent.parent / DIST_DIR_NAME / f"{agent}.{fmt}"


def convert(
    path: Path,
    *,
    output: Path | None = None,
    fmt: str = "yaml",
) -> dict:
    """Convert a single Markdown spec to YAML or JSON on disk.

    Args:
        path: Input Markdown file.
        output: Output file path. Defaults to ``default_output_path``.
        fmt: ``"yaml"`` or ``"json"``.

    Returns:
        Dict with input, output, the parsed spec and the serialized text.

    Raises:
        ValueError: If ``fmt`` is not a supported format.
        ConversionError: If the input cannot be read or the output written.
    """
    if fmt not in _SERIALIZERS:
        raise ValueError(f'Invalid format "{fmt}". Use "yaml" or "json".')

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConversionError(path, str(e)) from e

    spec = parse_spec(content)
    text = _SERIALIZERS[fmt](spec)
    destination = output or default_output_path(path, spec, fmt)

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ConversionError(path, str(e)) from e

    return {
        "input": str(path),
        "output": str(destination),
        "spec": spec,
        "text": text,
    }


def convert_batch(input_dir: Path, *, fmt: str = "yaml", show: bool = False) -> dict:
    """Convert every agent spec found under a directory.

    Each file is converted independently; a failure is logged and recorded
    without stopping the rest of the batch.

    Args:
        input_dir: Directory containing ``ai-agent-*`` subdirectories.
        fmt: ``"yaml"`` or ``"json"``.
        show: Also print each serialized document to stdout.

    Returns:
        Counts and per-file results.

    Raises:
        ValueError: If no spec files are found.
    """
    files = find_specs(input_dir)
    if not files:
        raise ValueError(f"No {SPEC_FILENAME} files found in {SPEC_DIR_PREFIX}* directories under {input_dir}")

    results: list[dict] = []

    for i, path in enumerate(files, 1):
        logger.info("[%d/%d] %s", i, len(files), path.parent.name)
        try:
            res = convert(path, fmt=fmt)
        except ConversionError as e:
            logger.error(str(e))
            results.append({"file": str(path), "status": "error", "error": e.message})
            continue
        _report(res, show)
        results.append({"file": str(path), "status": "success", "output": res["output"]})

    return {
        "processed": len(results),
        "successful": sum(1 for r in results if r["status"] == "success"),
        "failed": sum(1 for r in results if r["status"] == "error"),
        "files": results,
    }


def _report(result: dict, show: bool) -> None:
    if show:
        print(result["text"])
    print(f"Converted: {result['input']} -> {result['output']}")


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    p = argparse.ArgumentParser(
        prog="md2spec",
        description="Convert AI agent specs from Markdown to YAML/JSON",
    )
    p.add_argument("input", type=Path, help="Input file or directory containing spec.md files")
    p.add_argument("-f", "--format", default="yaml", help="Output format: yaml or json (default: yaml)")
    p.add_argument("-o", "--output", type=Path, help="Output file path (default: dist/{agent-name}.{format})")
    p.add_argument("--show", action="store_true", help="Also print the converted document to stdout")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = _build_parser().parse_args(argv)
    configure_logging(args.verbose)

    fmt = args.format.lower()
    if fmt not in FORMATS:
        logger.error('Invalid format "%s". Use "yaml" or "json".', args.format)
        return 1

    input_path = args.input.resolve()
    if not input_path.exists():
        logger.error("Input path does not exist: %s", input_path)
        return 1

    if input_path.is_file():
        output = args.output.resolve() if args.output else None
        try:
            result = convert(input_path, output=output, fmt=fmt)
        except ConversionError as e:
            logger.error(str(e))
            return 1
        _report(result, args.show)
        return 0

    if input_path.is_dir():
        if args.output:
            logger.warning("--output is ignored when converting a directory")
        try:
            summary = convert_batch(input_path, fmt=fmt, show=args.show)
        except ValueError as e:
            logger.error(str(e))
            return 1
        return 1 if summary["failed"] else 0

    logger.error("Input must be a file or directory: %s", input_path)
    return 1


if __name__ == "__main__":
    sys.exit(main())
