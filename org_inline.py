from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterator

from config_loader import DEFAULT_CONFIG, InlineParserConfig, load_config
from emphasis import parse_emphasis_node
from helper import format_node_tree, print_event_gray
from org_ast import node_to_dict


def safe_input_path(raw: str, *, root: Path | None = None) -> Path:
    """
    Validate the file argument of the CLI and return it resolved.

    The file holds one inline text run per line. Empty names, NUL bytes and
    ".." segments are rejected with ValueError; with `root`, the resolved
    file has to live below it. Missing files and directories raise the
    matching OSError subclass.
    """
    if not raw or raw.strip() == "":
        raise ValueError("Empty input path.")

    if "\x00" in raw:
        raise ValueError("NUL byte in path is not allowed.")

    p = Path(raw).expanduser()

    if any(part == ".." for part in p.parts):
        raise ValueError("Path traversal ('..') is not allowed.")

    resolved = p.resolve(strict=False)

    if root is not None:
        root_resolved = root.resolve(strict=True)
        try:
            resolved.relative_to(root_resolved)
        except ValueError as e:
            raise ValueError(f"Input path must be within root: {root_resolved}") from e

    if not resolved.exists():
        raise FileNotFoundError(f"File not found: {resolved}")
    if not resolved.is_file():
        raise IsADirectoryError(f"Not a file: {resolved}")

    return resolved


def iter_text_runs(path: Path) -> Iterator[str]:
    """
    Yield every non-blank line of a file; each line is one inline text run.
    """
    with Path(path).open(encoding="utf-8") as f:
        for raw_line in f:
            line = raw_line.rstrip("\n")
            if line.strip():
                yield line


def render_run(
    text: str,
    cfg: InlineParserConfig,
    *,
    pad_spaces: bool = True,
    output_format: str = "tree",
) -> str:
    root = parse_emphasis_node(text, pad_spaces=pad_spaces, cfg=cfg)
    if output_format == "json":
        return json.dumps(node_to_dict(root), ensure_ascii=False)
    return "\n".join(format_node_tree(root))


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="org_inline.py",
        description="Parse inline Org markup (emphasis, links, timestamps, ...) into a node tree.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="File whose non-blank lines are parsed one by one",
    )
    parser.add_argument(
        "--text",
        default=None,
        help="Parse this text instead of reading a file",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML config (default: built-in matchers)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Optional root directory: input file must be within this directory.",
    )
    parser.add_argument(
        "--no-pad",
        action="store_true",
        help="Do not append padding spaces before parsing",
    )
    parser.add_argument(
        "--format",
        choices=("tree", "json"),
        default="tree",
        help="Output format (default: tree)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo each input run (gray) before its tree",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    cfg = DEFAULT_CONFIG
    if args.config:
        try:
            cfg = load_config(Path(args.config))
        except Exception as e:
            print(f"[org_inline] Failed to load config: {e}", file=sys.stderr)
            return 2

    if args.text is None and args.input is None:
        print("[org_inline] Nothing to parse: give an input file or --text", file=sys.stderr)
        return 2

    runs: Iterator[str]
    if args.text is not None:
        runs = iter([args.text])
    else:
        root_dir: Path | None = None
        if args.root:
            try:
                root_dir = Path(args.root).expanduser().resolve(strict=True)
            except Exception as e:
                print(f"[org_inline] Invalid --root: {e}", file=sys.stderr)
                return 2

        try:
            input_path = safe_input_path(args.input, root=root_dir)
        except Exception as e:
            print(f"[org_inline] Invalid input path: {e}", file=sys.stderr)
            return 2

        runs = iter_text_runs(input_path)

    try:
        for text in runs:
            if args.verbose:
                print_event_gray(text)
            print(render_run(text, cfg, pad_spaces=not args.no_pad, output_format=args.format))
    except Exception as e:
        print(f"[org_inline] Error while reading: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
