from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from . import markdown_parser, renderer_json
from .config import ConvertOptions, load_options
from .errors import ConversionError
from .utils import configure_logging, read_markdown, resolve_output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portablemark",
        description="Convert Markdown into portable text JSON.",
    )
    parser.add_argument("input", type=str, help="Path to Markdown file")
    parser.add_argument("-o", "--output", type=str, help="Output JSON path, '-' for stdout")
    parser.add_argument("--config", type=str, help="YAML file with conversion options")
    parser.add_argument("--sequential-keys", action="store_true", help="Use deterministic mark keys")
    parser.add_argument("--asset-base-url", type=str, help="Base URL for relative image references")
    parser.add_argument("--with-metadata", action="store_true", help="Wrap blocks together with front matter")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def build_options(args: argparse.Namespace) -> ConvertOptions:
    options = load_options(args.config) if args.config else ConvertOptions()
    overrides = {}
    if args.sequential_keys:
        overrides["key_style"] = "sequential"
    if args.asset_base_url:
        overrides["asset_base_url"] = args.asset_base_url
    if args.with_metadata:
        overrides["include_metadata"] = True
    return dataclasses.replace(options, **overrides)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    output_path = resolve_output_path(input_path, args.output)
    options = build_options(args)

    logging.info("Reading %s", input_path)
    markdown_text = read_markdown(input_path)
    logging.debug("Markdown length: %d chars", len(markdown_text))

    logging.info("Converting markdown...")
    try:
        document = markdown_parser.parse_markdown(markdown_text, options)
    except ConversionError as exc:
        logging.error("Conversion failed: %s", exc)
        sys.exit(1)

    if output_path is None:
        sys.stdout.write(
            renderer_json.dumps(document, include_metadata=options.include_metadata, indent=options.indent) + "\n"
        )
        return

    logging.info("Writing %d blocks to %s", len(document.blocks), output_path)
    renderer_json.render_document(
        document,
        output_path,
        include_metadata=options.include_metadata,
        indent=options.indent,
    )

    logging.info("Done. Saved to %s", output_path)


if __name__ == "__main__":
    main()
