"""
Command Line Interface
=====================

Compose documents from transport payloads and transform carousel copy into
editor slides.

Usage:
    carousel-composer compose request.json -o slide.html
    carousel-composer transform carousel.json -o slides.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from carousel_composer.config.logging import get_logger
from carousel_composer.models.schemas import ComposeOptions
from carousel_composer.core.composition.compositer import CompositionError, get_compositer
from carousel_composer.core.highlights.transformer import CarouselTransformError, transform_carousel
from carousel_composer.core.transport.loader import TransportLoadError, load_request_file

logger = get_logger(__name__)


def _write(output: Optional[str], content: str) -> None:
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    else:
        sys.stdout.write(content)


def compose_command(args: argparse.Namespace) -> int:
    """Compose the document described by a payload file."""
    try:
        result = load_request_file(args.payload)
    except TransportLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if not result.success:
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    request = result.request
    options = ComposeOptions(
        base_url=args.base_url or request.base_url,
        composition_config=request.composition_config,
        slide_count=request.slide_count,
    )
    try:
        document = get_compositer().compose(
            request.enabled_module_ids, request.module_data_by_id, options
        )
    except CompositionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.variables:
        _write(args.output, json.dumps(document.variables, indent=2))
    else:
        _write(args.output, document.document)
    return 0


def transform_command(args: argparse.Namespace) -> int:
    """Transform a carousel copy file into editor slides."""
    path = Path(args.carousel)
    try:
        content = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            payload = yaml.safe_load(content)
        else:
            payload = json.loads(content)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return 1

    if not isinstance(payload, dict):
        print("Error: carousel file must contain an object", file=sys.stderr)
        return 1

    try:
        slides = transform_carousel(
            payload,
            highlight_color=args.highlight_color,
            highlight_color_secondary=args.highlight_color_secondary,
        )
    except CarouselTransformError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    data = [slide.model_dump(by_alias=True, exclude_none=True) for slide in slides]
    _write(args.output, json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carousel-composer", description="Compose carousel slide documents"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compose_parser = subparsers.add_parser("compose", help="Compose a document from a payload")
    compose_parser.add_argument("payload", help="JSON or YAML composition payload")
    compose_parser.add_argument("-o", "--output", help="Output file (stdout by default)")
    compose_parser.add_argument("--base-url", help="Base URL for relative asset paths")
    compose_parser.add_argument(
        "--variables", action="store_true", help="Write the CSS variable map instead of the document"
    )
    compose_parser.set_defaults(handler=compose_command)

    transform_parser = subparsers.add_parser("transform", help="Transform carousel copy into slides")
    transform_parser.add_argument("carousel", help="JSON or YAML carousel copy")
    transform_parser.add_argument("-o", "--output", help="Output file (stdout by default)")
    transform_parser.add_argument("--highlight-color", help="Primary highlight color")
    transform_parser.add_argument(
        "--highlight-color-secondary", help="Highlight color for dark layout variants"
    )
    transform_parser.set_defaults(handler=transform_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line interface."""
    args = build_parser().parse_args(argv)
    logger.debug("Running command", command=args.command)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
