# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for exifwalk

Dumps the metadata of a raw EXIF payload file (the TIFF structure, with
or without a leading "Exif\\x00\\x00" identifier).

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exifwalk.exceptions import ExifError
from exifwalk.exif_parser import ExifParser

EXIF_IDENTIFIER = b'Exif\x00\x00'


def format_output(metadata: dict, format_type: str = "text") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Dictionary of metadata
        format_type: Output format ('text' or 'json')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False)
    lines = []
    for tag, value in sorted(metadata.items()):
        lines.append(f"{tag}: {value}")
    return "\n".join(lines)


def read_payload(file_path: Path) -> bytes:
    """Read an EXIF payload file, dropping a leading Exif identifier."""
    data = file_path.read_bytes()
    if data.startswith(EXIF_IDENTIFIER):
        data = data[len(EXIF_IDENTIFIER):]
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exifwalk",
        description="Decode the TIFF directories of a raw EXIF payload.",
    )
    parser.add_argument('file', type=Path, help='File holding the EXIF payload')
    parser.add_argument('-t', '--thumbnail', action='store_true',
                        help='Also decode the chained thumbnail directory (IFD1)')
    parser.add_argument('-f', '--format', choices=('text', 'json'), default='text',
                        help='Output format (default: text)')
    parser.add_argument('-s', '--sep', default=None,
                        help='Separator for multi-value tags (default: ", ")')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug diagnostics to stderr')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        data = read_payload(args.file)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser = ExifParser(data, sep=args.sep)
    metadata: dict = {}
    try:
        if args.thumbnail:
            thumb_metadata: dict = {}
            parser.parse_with_thumbnail(metadata, thumb_metadata)
            output = {"IFD0": metadata, "IFD1": thumb_metadata}
        else:
            parser.parse(metadata)
            output = metadata
    except ExifError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.thumbnail and args.format == "text":
        sections = []
        for title, section in output.items():
            sections.append(f"[{title}]\n{format_output(section)}")
        print("\n\n".join(sections))
    else:
        print(format_output(output, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
