"""Command line tool to inspect BSA archives and extract their records."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .bsa import BsaError, BsaFile, DirectoryRecord, DirectoryType


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dfbsa", description="Inspect BSA archives and extract their records."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    dump = commands.add_parser("dump", help="describe the archive and its directory")
    dump.add_argument("archive", type=Path, help="BSA archive to read")

    listing = commands.add_parser("list", help="list every directory entry")
    listing.add_argument("archive", type=Path, help="BSA archive to read")

    extract = commands.add_parser("extract", help="write every record to its own file")
    extract.add_argument("archive", type=Path, help="BSA archive to read")
    extract.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("."),
        help="directory the records are written to (default: current directory)",
    )
    extract.add_argument(
        "-v", "--verbose", action="store_true", help="report each record as it is written"
    )
    return parser


def _identifier(record: DirectoryRecord, directory_type: DirectoryType) -> str:
    if directory_type is DirectoryType.FILENAME:
        return record.filename or ""
    return f"0x{(record.value or 0) & 0xFFFFFFFF:08X}"


def _report_progress(
    index: int, count: int, record: DirectoryRecord, directory_type: DirectoryType
) -> None:
    print(f"Extracting record {index + 1} of {count}: {_identifier(record, directory_type)}")


def _list(archive: BsaFile) -> None:
    for index, record in enumerate(archive.records):
        ident = _identifier(record, archive.directory_type)
        print(f"{index}\t{ident}\t{record.size}\t{record.offset}")


def _extract(archive: BsaFile, output: Path, verbose: bool) -> None:
    try:
        output.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise BsaError(f"Failed to create output directory '{output}'!") from exc
    callback = _report_progress if verbose else None
    paths = archive.extract_records(output, callback)
    print(f"Extracted {len(paths)} records to {output}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line tool and return its exit status."""
    args = _build_parser().parse_args(argv)
    archive = BsaFile(args.archive)
    try:
        with archive:
            if args.command == "dump":
                archive.dump(sys.stdout)
            elif args.command == "list":
                _list(archive)
            else:
                _extract(archive, args.output, args.verbose)
    except BsaError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())