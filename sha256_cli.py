"""Command-line front end for the streaming SHA-256 in `sha256.py`.

Usage:
    python sha256_cli.py "message"
    python sha256_cli.py -f path/to/file [more/files ...]
    python sha256_cli.py -f - < data.bin
    python sha256_cli.py -f big.iso --chunk-size 1048576 --yaml

Without `-f`, the single positional argument is interpreted as a UTF-8 string
and hashed. With `-f`, each path is read in chunks and streamed through
`Sha256.absorb`, so arbitrarily large files hash in constant memory. `-`
stands for standard input.

Output is one `<hex digest>  <name>` line per input, or with `--yaml` a YAML
document with the digest, length and block count of every input.
"""

from __future__ import annotations

import argparse
import sys
from typing import BinaryIO, Dict, List, Optional

import yaml

from sha256 import Sha256, to_hex


DEFAULT_CHUNK_SIZE = 64 * 1024


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer (got {value})")
    return number


def hash_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Sha256:
    """Absorb `stream` until EOF and return the finalized hash object."""
    h = Sha256()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        h.absorb(chunk)
    return h


def _record(name: str, h: Sha256, digest: bytes) -> Dict:
    return {
        "name": name,
        "length_bytes": h.bit_length // 8,
        "length_bits": h.bit_length,
        "blocks": h.blocks,
        "digest_hex": to_hex(digest),
    }


def _hash_file(path: str, chunk_size: int) -> Dict:
    if path == "-":
        h = hash_stream(sys.stdin.buffer, chunk_size)
    else:
        with open(path, "rb") as f:
            h = hash_stream(f, chunk_size)
    return _record(path, h, h.finalize())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute SHA-256 digests of a string or of files"
    )
    parser.add_argument(
        "message",
        nargs="?",
        help="String to hash (UTF-8 encoded)",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="files",
        nargs="+",
        metavar="PATH",
        help="Hash the raw bytes of each file ('-' for stdin)",
    )
    parser.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Read size in bytes when streaming files (default: {DEFAULT_CHUNK_SIZE})",
    )
    parser.add_argument(
        "--yaml",
        action="store_true",
        help="Emit a YAML report instead of '<digest>  <name>' lines",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.message is None) == (args.files is None):
        sys.stderr.write("Give either a message or -f PATH, not both or neither\n")
        parser.print_usage(sys.stderr)
        return 1

    records: List[Dict] = []
    status = 0

    if args.files is None:
        h = Sha256(args.message.encode("utf-8"))
        records.append(_record(args.message, h, h.finalize()))
    else:
        for path in args.files:
            try:
                records.append(_hash_file(path, args.chunk_size))
            except OSError as e:
                sys.stderr.write(f"Error reading file '{path}': {e}\n")
                status = 1

    if args.yaml:
        yaml.safe_dump(
            {"algorithm": Sha256.name, "inputs": records},
            sys.stdout,
            default_flow_style=False,
            sort_keys=False,
        )
    else:
        for record in records:
            print(f"{record['digest_hex']}  {record['name']}")

    return status


if __name__ == "__main__":
    raise SystemExit(main())
