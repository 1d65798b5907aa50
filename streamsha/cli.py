from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .chain import DEFAULT_BLOCK_SIZE, ChainHasher, split_units
from .digest import DEFAULT_HASH, TEXT_ENCODINGS, HashDigest
from .errors import InvalidArgument
from .logging_config import setup_logging
from .source import read_source


def cmd_hash(args: argparse.Namespace) -> int:
    logger = setup_logging("streamsha", args.log_level)

    hasher = ChainHasher(block_size=args.block_size, digest=HashDigest(args.algorithm))
    data = read_source(args.path)
    result = hasher.compute(data)
    logger.info(
        "hashed %s: %d bytes -> %d annotated bytes", args.path, len(data), len(result.annotated)
    )

    print(result.encode_root(args.encoding))

    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(result.annotated)

    # One file per on-wire unit, in send order
    if args.units_dir:
        units_dir = Path(args.units_dir)
        units_dir.mkdir(parents=True, exist_ok=True)
        units = split_units(result.annotated, hasher.block_size, hasher.digest_size)
        for i, unit in enumerate(units):
            (units_dir / f"unit_{i:06d}.bin").write_bytes(unit)
        logger.info("wrote %d units to %s", len(units), units_dir)

    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="streamsha", description="Chained block hashing for streamed integrity")
    sub = p.add_subparsers(dest="cmd", required=True)

    h = sub.add_parser("hash", help="Hash a file and print its root digest")
    h.add_argument("path", help="File to hash")
    h.add_argument("--block-size", type=int, default=DEFAULT_BLOCK_SIZE, help="Data block size in bytes")
    h.add_argument("--algorithm", default=DEFAULT_HASH, help="hashlib algorithm with a fixed digest size")
    h.add_argument("--encoding", choices=TEXT_ENCODINGS, default="hex", help="Text encoding of the root digest")
    h.add_argument("--out", default=None, help="Write the annotated buffer to this file")
    h.add_argument("--units-dir", default=None, help="Write each on-wire unit to this directory")
    h.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING/ERROR (default: $LOG_LEVEL or WARNING)")

    h.set_defaults(func=cmd_hash)
    return p


def main(argv: Optional[List[str]] = None) -> None:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        rc = args.func(args)
    except InvalidArgument as e:
        p.error(str(e))
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
