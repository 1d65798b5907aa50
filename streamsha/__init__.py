"""Chained block hashing for streamed integrity.

A byte sequence is split into fixed-size blocks and hashed from the last block backward, so each
block can be verified as soon as it arrives once the root digest is trusted.
"""

from .chain import (
    DEFAULT_BLOCK_SIZE,
    BlockSpan,
    ChainHasher,
    ChainResult,
    annotated_size,
    block_count,
    compute,
    plan_blocks,
    split_units,
)
from .digest import DEFAULT_HASH, HASH_SIZE, HashDigest, encode_digest, sha256
from .errors import InvalidArgument
from .source import hash_file, read_source

__all__ = [
    "DEFAULT_BLOCK_SIZE",
    "DEFAULT_HASH",
    "HASH_SIZE",
    "BlockSpan",
    "ChainHasher",
    "ChainResult",
    "HashDigest",
    "InvalidArgument",
    "annotated_size",
    "block_count",
    "compute",
    "encode_digest",
    "hash_file",
    "plan_blocks",
    "read_source",
    "sha256",
    "split_units",
]
