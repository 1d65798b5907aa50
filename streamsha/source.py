from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, Union
import logging
import os

from .chain import DEFAULT_BLOCK_SIZE, ChainHasher, ChainResult
from .digest import Digest

# The whole file has to be resident before hashing can start: the last block is hashed first.

logger = logging.getLogger(__name__)


def read_source(path: Union[str, os.PathLike]) -> bytes:
    return Path(path).read_bytes()


def hash_file(
    path: Union[str, os.PathLike],
    block_size: int = DEFAULT_BLOCK_SIZE,
    *,
    encoding: Optional[str] = None,
    digest: Optional[Digest] = None,
) -> Union[ChainResult, Tuple[str, bytes]]:
    """
    Read `path` in full and chain-hash it.

    Returns a ChainResult, or `(encoded_root, annotated)` when `encoding` is given.
    OSError from reading propagates unchanged; nothing is returned on failure.
    """
    hasher = ChainHasher(block_size=block_size, digest=digest)
    data = read_source(path)
    logger.debug("read %d bytes from %s", len(data), path)
    result = hasher.compute(data)
    if encoding is None:
        return result
    return result.encode_root(encoding), result.annotated
