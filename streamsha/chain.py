from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Union
import logging
import numbers

import numpy as np

from .digest import DEFAULT_HASH, HASH_SIZE, Digest, HashDigest, digest_size_of, encode_digest
from .errors import InvalidArgument

# Chained block hashing for incremental verification.
#
#   H(N-1) = hash(block[N-1])
#   H(i)   = hash(block[i] || H(i+1))      i = N-2 .. 0
#
# The annotated buffer carries block[i] || H(i+1) for every block but the last,
# which is emitted alone. H(0) is the root and is sent out of band.

DEFAULT_BLOCK_SIZE = 1024

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockSpan:
    index: int
    offset: int  # into the input
    length: int
    out_offset: int  # into the annotated buffer
    trailer: bool  # True when H(index + 1) follows the block


class ChainResult(NamedTuple):
    root: bytes
    annotated: bytes

    def encode_root(self, encoding: Optional[str] = None) -> Union[bytes, str]:
        return encode_digest(self.root, encoding)


def _check_block_size(block_size: int) -> int:
    if isinstance(block_size, bool) or not isinstance(block_size, numbers.Integral):
        raise InvalidArgument(f"block_size must be an int, got {type(block_size).__name__}")
    if block_size <= 0:
        raise InvalidArgument(f"block_size must be positive, got {block_size}")
    return int(block_size)


def _as_uint8(data: bytes) -> np.ndarray:
    view = memoryview(data)
    if not view.c_contiguous:
        # Strided views cannot be reinterpreted in place; copy them out in logical order.
        view = memoryview(view.tobytes())
    return np.frombuffer(view.cast("B"), dtype=np.uint8)


def block_count(length: int, block_size: int) -> int:
    block_size = _check_block_size(block_size)
    return -(-length // block_size)


def annotated_size(length: int, block_size: int, digest_size: int = HASH_SIZE) -> int:
    n = block_count(length, block_size)
    if n == 0:
        return 0
    return length + digest_size * (n - 1)


def plan_blocks(length: int, block_size: int, digest_size: int = HASH_SIZE) -> List[BlockSpan]:
    """
    Compute block boundaries and their positions in the annotated buffer.

    All blocks but the last are exactly `block_size` long; the last holds the remainder
    (or a full block when `length` is an exact multiple). Each non-terminal block is
    followed by `digest_size` bytes in the output, so block i starts at i * (block_size + digest_size).
    """
    n = block_count(length, block_size)
    unit = block_size + digest_size
    spans: List[BlockSpan] = []
    for i in range(n):
        offset = i * block_size
        last = i == n - 1
        spans.append(
            BlockSpan(
                index=i,
                offset=offset,
                length=(length - offset) if last else block_size,
                out_offset=i * unit,
                trailer=not last,
            )
        )
    return spans


@dataclass
class ChainHasher:
    block_size: int = DEFAULT_BLOCK_SIZE
    algorithm: str = DEFAULT_HASH
    digest: Optional[Digest] = None
    digest_size: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.block_size = _check_block_size(self.block_size)
        if self.digest is None:
            self.digest = HashDigest(self.algorithm)
        self.digest_size = digest_size_of(self.digest)

    def _hash(self, span: bytes) -> bytes:
        h = self.digest(span)
        if len(h) != self.digest_size:
            raise InvalidArgument(f"Digest size changed: expected {self.digest_size}, got {len(h)}")
        return h

    def compute(self, data: bytes) -> ChainResult:
        src = _as_uint8(data)
        length = int(src.shape[0])
        n = block_count(length, self.block_size)

        if n == 0:
            logger.debug("empty input, root is the digest of the empty span")
            return ChainResult(self._hash(b""), b"")

        if n == 1:
            # No predecessor to carry the hash; the buffer is the data itself.
            raw = src.tobytes()
            return ChainResult(self._hash(raw), raw)

        spans = plan_blocks(length, self.block_size, self.digest_size)
        out = np.empty(annotated_size(length, self.block_size, self.digest_size), dtype=np.uint8)
        logger.debug(
            "chaining %d bytes as %d blocks of %d (+%d digest bytes) into %d bytes",
            length,
            n,
            self.block_size,
            self.digest_size,
            out.shape[0],
        )

        # Terminal block: variable length, no trailer.
        last = spans[-1]
        out[last.out_offset : last.out_offset + last.length] = src[last.offset : last.offset + last.length]
        link = self._hash(src[last.offset :].tobytes())

        for span in reversed(spans[:-1]):
            unit = out[span.out_offset : span.out_offset + span.length + self.digest_size]
            unit[: span.length] = src[span.offset : span.offset + span.length]
            unit[span.length :] = np.frombuffer(link, dtype=np.uint8)
            link = self._hash(unit.tobytes())

        return ChainResult(link, out.tobytes())


def compute(data: bytes, block_size: int = DEFAULT_BLOCK_SIZE, digest: Optional[Digest] = None) -> ChainResult:
    return ChainHasher(block_size=block_size, digest=digest).compute(data)


def split_units(annotated: bytes, block_size: int, digest_size: int = HASH_SIZE) -> List[bytes]:
    """
    Cut an annotated buffer into its on-wire units: block[i] || H(i+1) for every block
    but the last, then block[N-1] alone. Only slices; nothing is verified.
    """
    block_size = _check_block_size(block_size)
    buf = _as_uint8(annotated)
    total = int(buf.shape[0])
    if total == 0:
        return []

    unit = block_size + digest_size
    full = (total - 1) // unit
    tail = total - full * unit
    if tail > block_size:
        raise InvalidArgument(f"{total} bytes is not a valid annotated length for block_size={block_size}")

    units = [buf[i * unit : (i + 1) * unit].tobytes() for i in range(full)]
    units.append(buf[full * unit :].tobytes())
    return units
