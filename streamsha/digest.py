from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Union
import base64
import hashlib

from .errors import InvalidArgument

# The chaining construction only needs a one-way function with a fixed, known output size.
# sha256 is the default; any hashlib algorithm with a fixed digest size can be substituted.

DEFAULT_HASH = "sha256"
HASH_SIZE = 32

# A digest primitive is any callable bytes -> bytes exposing `digest_size`.
Digest = Callable[[bytes], bytes]

TEXT_ENCODINGS = ("hex", "base64", "base64url", "latin1")


@dataclass
class HashDigest:
    algo: str = DEFAULT_HASH
    digest_size: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        try:
            h = hashlib.new(self.algo)
        except (ValueError, TypeError) as e:
            raise InvalidArgument(f"Unknown hash algorithm: {self.algo!r}") from e
        # shake_* report digest_size 0
        if h.digest_size <= 0:
            raise InvalidArgument(f"Hash algorithm {self.algo!r} has no fixed digest size")
        self.digest_size = h.digest_size

    def __call__(self, data: bytes) -> bytes:
        return hashlib.new(self.algo, data).digest()


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def digest_size_of(digest: Digest) -> int:
    size = getattr(digest, "digest_size", None)
    if size is None:
        # Plain callables without the attribute: probe once on the empty span.
        size = len(digest(b""))
    if not isinstance(size, int) or size <= 0:
        raise InvalidArgument(f"Digest primitive reports an invalid size: {size!r}")
    return size


def encode_digest(digest: bytes, encoding: Optional[str] = None) -> Union[bytes, str]:
    """
    Return `digest` unchanged (encoding None or "raw") or as text in one of TEXT_ENCODINGS.
    """
    if encoding is None or encoding == "raw":
        return digest
    if encoding == "hex":
        return digest.hex()
    if encoding == "base64":
        return base64.b64encode(digest).decode("ascii")
    if encoding == "base64url":
        return base64.urlsafe_b64encode(digest).decode("ascii")
    if encoding == "latin1":
        return digest.decode("latin-1")
    raise InvalidArgument(f"Unsupported digest encoding: {encoding!r}")
