"""Streaming file fingerprints."""

from __future__ import annotations

import hashlib
from pathlib import Path

DEFAULT_ALGORITHM = "sha1"
DEFAULT_CHUNK_SIZE = 64 * 1024


class FileHasher:
    """Compute a hex digest of a file's content in bounded chunks.

    The whole file is never held in memory: bytes are read into a reusable
    buffer and fed to the digest. Open/read failures raise ``OSError``.
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"unsupported digest algorithm: {algorithm!r}")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def fingerprint(self, path: Path | str) -> str:
        digest = hashlib.new(self.algorithm)
        buf = bytearray(self.chunk_size)
        view = memoryview(buf)
        with open(path, "rb", buffering=0) as f:
            while n := f.readinto(view):
                digest.update(view[:n])
        return digest.hexdigest()
