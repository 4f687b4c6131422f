"""Known-noise files, keyed by content fingerprint."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType


class Blacklist:
    """Read-only fingerprint -> canonical file name lookup.

    Built once before a scan and handed to the scanner; never mutated
    afterwards.
    """

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries = MappingProxyType(
            {k.lower(): v for k, v in (entries or {}).items()}
        )

    @classmethod
    def empty(cls) -> Blacklist:
        return cls()

    @classmethod
    def from_file(cls, path: Path | str) -> Blacklist:
        """Load a JSON object of ``{"<sha1 hex>": "<file name>"}``."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"blacklist {path} must be a JSON object")
        return cls({str(k): str(v) for k, v in data.items()})

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, fingerprint: str) -> str | None:
        return self._entries.get(fingerprint.lower())

    def is_suppressed(self, fingerprint: str, *names: str) -> bool:
        """True only when *fingerprint* is listed under one of *names*.

        A listed fingerprint whose canonical name differs from every given
        name is not a match.
        """
        listed = self.lookup(fingerprint)
        return listed is not None and listed in names
