"""Runtime settings, read from ``HUBSCAN_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _split_paths(raw: str | None) -> list[Path]:
    if not raw:
        return []
    return [Path(p) for p in raw.split(os.pathsep) if p.strip()]


@dataclass
class HubSettings:
    """Where to send the scan and how to filter it.

    ``url`` being unset means the document is written locally instead of
    uploaded.
    """

    url: str | None = None
    username: str = ""
    password: str = ""
    blacklist_path: Path | None = None
    probe_dirs: list[Path] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> HubSettings:
        blacklist = os.getenv("HUBSCAN_BLACKLIST")
        return cls(
            url=os.getenv("HUBSCAN_URL") or None,
            username=os.getenv("HUBSCAN_USERNAME", ""),
            password=os.getenv("HUBSCAN_PASSWORD", ""),
            blacklist_path=Path(blacklist) if blacklist else None,
            probe_dirs=_split_paths(os.getenv("HUBSCAN_PROBE_PATH")),
        )

    @property
    def upload_enabled(self) -> bool:
        return bool(self.url)
