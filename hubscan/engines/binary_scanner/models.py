"""Data models for the binary scanner engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class AssemblyRef:
    """A referenced assembly as declared by its parent (not yet located)."""

    name: str
    version: str = "0.0.0.0"
    culture: str | None = None
    public_key_token: str | None = None  # hex, lowercase

    @property
    def full_name(self) -> str:
        culture = self.culture or "neutral"
        token = self.public_key_token or "null"
        return f"{self.name}, Version={self.version}, Culture={culture}, PublicKeyToken={token}"


@dataclass(frozen=True)
class ForeignFunction:
    """A P/Invoke declaration: entry point plus the native library it lives in."""

    entry_point: str
    library_name: str


@dataclass(frozen=True)
class VersionInfo:
    """Product name/version from a PE file's StringFileInfo resource."""

    product_name: str | None = None
    product_version: str | None = None


@dataclass
class ResolvedModule:
    """A loaded managed module with a concrete location on disk."""

    name: str
    version: str
    location: Path
    version_info: VersionInfo = field(default_factory=VersionInfo)
    references: list[AssemblyRef] = field(default_factory=list)
    foreign_functions: list[ForeignFunction] = field(default_factory=list)


@dataclass(frozen=True)
class WorkItem:
    """One traversal edge: a reference and the location of the module declaring it."""

    ref: AssemblyRef
    parent_location: Path
