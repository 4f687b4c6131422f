"""Assembly resolution — map an AssemblyRef to a loaded module on disk.

Resolution is two explicit steps. :meth:`AssemblyResolver.resolve` probes the
configured application directories and answers ``NotFoundTryDirectory`` on a
miss; the caller then runs :meth:`AssemblyResolver.resolve_in_directory`
against the declaring module's own directory.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from hubscan.engines.binary_scanner.metadata import ModuleMetadataReader
from hubscan.engines.binary_scanner.models import AssemblyRef, ResolvedModule
from hubscan.exceptions import ArtifactLoadError

ASSEMBLY_EXTENSIONS = (".dll", ".exe")


@dataclass(frozen=True)
class Resolved:
    module: ResolvedModule


@dataclass(frozen=True)
class NotFoundTryDirectory:
    """Not in the probe path; the parent's directory is worth a look."""


@dataclass(frozen=True)
class NotFound:
    reason: str


Resolution = Resolved | NotFoundTryDirectory | NotFound


class AssemblyResolver:
    """Probe-path assembly lookup by simple name.

    Versions are not enforced: the first ``<name>.dll`` / ``<name>.exe``
    found in probe order wins.
    """

    def __init__(self, reader: ModuleMetadataReader, probe_dirs: Iterable[Path] = ()) -> None:
        self._reader = reader
        self._probe_dirs: list[Path] = []
        for d in probe_dirs:
            self.add_probe_dir(d)

    @property
    def probe_dirs(self) -> list[Path]:
        return list(self._probe_dirs)

    def add_probe_dir(self, directory: Path) -> None:
        directory = Path(directory).resolve()
        if directory not in self._probe_dirs:
            self._probe_dirs.append(directory)

    def resolve(self, ref: AssemblyRef, app_base: Path | None = None) -> Resolution:
        """Search the probe dirs, then *app_base* (the scanned artifact's directory)."""
        directories = list(self._probe_dirs)
        if app_base is not None and Path(app_base).resolve() not in directories:
            directories.append(Path(app_base).resolve())
        for directory in directories:
            result = self._load_from(ref, directory)
            if result is not None:
                return result
        return NotFoundTryDirectory()

    def resolve_in_directory(self, ref: AssemblyRef, directory: Path) -> Resolution:
        result = self._load_from(ref, Path(directory))
        if result is not None:
            return result
        return NotFound("The system cannot find the file specified.")

    def _load_from(self, ref: AssemblyRef, directory: Path) -> Resolution | None:
        for ext in ASSEMBLY_EXTENSIONS:
            candidate = directory / f"{ref.name}{ext}"
            if not candidate.is_file():
                continue
            try:
                return Resolved(self._reader.load(candidate))
            except ArtifactLoadError as exc:
                return NotFound(exc.reason)
        return None
