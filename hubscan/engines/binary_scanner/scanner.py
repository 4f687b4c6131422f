"""DependencyGraphScanner — breadth-first walk of the assembly reference graph."""

from __future__ import annotations

import os
from collections import deque
from collections.abc import Iterable
from pathlib import Path

import structlog

from hubscan.engines.binary_scanner.blacklist import Blacklist
from hubscan.engines.binary_scanner.hashing import FileHasher
from hubscan.engines.binary_scanner.metadata import DnfileMetadataReader, ModuleMetadataReader
from hubscan.engines.binary_scanner.models import ResolvedModule, WorkItem
from hubscan.engines.binary_scanner.native import NativeDependencyResolver
from hubscan.engines.binary_scanner.report import InventoryReport
from hubscan.engines.binary_scanner.resolver import (
    AssemblyResolver,
    NotFoundTryDirectory,
    Resolution,
    Resolved,
)

log = structlog.get_logger("hubscan.engine")


def _canonical(path: Path) -> tuple[Path, str]:
    """Absolute path plus the key used for the visited set."""
    resolved = Path(path).resolve()
    return resolved, os.path.normcase(str(resolved))


def _display_label(path: Path, name: str, version: str | None) -> str:
    return f"{path.name} - {name}[{version or ''}]"


class DependencyGraphScanner:
    """Discover, fingerprint and record every binary reachable from a root module.

    Collaborators are injected; the blacklist is read-only for the whole scan.
    One scanner may run several scans, each with its own report and visited
    set.
    """

    def __init__(
        self,
        reader: ModuleMetadataReader,
        resolver: AssemblyResolver,
        native_resolver: NativeDependencyResolver,
        blacklist: Blacklist | None = None,
        hasher: FileHasher | None = None,
    ) -> None:
        self._reader = reader
        self._resolver = resolver
        self._native_resolver = native_resolver
        self._blacklist = blacklist if blacklist is not None else Blacklist.empty()
        self._hasher = hasher or FileHasher()

    def scan(self, root_artifact_path: Path | str) -> InventoryReport:
        """Scan *root_artifact_path* and return the populated report.

        Unresolvable references are recorded as problems. ``ArtifactLoadError``
        for the root and ``OSError`` while hashing abort the scan.
        """
        target = Path(root_artifact_path).resolve()
        log.info("scanner.start", target=str(target))

        root = self._reader.load(target)
        report = InventoryReport()
        report.set_project(root.name, root.version)
        report.add_directory(root.name, target)

        visited: set[str] = {_canonical(target)[1]}
        queue: deque[WorkItem] = deque(WorkItem(ref, target) for ref in root.references)
        self._record_natives(root, report, visited)

        while queue:
            item = queue.popleft()
            resolution = self._resolve(item, target.parent)
            if not isinstance(resolution, Resolved):
                reason = getattr(resolution, "reason", "not found")
                log.warning("scanner.unresolved", reference=item.ref.full_name, reason=reason)
                report.add_problem(
                    f"Could not load file or assembly '{item.ref.full_name}'. {reason}"
                )
                continue
            module = resolution.module

            path, key = _canonical(module.location)
            if key in visited:
                continue
            visited.add(key)

            fingerprint = self._hasher.fingerprint(path)
            size = path.stat().st_size
            info = module.version_info
            label = _display_label(path, info.product_name or module.name, info.product_version)

            if self._blacklist.is_suppressed(fingerprint, path.name, label):
                log.info("scanner.blacklisted", path=str(path), sha1=fingerprint)
            else:
                report.add_file(label, path, size, fingerprint)
                log.info("scanner.file_added", file=label, path=str(path))
                queue.extend(WorkItem(ref, path) for ref in module.references)

            self._record_natives(module, report, visited)

        log.info(
            "scanner.done",
            target=str(target),
            files=len(report.files),
            problems=len(report.problems),
        )
        return report

    def _resolve(self, item: WorkItem, app_base: Path) -> Resolution:
        """Probe path and app base first, then the declaring module's directory."""
        resolution = self._resolver.resolve(item.ref, app_base=app_base)
        if isinstance(resolution, NotFoundTryDirectory):
            resolution = self._resolver.resolve_in_directory(
                item.ref, item.parent_location.parent
            )
        return resolution

    def _record_natives(
        self,
        module: ResolvedModule,
        report: InventoryReport,
        visited: set[str],
    ) -> None:
        # Native libraries are leaves: recorded, never traversed.
        for native_path in sorted(self._native_resolver.find_native_paths(module)):
            path, key = _canonical(native_path)
            if key in visited:
                continue
            fingerprint = self._hasher.fingerprint(path)
            size = path.stat().st_size
            info = self._reader.read_version_info(path)
            label = _display_label(path, info.product_name or path.stem, info.product_version)
            visited.add(key)

            if self._blacklist.is_suppressed(fingerprint, path.name, label):
                log.info("scanner.blacklisted", path=str(path), sha1=fingerprint)
                continue
            report.add_file(label, path, size, fingerprint)
            log.info("scanner.native_added", file=label, path=str(path))


def scan(
    root_artifact_path: Path | str,
    *,
    blacklist: Blacklist | None = None,
    probe_dirs: Iterable[Path] = (),
    native_search_path: Iterable[Path] | None = None,
) -> InventoryReport:
    """Scan a .NET artifact with the dnfile-backed reader."""
    reader = DnfileMetadataReader()
    scanner = DependencyGraphScanner(
        reader,
        AssemblyResolver(reader, probe_dirs),
        NativeDependencyResolver(native_search_path),
        blacklist=blacklist,
    )
    return scanner.scan(root_artifact_path)
