"""Shared fixtures for hubscan tests — a fake metadata reader over real temp files."""

from __future__ import annotations

from pathlib import Path

import pytest

from hubscan.engines.binary_scanner.blacklist import Blacklist
from hubscan.engines.binary_scanner.models import (
    AssemblyRef,
    ForeignFunction,
    ResolvedModule,
    VersionInfo,
)
from hubscan.engines.binary_scanner.native import NativeDependencyResolver
from hubscan.engines.binary_scanner.resolver import AssemblyResolver
from hubscan.engines.binary_scanner.scanner import DependencyGraphScanner
from hubscan.exceptions import ArtifactLoadError


class FakeMetadataReader:
    """In-memory module graph; files are written to disk so they can be hashed."""

    def __init__(self) -> None:
        self.modules: dict[Path, ResolvedModule] = {}
        self.version_infos: dict[Path, VersionInfo] = {}
        self.loads: list[Path] = []

    def add_module(
        self,
        path: Path,
        name: str | None = None,
        references: tuple[str, ...] = (),
        natives: tuple[str, ...] = (),
        product_name: str | None = None,
        product_version: str | None = None,
        version: str = "1.0.0.0",
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(f"managed:{path.name}".encode())
        location = path.resolve()
        self.modules[location] = ResolvedModule(
            name=name or path.stem,
            version=version,
            location=location,
            version_info=VersionInfo(product_name, product_version),
            references=[AssemblyRef(r) for r in references],
            foreign_functions=[ForeignFunction(f"{lib}_entry", lib) for lib in natives],
        )
        return location

    def add_native(
        self,
        path: Path,
        product_name: str | None = None,
        product_version: str | None = None,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(f"native:{path.name}".encode())
        location = path.resolve()
        if product_name or product_version:
            self.version_infos[location] = VersionInfo(product_name, product_version)
        return location

    def load(self, path: Path) -> ResolvedModule:
        location = Path(path).resolve()
        self.loads.append(location)
        if location not in self.modules:
            raise ArtifactLoadError(str(location), "no CLR metadata")
        return self.modules[location]

    def read_version_info(self, path: Path) -> VersionInfo:
        return self.version_infos.get(Path(path).resolve(), VersionInfo())


@pytest.fixture
def reader() -> FakeMetadataReader:
    return FakeMetadataReader()


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    d = tmp_path / "app"
    d.mkdir()
    return d


@pytest.fixture
def make_scanner(reader: FakeMetadataReader):
    def _make(
        blacklist: Blacklist | None = None,
        probe_dirs: tuple[Path, ...] = (),
        hasher=None,
    ) -> DependencyGraphScanner:
        return DependencyGraphScanner(
            reader,
            AssemblyResolver(reader, probe_dirs),
            NativeDependencyResolver(search_path=[]),
            blacklist=blacklist,
            hasher=hasher,
        )

    return _make
