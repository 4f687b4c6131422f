"""Native (P/Invoke) dependency discovery."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from pathlib import Path

from hubscan.engines.binary_scanner.models import ResolvedModule

_NATIVE_EXTENSIONS = (".dll", ".so", ".dylib", ".exe")

_POSIX_LIBRARY_DIRS = ("/lib", "/usr/lib", "/usr/local/lib", "/lib64", "/usr/lib64")


def default_search_path() -> list[Path]:
    """System search order used after the module's own directory."""
    dirs: list[Path] = []
    if sys.platform == "win32":
        system_root = Path(os.environ.get("SystemRoot", r"C:\Windows"))
        dirs += [system_root / "System32", system_root / "SysWOW64", system_root]
    else:
        dirs += [Path(p) for p in os.environ.get("LD_LIBRARY_PATH", "").split(os.pathsep) if p]
        dirs += [Path(p) for p in _POSIX_LIBRARY_DIRS]
    dirs += [Path(p) for p in os.environ.get("PATH", "").split(os.pathsep) if p]
    return dirs


def candidate_names(library_name: str) -> list[str]:
    """File names a ``DllImport`` library name may refer to, most specific first."""
    name = library_name.strip()
    if not name:
        return []
    names = [name]
    if not name.lower().endswith(_NATIVE_EXTENSIONS):
        stem = name if name.startswith("lib") else f"lib{name}"
        names += [f"{name}.dll", f"{name}.so", f"{stem}.so", f"{stem}.dylib"]
    return list(dict.fromkeys(names))


class NativeDependencyResolver:
    """Locate the native libraries a managed module calls into.

    Each declared library is looked up in the module's directory, then in
    *search_path*. Libraries that cannot be found are skipped silently.
    """

    def __init__(self, search_path: Iterable[Path] | None = None) -> None:
        self._search_path = (
            list(search_path) if search_path is not None else default_search_path()
        )

    def find_native_paths(self, module: ResolvedModule) -> set[Path]:
        found: set[Path] = set()
        libraries = {f.library_name for f in module.foreign_functions}
        for library in sorted(libraries):
            path = self._locate(library, module.location.parent)
            if path is not None:
                found.add(path)
        return found

    def _locate(self, library: str, module_dir: Path) -> Path | None:
        # Absolute DllImport paths are taken as-is
        if os.path.isabs(library):
            p = Path(library)
            return p.resolve() if p.is_file() else None
        for directory in [module_dir, *self._search_path]:
            for name in candidate_names(library):
                candidate = directory / name
                if candidate.is_file():
                    return candidate.resolve()
        return None
