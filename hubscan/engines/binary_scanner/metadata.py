"""Module metadata readers — managed references, P/Invoke imports, version info."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import dnfile
import pefile

from hubscan.engines.binary_scanner.models import (
    AssemblyRef,
    ForeignFunction,
    ResolvedModule,
    VersionInfo,
)
from hubscan.exceptions import ArtifactLoadError


@runtime_checkable
class ModuleMetadataReader(Protocol):
    """Interface the scanner uses to look inside binaries."""

    def load(self, path: Path) -> ResolvedModule:
        """Load a managed module; raise ArtifactLoadError if *path* is not one."""
        ...

    def read_version_info(self, path: Path) -> VersionInfo:
        """Return embedded product name/version (empty for non-PE files)."""
        ...


def _text(value: Any) -> str:
    """Normalise dnfile/pefile string values (str, bytes, heap items)."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    inner = getattr(value, "value", None)
    if isinstance(inner, (str, bytes)):
        return _text(inner)
    return str(value)


def _blob(value: Any) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    inner = getattr(value, "value", None)
    if isinstance(inner, (bytes, bytearray)):
        return bytes(inner)
    return b""


def _version(row: Any) -> str:
    return (
        f"{row.MajorVersion}.{row.MinorVersion}."
        f"{row.BuildNumber}.{row.RevisionNumber}"
    )


def public_key_token(key_or_token: bytes, is_full_key: bool) -> str | None:
    """Return the 8-byte public key token as hex.

    A full public key is reduced to its token: the last 8 bytes of its
    SHA-1, reversed.
    """
    if not key_or_token:
        return None
    if is_full_key:
        return hashlib.sha1(key_or_token).digest()[-8:][::-1].hex()
    return key_or_token.hex()


def _string_file_info(pe: pefile.PE) -> dict[str, str]:
    values: dict[str, str] = {}
    for group in getattr(pe, "FileInfo", None) or []:
        for entry in group:
            # VarFileInfo entries carry no StringTable
            for table in getattr(entry, "StringTable", None) or []:
                for key, value in table.entries.items():
                    values[_text(key)] = _text(value)
    return values


def _version_info(pe: pefile.PE) -> VersionInfo:
    values = _string_file_info(pe)
    return VersionInfo(
        product_name=values.get("ProductName", "").strip() or None,
        product_version=values.get("ProductVersion", "").strip() or None,
    )


class DnfileMetadataReader:
    """Reads .NET metadata tables with ``dnfile`` and PE resources with ``pefile``.

    Everything needed from a module is extracted eagerly and the underlying
    file mapping is closed before :meth:`load` returns.
    """

    def load(self, path: Path) -> ResolvedModule:
        location = Path(path).resolve()
        try:
            pe = dnfile.dnPE(str(location))
        except pefile.PEFormatError as exc:
            raise ArtifactLoadError(str(location), str(exc)) from exc
        try:
            net = getattr(pe, "net", None)
            tables = getattr(net, "mdtables", None) if net is not None else None
            if tables is None:
                raise ArtifactLoadError(str(location), "no CLR metadata")

            name, version = location.stem, "0.0.0.0"
            row = next(iter(getattr(tables, "Assembly", None) or []), None)
            if row is not None:
                name, version = _text(row.Name) or name, _version(row)

            return ResolvedModule(
                name=name,
                version=version,
                location=location,
                version_info=_version_info(pe),
                references=self._references(tables),
                foreign_functions=self._foreign_functions(tables),
            )
        finally:
            pe.close()

    def read_version_info(self, path: Path) -> VersionInfo:
        try:
            pe = pefile.PE(str(path), fast_load=True)
        except pefile.PEFormatError:
            return VersionInfo()
        try:
            pe.parse_data_directories(
                directories=[pefile.DIRECTORY_ENTRY["IMAGE_DIRECTORY_ENTRY_RESOURCE"]]
            )
            return _version_info(pe)
        finally:
            pe.close()

    @staticmethod
    def _references(tables: Any) -> list[AssemblyRef]:
        refs: list[AssemblyRef] = []
        for row in getattr(tables, "AssemblyRef", None) or []:
            flags = getattr(row, "Flags", None)
            full_key = bool(getattr(flags, "afPublicKey", False))
            refs.append(
                AssemblyRef(
                    name=_text(row.Name),
                    version=_version(row),
                    culture=_text(getattr(row, "Culture", None)) or None,
                    public_key_token=public_key_token(
                        _blob(getattr(row, "PublicKey", None)), full_key
                    ),
                )
            )
        return refs

    @staticmethod
    def _foreign_functions(tables: Any) -> list[ForeignFunction]:
        functions: list[ForeignFunction] = []
        for row in getattr(tables, "ImplMap", None) or []:
            scope = getattr(getattr(row, "ImportScope", None), "row", None)
            library = _text(getattr(scope, "Name", None))
            if not library:
                continue
            functions.append(
                ForeignFunction(
                    entry_point=_text(getattr(row, "ImportName", None)),
                    library_name=library,
                )
            )
        return functions
