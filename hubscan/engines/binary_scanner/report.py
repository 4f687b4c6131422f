"""Scan document model and the append-only builder the scanner fills in."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class DirectoryEntry(_WireModel):
    label: str
    absolute_path: str


class FileEntry(_WireModel):
    display_label: str
    absolute_path: str
    size_bytes: int
    fingerprint_hex: str


class ScanProblem(_WireModel):
    message: str


class ScanDocument(_WireModel):
    """The serialized form of an inventory, field order fixed."""

    project_name: str | None = None
    release_version: str | None = None
    directory: DirectoryEntry | None = None
    files: list[FileEntry] = []
    problems: list[ScanProblem] = []


class InventoryReport:
    """Accumulates project identity, files and problems for one scan.

    Assign/append only. Serializing the same state twice yields the same
    bytes.
    """

    def __init__(self) -> None:
        self.project_name: str | None = None
        self.release_version: str | None = None
        self.directory: DirectoryEntry | None = None
        self._files: list[FileEntry] = []
        self._paths: set[str] = set()
        self._problems: list[ScanProblem] = []

    @property
    def files(self) -> tuple[FileEntry, ...]:
        return tuple(self._files)

    @property
    def problems(self) -> tuple[ScanProblem, ...]:
        return tuple(self._problems)

    def set_project(self, name: str, release: str) -> None:
        self.project_name = name
        self.release_version = release

    def add_directory(self, label: str, path: Path | str) -> None:
        self.directory = DirectoryEntry(label=label, absolute_path=str(path))

    def add_file(
        self,
        display_label: str,
        path: Path | str,
        size_bytes: int,
        fingerprint: str,
    ) -> FileEntry:
        key = str(path)
        if key in self._paths:
            raise ValueError(f"file already recorded: {key}")
        entry = FileEntry(
            display_label=display_label,
            absolute_path=key,
            size_bytes=size_bytes,
            fingerprint_hex=fingerprint,
        )
        self._paths.add(key)
        self._files.append(entry)
        return entry

    def add_problem(self, message: str) -> None:
        self._problems.append(ScanProblem(message=message))

    def document(self) -> ScanDocument:
        return ScanDocument(
            project_name=self.project_name,
            release_version=self.release_version,
            directory=self.directory,
            files=list(self._files),
            problems=list(self._problems),
        )

    def to_bytes(self) -> bytes:
        payload = self.document().model_dump_json(by_alias=True, indent=2)
        return payload.encode("utf-8") + b"\n"

    def serialize(self, sink: BinaryIO) -> None:
        sink.write(self.to_bytes())
