"""Project handles: the contract aspects work against and a local-directory implementation."""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import anyio


@dataclass(frozen=True)
class RepoRef:
    """Coordinates of a repository on GitHub."""

    owner: str
    repo: str
    url: str | None = None
    branch: str | None = None

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, value: str, branch: str | None = None) -> RepoRef:
        """Build a RepoRef from ``owner/repo`` or a GitHub URL.

        Handles:
          - owner/repo
          - https://github.com/owner/repo(.git)
          - git@github.com:owner/repo(.git)

        Raises ValueError if *value* cannot be parsed.
        """
        raw = value.strip().rstrip("/")
        if raw.endswith(".git"):
            raw = raw[:-4]

        url: str | None = value.strip()
        if raw.startswith("git@"):
            _, sep, path = raw.partition(":")
            parts = path.split("/") if sep else []
        elif "://" in raw:
            parts = raw.split("://", 1)[1].split("/")[1:]
        else:
            parts = raw.split("/")
            url = None

        if len(parts) != 2 or not all(parts):
            raise ValueError(f"cannot parse GitHub repository: {value!r}")
        return cls(owner=parts[0], repo=parts[1], url=url, branch=branch)


@runtime_checkable
class ProjectFile(Protocol):
    path: str

    async def get_content(self) -> str: ...

    async def set_content(self, content: str) -> None: ...


@runtime_checkable
class Project(Protocol):
    id: RepoRef

    async def get_file(self, path: str) -> ProjectFile | None: ...

    async def add_file(self, path: str, content: str) -> ProjectFile: ...

    async def has_file(self, path: str) -> bool: ...


class LocalFile:
    """A file inside a :class:`LocalProject`."""

    def __init__(self, base_dir: Path, path: str) -> None:
        self.path = path
        self._full_path = base_dir / path

    async def get_content(self) -> str:
        return await anyio.Path(self._full_path).read_text(encoding="utf-8")

    async def set_content(self, content: str) -> None:
        await anyio.Path(self._full_path).write_text(content, encoding="utf-8")

    def __repr__(self) -> str:
        return f"LocalFile({self.path!r})"


class LocalProject:
    """Project backed by a checked-out directory."""

    def __init__(self, base_dir: Path | str, repo_ref: RepoRef) -> None:
        self.base_dir = Path(base_dir)
        self.id = repo_ref

    @classmethod
    def from_directory(cls, base_dir: Path | str) -> LocalProject:
        """Open a git checkout, taking the RepoRef from its ``origin`` remote.

        Raises ValueError if the directory has no parseable origin remote.
        """
        base = Path(base_dir)
        remote = _origin_url(base / ".git" / "config")
        if remote is None:
            raise ValueError(f"no origin remote found in {base}")
        return cls(base, RepoRef.parse(remote))

    def _resolve(self, path: str) -> Path:
        # checked on the path as written; symlink targets are not resolved
        rel = os.path.normpath(path)
        if os.path.isabs(rel) or rel == os.pardir or rel.startswith(os.pardir + os.sep):
            raise ValueError(f"path escapes project directory: {path!r}")
        return self.base_dir / rel

    async def get_file(self, path: str) -> LocalFile | None:
        if not await anyio.Path(self._resolve(path)).is_file():
            return None
        return LocalFile(self.base_dir, path)

    async def has_file(self, path: str) -> bool:
        return await self.get_file(path) is not None

    async def add_file(self, path: str, content: str) -> LocalFile:
        full = anyio.Path(self._resolve(path))
        await full.parent.mkdir(parents=True, exist_ok=True)
        await full.write_text(content, encoding="utf-8")
        return LocalFile(self.base_dir, path)

    def __repr__(self) -> str:
        return f"LocalProject({str(self.base_dir)!r}, {self.id.slug!r})"


def _origin_url(git_config: Path) -> str | None:
    if not git_config.is_file():
        return None
    parser = configparser.ConfigParser(strict=False, interpolation=None)
    try:
        parser.read(git_config, encoding="utf-8")
    except configparser.Error:
        return None
    section = 'remote "origin"'
    if not parser.has_section(section):
        return None
    return parser.get(section, "url", fallback=None)
