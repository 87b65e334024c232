# src/task_picker/host/vault.py

"""
Filesystem host: a vault is a directory of Markdown notes.

FileVault implements the DocumentStore port (vault-relative "/" paths),
MarkdownBlockIndex implements the BlockIndex port by scanning documents for
trailing ^block-ids, cached per file modification time.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path, PurePosixPath

from ..tasks.ids import collect_block_ids, split_lines

logger = logging.getLogger(__name__)

MD_SUFFIX = ".md"


def _read_text(path: Path) -> str:
    # newline="" keeps "\r\n" so rewrites preserve the line break style.
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write_atomic(target: Path, text: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".tmp")
    try:
        # newline="" writes line breaks exactly as given.
        with open(tmp, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


class FileVault:
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser().resolve()
        if not self._root.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {self._root}")
        logger.info("Vault ready root=%s", self._root)

    @property
    def root(self) -> Path:
        return self._root

    def _abs(self, path: str) -> Path:
        rel = PurePosixPath(path.strip().lstrip("/"))
        if ".." in rel.parts:
            raise ValueError(f"Path escapes the vault: {path!r}")
        return self._root.joinpath(*rel.parts)

    def _rel(self, abs_path: Path) -> str:
        return abs_path.relative_to(self._root).as_posix()

    def resolve(self, path: str) -> str | None:
        if not path or not path.strip():
            return None
        try:
            candidate = self._abs(path)
        except ValueError:
            return None
        if candidate.is_file():
            return self._rel(candidate)
        if candidate.suffix.lower() != MD_SUFFIX:
            with_md = candidate.with_name(candidate.name + MD_SUFFIX)
            if with_md.is_file():
                return self._rel(with_md)
        return None

    async def read(self, path: str) -> str:
        return await asyncio.to_thread(_read_text, self._abs(path))

    async def write(self, path: str, text: str) -> None:
        await asyncio.to_thread(_write_atomic, self._abs(path), text)
        logger.debug("Wrote %s (%d chars)", path, len(text))

    async def list_documents(self, folder: str) -> list[str]:
        base = self._abs(folder) if folder and folder.strip("/") else self._root
        if not base.is_dir():
            logger.debug("Folder not found in vault: %r", folder)
            return []
        found = []
        for p in base.rglob("*"):
            if not p.is_file() or p.suffix.lower() != MD_SUFFIX:
                continue
            rel = self._rel(p)
            # Skip dotfiles and anything under dot-directories (.obsidian, .trash).
            if any(part.startswith(".") for part in rel.split("/")):
                continue
            found.append(rel)
        return sorted(found)


class MarkdownBlockIndex:
    """Block ids per document, re-scanned whenever the file changes on disk (mtime, size, inode)."""

    def __init__(self, vault: FileVault) -> None:
        self._vault = vault
        self._cache: dict[str, tuple[tuple[int, int, int], frozenset[str]]] = {}

    def block_ids(self, path: str) -> frozenset[str]:
        resolved = self._vault.resolve(path)
        if resolved is None:
            return frozenset()
        file_path = self._vault.root / resolved
        try:
            st = file_path.stat()
        except FileNotFoundError:
            return frozenset()

        stamp = (st.st_mtime_ns, st.st_size, st.st_ino)
        cached = self._cache.get(resolved)
        if cached is not None and cached[0] == stamp:
            return cached[1]

        ids = frozenset(collect_block_ids(split_lines(_read_text(file_path))))
        self._cache[resolved] = (stamp, ids)
        return ids
