"""List the files under a project root, skipping .git and gitignored paths."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pathspec

GIT_IGNORE_PATTERNS = [".git/**", ".git/", ".git"]


def load_ignore_spec(root: Path) -> pathspec.GitIgnoreSpec:
    """Compile the hardcoded .git rules plus the root's .gitignore, if any."""
    lines = list(GIT_IGNORE_PATTERNS)
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file():
        lines.extend(gitignore_path.read_text(encoding="utf-8").splitlines())
    return pathspec.GitIgnoreSpec.from_lines(lines)


def build_file_index(root: Path, ignore_spec: pathspec.GitIgnoreSpec | None = None) -> List[str]:
    """Walk ``root`` and return project-relative file paths.

    Entries are visited in sorted-name order so the index (and therefore
    reference resolution) is the same on every platform. Paths use ``/``
    separators. Directories are matched with a trailing slash so that
    directory-only patterns such as ``build/`` prune the whole subtree.
    Symlinked directories are not followed.

    Args:
        root: Directory to index
        ignore_spec: Pre-compiled matcher (defaults to ``load_ignore_spec(root)``)

    Returns:
        Ordered list of relative paths, without ignored entries
    """
    if ignore_spec is None:
        ignore_spec = load_ignore_spec(root)

    files: List[str] = []
    _walk(root, root, ignore_spec, files)
    return files


def _walk(root: Path, current: Path, ignore_spec: pathspec.GitIgnoreSpec, files: List[str]) -> None:
    for entry in sorted(current.iterdir(), key=lambda p: p.name):
        relative = entry.relative_to(root).as_posix()
        if entry.is_dir():
            if entry.is_symlink():
                continue
            if ignore_spec.match_file(f"{relative}/"):
                continue
            _walk(root, entry, ignore_spec, files)
        elif not ignore_spec.match_file(relative):
            files.append(relative)
