"""Python source discovery for the tree-sitter symbol producer."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

GitignoreMatcher = Callable[[str], bool]

DEFAULT_SKIP_DIRS = frozenset(
    {".git", ".hg", ".tox", ".nox", ".venv", "venv", "__pycache__", "build", "dist"}
)


def _resolves_inside(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _matches_any(rel_path: str, patterns: list[str] | None) -> bool:
    return bool(patterns) and any(fnmatch(rel_path, pattern) for pattern in patterns)


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return .gitignore files under root (root first), skipping symlinks."""
    found = {
        path
        for path in (root / ".gitignore", *root.rglob(".gitignore"))
        if path.is_file() and not path.is_symlink()
    }
    return sorted(found, key=lambda p: (len(p.relative_to(root).parts), p.as_posix()))


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> GitignoreMatcher | None:
    """Compose ``.gitignore`` rules into one predicate over absolute paths.

    Only the root file is honoured unless ``nested_gitignore`` is set.
    """
    if nested_gitignore:
        sources = _iter_gitignore_files(root)
    else:
        root_file = root / ".gitignore"
        sources = [root_file] if root_file.is_file() else []
    if not sources:
        return None

    rule_sets = [parse_gitignore(source) for source in sources]

    def matches(path_str: str) -> bool:
        for rules in rule_sets:
            try:
                if rules(path_str):
                    return True
            except ValueError:
                # Path lies outside the directory of this .gitignore.
                continue
        return False

    return matches


def _should_include_file(
    path: Path,
    directory: Path,
    gitignore_matches: GitignoreMatcher | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if path.is_symlink() or not path.is_file():
        return False

    if not _resolves_inside(path, directory):
        logger.debug("Skipping %s: resolves outside %s", path, directory)
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    rel_path = path.relative_to(directory).as_posix()
    if include_patterns and not _matches_any(rel_path, include_patterns):
        return False
    return not _matches_any(rel_path, exclude_patterns)


def find_python_files(
    directory: Path,
    *,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
    skip_dirs: frozenset[str] = DEFAULT_SKIP_DIRS,
) -> Iterator[Path]:
    """Yield Python files under ``directory`` in relative-path order.

    Directories named in ``skip_dirs``, symlinked directories and ignored
    directories are pruned without being walked. Symlinked files and files
    resolving outside ``directory`` are left out. ``include_patterns`` and
    ``exclude_patterns`` are fnmatch globs over the POSIX relative path.
    """
    gitignore_matches = _build_gitignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
    )

    matched_files: list[Path] = []
    for current, dir_names, file_names in os.walk(directory):
        current_path = Path(current)
        dir_names[:] = [
            name
            for name in dir_names
            if name not in skip_dirs
            and not (current_path / name).is_symlink()
            and not (
                gitignore_matches is not None
                and gitignore_matches(str(current_path / name))
            )
        ]
        for name in file_names:
            if not name.endswith(".py"):
                continue
            path = current_path / name
            if _should_include_file(
                path,
                directory,
                gitignore_matches,
                include_patterns,
                exclude_patterns,
            ):
                matched_files.append(path)

    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())
    logger.debug("Found %d Python files under %s", len(matched_files), directory)

    yield from matched_files


__all__ = ["DEFAULT_SKIP_DIRS", "find_python_files"]
