"""

this is a module for
honouring .gitignore while scanning the project tree
"""


# gitignore.py
from __future__ import annotations
from pathlib import Path
from typing import List, Tuple

import pathspec


# Hard-coded excludes that *always* apply
HARDCODED = [".git", "*.egg-info", "__pycache__"]


def _load_gitignore_specs(start_dir: Path) -> List[Tuple[Path, pathspec.PathSpec]]:
    """Return (directory, PathSpec) for every .gitignore found between
    `start_dir` and the filesystem root."""
    specs: List[Tuple[Path, pathspec.PathSpec]] = []
    for parent in (start_dir, *start_dir.parents):
        gitignore = parent / ".gitignore"
        if gitignore.is_file():
            try:
                with gitignore.open(encoding="utf-8") as fh:
                    lines = [ln.rstrip() for ln in fh if ln.strip() and not ln.startswith("#")]
            except (OSError, UnicodeDecodeError):
                continue
            specs.append((parent, pathspec.PathSpec.from_lines("gitwildmatch", lines)))
    return specs


class GitAwareFilter:
    """Callable that answers: *should this path be hidden from the tree?*"""

    def __init__(self, root: Path):
        self.root = root
        self.hardcoded = pathspec.PathSpec.from_lines("gitwildmatch", HARDCODED)
        self.git_specs = _load_gitignore_specs(root)

    def __call__(self, path: Path, is_dir: bool = False) -> bool:
        """Return True if the path should be *excluded*."""
        suffix = "/" if is_dir else ""
        rel = path.relative_to(self.root).as_posix() + suffix
        if self.hardcoded.match_file(rel):
            return True
        for base, spec in self.git_specs:
            if spec.match_file(path.relative_to(base).as_posix() + suffix):
                return True
        return False
