import logging
import os
from pathlib import Path
from typing import List, Optional

from dirnest.gitignore import GitAwareFilter
from dirnest.models import DirectoryEntry, FileEntry, OtherEntry, TreeEntry, ViewSettings

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """
    Builds project tree entries from the filesystem.

    Directory children are not read up front: every ``DirectoryEntry`` gets a
    loader that lists the directory again each time it is asked, so expanding
    a node always shows what is on disk right now. Directories sort before
    files, each group by case-insensitive name.
    """

    def __init__(self, view_settings: Optional[ViewSettings] = None):
        self.view_settings = view_settings or ViewSettings()
        self._filter: Optional[GitAwareFilter] = None

    def scan(self, root_path: str) -> DirectoryEntry:
        """Return the root entry (named ``.``) for ``root_path``."""
        root = Path(root_path).resolve()
        if self.view_settings.respect_gitignore:
            self._filter = GitAwareFilter(root)
        else:
            self._filter = None
        return DirectoryEntry(name=".", path=str(root)).with_loader(self.list_directory)

    def list_directory(self, path: str) -> List[TreeEntry]:
        try:
            names = os.listdir(path)
        except PermissionError:
            logger.debug("Permission denied listing %s", path)
            names = []

        entries: List[TreeEntry] = []
        for name in names:
            child_path = os.path.join(path, name)
            if self._should_skip(name, child_path):
                continue
            entries.append(self._entry(name, child_path))
        entries.sort(key=lambda e: (e.node_type != "directory", e.name.lower(), e.name))
        return entries

    def _entry(self, name: str, path: str) -> TreeEntry:
        if os.path.isdir(path):
            return DirectoryEntry(name=name, path=path).with_loader(self.list_directory)
        if os.path.isfile(path):
            return FileEntry(name=name, path=path)
        return OtherEntry(name=name, path=path)

    def _should_skip(self, name: str, path: str) -> bool:
        # Hidden files
        if not self.view_settings.show_hidden and name.startswith("."):
            return True

        # Gitignore
        if self._filter is not None:
            candidate = Path(path)
            try:
                return self._filter(candidate, is_dir=candidate.is_dir())
            except ValueError:
                # Outside the scanned root
                return False
        return False
