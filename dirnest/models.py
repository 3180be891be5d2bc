"""
where we store the
pydantic Data Structure classes
for the project tree entries

"""

import logging
from enum import Enum
from typing import Annotated, Callable, List, Literal, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr

logger = logging.getLogger(__name__)

Opener = Callable[[str], None]


class NodeType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"
    NESTED = "nested"


class FileEntry(BaseModel):
    """A regular file in the project tree."""

    node_type: Literal["file"] = "file"
    name: str
    path: str

    @property
    def extension(self) -> Optional[str]:
        """Text after the last dot of the name, or None when there is no dot."""
        dot = self.name.rfind(".")
        if dot < 0:
            return None
        return self.name[dot + 1:]

    @property
    def name_without_extension(self) -> str:
        dot = self.name.rfind(".")
        if dot < 0:
            return self.name
        return self.name[:dot]

    def label(self) -> str:
        return self.name

    def is_expandable(self) -> bool:
        return False

    def list_children(self) -> List["TreeEntry"]:
        return []

    def can_navigate(self) -> bool:
        return True

    def navigate(self, opener: Opener) -> None:
        opener(self.path)

    def expand_on_double_click(self) -> bool:
        return False


class DirectoryEntry(BaseModel):
    """
    A directory in the project tree.

    Children are either given up front (``children``) or pulled on demand
    through the loader attached by the scanner. The loader runs on every
    ``list_children()`` call, so the result follows the filesystem.
    """

    node_type: Literal["directory"] = "directory"
    name: str
    path: str
    children: Optional[List["TreeEntry"]] = None

    _loader: Optional[Callable[[str], List["TreeEntry"]]] = PrivateAttr(default=None)

    def with_loader(self, loader: Callable[[str], List["TreeEntry"]]) -> "DirectoryEntry":
        self._loader = loader
        return self

    def label(self) -> str:
        return f"{self.name}/"

    def is_expandable(self) -> bool:
        return True

    def list_children(self) -> List["TreeEntry"]:
        if self.children is not None:
            return self.children
        if self._loader is None:
            return []
        try:
            return self._loader(self.path)
        except OSError as e:
            logger.debug("Could not list %s: %s", self.path, e)
            return []

    def can_navigate(self) -> bool:
        return False

    def navigate(self, opener: Opener) -> None:
        # Directories are expanded, not opened.
        return None

    def expand_on_double_click(self) -> bool:
        return True


class OtherEntry(BaseModel):
    """Anything that is neither a file nor a directory (broken links, sockets...)."""

    node_type: Literal["other"] = "other"
    name: str
    path: Optional[str] = None

    def label(self) -> str:
        return self.name

    def is_expandable(self) -> bool:
        return False

    def list_children(self) -> List["TreeEntry"]:
        return []

    def can_navigate(self) -> bool:
        return False

    def navigate(self, opener: Opener) -> None:
        return None

    def expand_on_double_click(self) -> bool:
        return False


TreeEntry = Annotated[
    Union[FileEntry, DirectoryEntry, OtherEntry],
    Field(discriminator="node_type"),
]

DirectoryEntry.model_rebuild()


class ViewSettings(BaseModel):
    """Host view options. The nesting core passes these through untouched."""

    show_hidden: bool = False
    respect_gitignore: bool = True
