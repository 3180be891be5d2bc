from typing import List, Literal

from pydantic import BaseModel

from dirnest.models import DirectoryEntry, FileEntry, Opener, TreeEntry


class CompositeEntry(BaseModel):
    """
    A tree entry that looks like a file but holds a directory's children.

    ``User.php`` shows up as itself, with an expand arrow; expanding it lists
    whatever is currently inside ``User/``. Both source entries are borrowed:
    the composite keeps the very same objects it was built from and never
    changes them.
    """

    node_type: Literal["nested"] = "nested"
    file: FileEntry
    directory: DirectoryEntry

    @property
    def name(self) -> str:
        return self.file.name

    @property
    def path(self) -> str:
        """The file's location; reveal/breadcrumb consumers treat the composite as the file."""
        return self.file.path

    @property
    def directory_path(self) -> str:
        return self.directory.path

    def label(self) -> str:
        return self.file.label()

    def is_expandable(self) -> bool:
        return True

    def list_children(self) -> List[TreeEntry]:
        """Children of the nested directory, read at call time."""
        return self.directory.list_children()

    def can_navigate(self) -> bool:
        return self.file.can_navigate()

    def navigate(self, opener: Opener) -> None:
        """Open the file, never the directory."""
        self.file.navigate(opener)

    def expand_on_double_click(self) -> bool:
        # Activating the row opens the file; the disclosure arrow expands it.
        return False
