from typing import Callable, List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Tree
from textual.widgets.tree import TreeNode

from dirnest.models import DirectoryEntry
from dirnest.provider import NestingTreeProvider
from dirnest.settings import NestingConfig, SettingsError, SettingsStore


class NestingTreeApp(App):  # pylint: disable=too-many-public-methods
    """
    Interactive project tree with directory-under-file nesting.

    Children are loaded lazily on expand, each level passing through the
    nesting provider. Selecting a row (enter / click) expands it only for
    plain directories; files and nested files are opened instead.
    """

    CSS = """
    #project-tree {
        border: solid gray;
        padding: 1;
    }
    #project-tree .cursor-line {
        background: blue;
        color: white;
    }
    """

    BINDINGS = [("q", "quit", "Quit"),
                ("r", "refresh_tree", "Refresh"),
                ("n", "toggle_nesting", "Toggle nesting"),
                ("left", "collapse_or_parent", "Collapse / go to parent"),
                ("right", "expand_or_child", "Expand / go to first child")
                ]

    def __init__(self, root: DirectoryEntry, store: SettingsStore,
                 opener: Optional[Callable[[str], None]] = None, **kwargs):
        super().__init__(**kwargs)
        self.root_entry = root
        self.store = store
        self.provider = NestingTreeProvider(store.snapshot)
        self.opener = opener
        self.opened_paths: List[str] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        tree = Tree(self.root_entry.name, data=self.root_entry, id="project-tree")
        # Selection decides between expanding and opening, see on_tree_node_selected
        tree.auto_expand = False
        yield tree
        yield Footer()

    async def on_mount(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_settings_changed)
        tree = self.query_one(Tree)
        tree.focus()
        self._populate(tree.root)
        tree.root.expand()

    def exit(self, *args, **kwargs) -> None:
        self._release_store()
        super().exit(*args, **kwargs)

    def on_unmount(self) -> None:
        self._release_store()

    def _release_store(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _populate(self, node: TreeNode) -> None:
        """(Re)load a node's children through the nesting provider."""
        entry = node.data
        node.remove_children()
        if entry is None:
            return
        for child in self.provider.modify(entry, entry.list_children()):
            node.add(self._format_label(child), data=child, allow_expand=child.is_expandable())

    def _format_label(self, entry) -> Text:
        if entry.node_type == "directory":
            return Text(entry.label(), style="bold")
        return Text(entry.label())

    async def on_tree_node_expanded(self, event: Tree.NodeExpanded) -> None:
        """Lazy-load children on expand."""
        node = event.node
        if node.data is not None and not node.children:
            self._populate(node)

    async def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        node = event.node
        entry = node.data
        if entry is None:
            return
        if entry.expand_on_double_click():
            node.toggle()
        elif entry.can_navigate():
            entry.navigate(self._open)

    def _open(self, path: str) -> None:
        self.opened_paths.append(path)
        if self.opener is not None:
            self.opener(path)
        else:
            self.exit(path)

    def _on_settings_changed(self, config: NestingConfig) -> None:
        self.action_refresh_tree()

    def action_refresh_tree(self) -> None:
        tree = self.query_one(Tree)
        self._populate(tree.root)
        tree.root.expand()

    def action_toggle_nesting(self) -> None:
        current = self.store.snapshot()
        try:
            self.store.apply(current.with_enabled(not current.enabled))
        except SettingsError as e:
            self.notify(str(e), severity="error")
            return
        state = "on" if self.store.snapshot().enabled else "off"
        self.notify(f"Nesting {state}")

    async def action_expand_or_child(self) -> None:
        tree = self.query_one(Tree)
        node = tree.cursor_node
        if not node:
            return
        # If this row can expand and is currently collapsed, expand it (works for root and folders)
        if node.allow_expand and not node.is_expanded:
            node.expand()
            return
        # Already expanded: move into first child if any
        if node.children:
            tree.move_cursor(node.children[0])

    async def action_collapse_or_parent(self) -> None:
        tree = self.query_one(Tree)
        node = tree.cursor_node
        if not node:
            return
        if node.is_expanded:
            node.collapse()
            return
        if node.parent:
            tree.move_cursor(node.parent)
