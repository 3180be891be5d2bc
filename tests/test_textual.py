import pytest
from textual.widgets import Tree

from dirnest.composite import CompositeEntry
from dirnest.models import DirectoryEntry, FileEntry
from dirnest.settings import NestingConfig, SettingsStore
from dirnest.viewer import NestingTreeApp

# --- Fixtures ---

@pytest.fixture
def project_root():
    """
    Creates a project tree:
    .
    ├── Models/
    │   └── Base.php
    ├── User/
    │   └── HasRoles.php
    └── User.php
    """
    has_roles = FileEntry(name="HasRoles.php", path="root/User/HasRoles.php")
    user_dir = DirectoryEntry(name="User", path="root/User", children=[has_roles])
    base = FileEntry(name="Base.php", path="root/Models/Base.php")
    models = DirectoryEntry(name="Models", path="root/Models", children=[base])
    user = FileEntry(name="User.php", path="root/User.php")
    return DirectoryEntry(name=".", path="root", children=[models, user_dir, user])


@pytest.fixture
def store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


def labels(node):
    return [str(child.label) for child in node.children]


# --- Integration Tests using Pilot ---

@pytest.mark.asyncio
async def test_app_initialization(project_root, store):
    """The root level is loaded through the provider: the User/ directory is folded away."""
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        assert tree.root.is_expanded
        assert labels(tree.root) == ["Models/", "User.php"]
        composite_node = tree.root.children[1]
        assert isinstance(composite_node.data, CompositeEntry)
        assert composite_node.allow_expand


@pytest.mark.asyncio
async def test_composite_label_matches_plain_file(project_root, store):
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        composite_node = tree.root.children[1]
        plain = app._format_label(composite_node.data.file)
        assert composite_node.label == plain


@pytest.mark.asyncio
async def test_expanding_composite_lists_directory_children(project_root, store):
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        composite_node = tree.root.children[1]
        composite_node.expand()
        await pilot.pause()

        assert labels(composite_node) == ["HasRoles.php"]


@pytest.mark.asyncio
async def test_enter_on_composite_opens_file(project_root, store):
    opened = []
    app = NestingTreeApp(project_root, store, opener=opened.append)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        composite_node = tree.root.children[1]
        tree.move_cursor(composite_node)

        await pilot.press("enter")
        await pilot.pause()

        assert opened == ["root/User.php"]
        assert app.opened_paths == ["root/User.php"]
        assert not composite_node.is_expanded


@pytest.mark.asyncio
async def test_enter_on_directory_expands(project_root, store):
    opened = []
    app = NestingTreeApp(project_root, store, opener=opened.append)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        models_node = tree.root.children[0]
        tree.move_cursor(models_node)

        await pilot.press("enter")
        await pilot.pause()

        assert models_node.is_expanded
        assert labels(models_node) == ["Base.php"]
        assert opened == []


@pytest.mark.asyncio
async def test_open_without_opener_exits_with_path(project_root, store):
    app = NestingTreeApp(project_root, store)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        tree.move_cursor(tree.root.children[1])
        await pilot.press("enter")
        await pilot.pause()

    assert app.return_value == "root/User.php"


@pytest.mark.asyncio
async def test_toggle_nesting_refreshes_tree(project_root, store):
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)

        await pilot.press("n")
        await pilot.pause()

        assert store.snapshot().enabled is False
        assert labels(tree.root) == ["Models/", "User/", "User.php"]

        await pilot.press("n")
        await pilot.pause()

        assert store.snapshot().enabled is True
        assert labels(tree.root) == ["Models/", "User.php"]


@pytest.mark.asyncio
async def test_external_settings_change_refreshes_tree(project_root, store):
    """Anything applying new settings to the store redraws the open view."""
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        store.apply(NestingConfig(enabled_extensions=["rb"]))
        await pilot.pause()

        assert labels(tree.root) == ["Models/", "User/", "User.php"]


@pytest.mark.asyncio
async def test_unsubscribes_on_exit(project_root, store):
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        await pilot.press("q")

    assert store._listeners == []


@pytest.mark.asyncio
async def test_keyboard_navigation_custom_actions(project_root, store):
    """Left/Right expand, descend, climb and collapse."""
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        models_node = tree.root.children[0]
        tree.move_cursor(models_node)

        # RIGHT -> Expand
        await pilot.press("right")
        await pilot.pause()
        assert models_node.is_expanded

        # RIGHT -> Go to child
        await pilot.press("right")
        assert tree.cursor_node == models_node.children[0]

        # LEFT -> Go to parent
        await pilot.press("left")
        assert tree.cursor_node == models_node

        # LEFT -> Collapse
        await pilot.press("left")
        assert not models_node.is_expanded


@pytest.mark.asyncio
async def test_quit_action_key(project_root, store):
    app = NestingTreeApp(project_root, store, opener=lambda path: None)
    async with app.run_test() as pilot:
        await pilot.press("q")
    assert app.return_code == 0
