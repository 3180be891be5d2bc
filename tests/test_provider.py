from dirnest.composite import CompositeEntry
from dirnest.models import DirectoryEntry, FileEntry, ViewSettings
from dirnest.provider import NestingTreeProvider
from dirnest.settings import NestingConfig, SettingsStore


def _children():
    return [
        FileEntry(name="User.php", path="root/User.php"),
        DirectoryEntry(name="User", path="root/User", children=[]),
    ]


def test_default_provider_uses_default_config():
    result = NestingTreeProvider().modify(None, _children())
    assert len(result) == 1
    assert isinstance(result[0], CompositeEntry)


def test_fixed_config():
    children = _children()
    provider = NestingTreeProvider(NestingConfig(enabled=False))
    assert provider.modify(None, children, ViewSettings()) is children


def test_reads_a_fresh_snapshot_per_call(tmp_path):
    store = SettingsStore(tmp_path / "settings.json")
    provider = NestingTreeProvider(store.snapshot)
    children = _children()

    assert len(provider.modify(None, children)) == 1

    store.apply(store.snapshot().with_enabled(False))
    assert provider.modify(None, children) is children


def test_snapshot_read_once_per_level():
    calls = []

    def source():
        calls.append(1)
        return NestingConfig()

    NestingTreeProvider(source).modify(None, _children())
    assert len(calls) == 1


def test_parent_and_view_settings_are_ignored():
    parent = DirectoryEntry(name=".", path="root")
    a = NestingTreeProvider().modify(parent, _children(), ViewSettings(show_hidden=True))
    b = NestingTreeProvider().modify(None, _children(), None)
    assert [e.name for e in a] == [e.name for e in b]
