from typing import Callable, Optional, Sequence, Union

from dirnest.models import ViewSettings
from dirnest.nesting import transform
from dirnest.settings import NestingConfig

SettingsSource = Callable[[], NestingConfig]


class NestingTreeProvider:
    """
    Hook the tree hosts call for every level they render.

    ``settings`` is either a fixed ``NestingConfig`` or a callable returning the
    current snapshot (``SettingsStore.snapshot``). It is read once per call so a
    settings change never lands halfway through a level.
    """

    def __init__(self, settings: Union[NestingConfig, SettingsSource, None] = None):
        if settings is None:
            settings = NestingConfig()
        if isinstance(settings, NestingConfig):
            fixed = settings
            settings = lambda: fixed  # noqa: E731
        self._settings_source: SettingsSource = settings

    def modify(self, parent, children: Sequence, view_settings: Optional[ViewSettings] = None) -> Sequence:
        return transform(children, self._settings_source())
