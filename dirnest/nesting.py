"""
Directory-under-file nesting for one level of the project tree.

Given the sibling entries of a directory, every directory whose name matches
the base name of an eligible sibling file (``User.php`` + ``User/``, compared
case-insensitively) is folded into a ``CompositeEntry`` that takes the file's
place. Nothing on disk is touched; this only changes what gets displayed.
"""

import logging
from typing import Dict, List, Optional, Sequence

from dirnest.composite import CompositeEntry
from dirnest.models import DirectoryEntry, FileEntry, NodeType
from dirnest.settings import NestingConfig

logger = logging.getLogger(__name__)


def match_key(name: Optional[str]) -> Optional[str]:
    """Case-folded base name, or None when there is nothing to match on."""
    if not isinstance(name, str) or not name:
        return None
    return name.lower()


def _kind(entry) -> Optional[str]:
    node_type = getattr(entry, "node_type", None)
    if isinstance(node_type, NodeType):
        return node_type.value
    return node_type


def _file_key(entry: FileEntry, config: NestingConfig) -> Optional[str]:
    """Match key of a file whose extension is enabled, else None."""
    if not config.is_eligible(getattr(entry, "extension", None)):
        return None
    return match_key(getattr(entry, "name_without_extension", None))


def _dir_key(entry: DirectoryEntry) -> Optional[str]:
    return match_key(getattr(entry, "name", None))


def transform(children: Sequence, config: NestingConfig) -> Sequence:
    """
    Fold matching file/directory pairs of one tree level into composites.

    Returns ``children`` itself when nesting is disabled or nothing matches.
    Otherwise returns a new list in the original order, where the first
    eligible file of each matched pair is replaced by a ``CompositeEntry`` and
    every directory with a matched key is left out. When two directories
    share a key the later one is nested.
    """
    if not config.enabled or not children:
        return children

    if not config.enabled_extensions:
        return children

    # First pass: bucket files and directories by match key
    files_by_key: Dict[str, object] = {}
    dirs_by_key: Dict[str, object] = {}
    for child in children:
        kind = _kind(child)
        if kind == NodeType.FILE:
            key = _file_key(child, config)
            if key is not None:
                files_by_key.setdefault(key, child)
        elif kind == NodeType.DIRECTORY:
            key = _dir_key(child)
            if key is not None:
                dirs_by_key[key] = child

    if not files_by_key or not dirs_by_key:
        return children

    matched = files_by_key.keys() & dirs_by_key.keys()
    if not matched:
        return children

    # Second pass: rebuild the level, composites in place of their files
    result: List[object] = []
    for child in children:
        kind = _kind(child)
        if kind == NodeType.FILE:
            key = _file_key(child, config)
            if key in matched and files_by_key[key] is child:
                # Entries come from the host as-is; keep the same objects.
                result.append(CompositeEntry.model_construct(file=child, directory=dirs_by_key[key]))
                continue
        elif kind == NodeType.DIRECTORY:
            key = _dir_key(child)
            if key in matched:
                continue
        result.append(child)

    logger.debug("Nested %d director%s", len(matched), "y" if len(matched) == 1 else "ies")
    return result
