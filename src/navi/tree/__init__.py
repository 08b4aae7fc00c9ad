"""Space and Journal tree stores."""

from __future__ import annotations

from navi.tree.base import (
    HasChildren,
    IntegrityError,
    InvalidArgument,
    NavError,
    NotFound,
    TreeStore,
)
from navi.tree.journals import JournalNode, JournalTree, ParentRef
from navi.tree.spaces import SpaceNode, SpaceTree

__all__ = [
    "HasChildren",
    "IntegrityError",
    "InvalidArgument",
    "JournalNode",
    "JournalTree",
    "NavError",
    "NotFound",
    "ParentRef",
    "SpaceNode",
    "SpaceTree",
    "TreeStore",
]
