"""
In-memory image for testing purposes.

Builds an :class:`IsoTree` from nested mappings so the resolver, renderer
and API can be exercised without an ISO file. File contents are laid out
back to back in one buffer that every pooled handle reads from, the same
way extents share one image file.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Union

from .handle_pool import ImageHandlePool
from .iso_image import IsoTree
from .tree import TreeNode


@dataclass(frozen=True)
class UnreadableDirectory:
    """Directory whose entries failed to load."""

    reason: str = "unreadable directory"


Entry = Union[bytes, UnreadableDirectory, dict]


def build_memory_image(entries: dict[str, Entry], max_idle: int = 8) -> IsoTree:
    blob = bytearray()
    frozen: list[bytes] = []
    pool = ImageHandlePool(lambda: io.BytesIO(frozen[0]), max_idle=max_idle)

    def build(name: str, value: Entry) -> TreeNode:
        if isinstance(value, UnreadableDirectory):
            return TreeNode(name=name, is_dir=True, load_error=value.reason)
        if isinstance(value, dict):
            children = tuple(build(child, child_value) for child, child_value in value.items())
            return TreeNode(name=name, is_dir=True, children=children)
        offset = len(blob)
        blob.extend(value)
        return TreeNode(name=name, is_dir=False, offset=offset, size=len(value), source=pool)

    root = build("", entries)
    frozen.append(bytes(blob))
    return IsoTree(path="<memory>", root=root, facet="memory", pool=pool)
