"""Read-only directory tree of an image and request path resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from .handle_pool import ImageHandlePool

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class TreeError(Exception):
    """A node's children or content cannot be read."""


@dataclass(frozen=True)
class TreeNode:
    """A file or directory inside the image.

    Directories carry ``children`` and no extent; files carry an extent
    (``offset``/``size`` in bytes from the start of the image) and no
    children. ``load_error`` is set on a directory whose entries could not
    be read when the tree was built.
    """

    name: str
    is_dir: bool
    children: tuple[TreeNode, ...] = ()
    offset: int = 0
    size: int = 0
    source: ImageHandlePool | None = field(default=None, repr=False, compare=False)
    load_error: str | None = None

    def list_children(self) -> tuple[TreeNode, ...]:
        if not self.is_dir:
            raise TreeError(f"{self.name!r} is not a directory")
        if self.load_error is not None:
            raise TreeError(f"Cannot list {self.name!r}: {self.load_error}")
        return self.children

    def iter_content(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the file's bytes in order, reading through a private handle."""
        if self.is_dir:
            raise TreeError(f"{self.name!r} is a directory")
        remaining = self.size
        if remaining == 0:
            return
        if self.source is None:
            raise TreeError(f"{self.name!r} has no content source")

        with self.source.checkout() as fp:
            fp.seek(self.offset)
            while remaining > 0:
                chunk = fp.read(min(chunk_size, remaining))
                if not chunk:
                    raise TreeError(f"Short read on {self.name!r}: {remaining} bytes missing")
                remaining -= len(chunk)
                yield chunk


def split_path(request_path: str) -> list[str]:
    return [part for part in request_path.split("/") if part]


def resolve(root: TreeNode, request_path: str) -> TreeNode | None:
    """Walk ``request_path`` from ``root``; ``None`` means not found.

    A node whose children cannot be listed is treated exactly like a
    missing segment.
    """
    current = root
    for part in split_path(request_path):
        try:
            children = current.list_children()
        except TreeError as exc:
            logger.debug("Resolution of %r stopped at %r: %s", request_path, current.name, exc)
            return None

        for child in children:
            if child.name == part:
                current = child
                break
        else:
            return None
    return current
