"""Load an ISO 9660 image into an immutable :class:`TreeNode` tree.

The whole directory hierarchy is materialized once, when the image is
opened. Afterwards pycdlib is no longer involved: file content is read
straight from the image file through an :class:`ImageHandlePool`, using the
extent location recorded for each file.

Names come from the richest naming facet the image carries: Rock Ridge,
then Joliet, then plain ISO 9660 identifiers (with the ``;1`` version
suffix and the empty-extension dot removed).
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any

import pycdlib
from pycdlib.pycdlibexception import PyCdlibException

from .handle_pool import ImageHandlePool
from .tree import TreeNode

logger = logging.getLogger(__name__)

FACET_PATH_ARG = {
    "rock_ridge": "rr_path",
    "joliet": "joliet_path",
    "iso9660": "iso_path",
}


class ImageError(Exception):
    """The disc image cannot be opened or parsed."""


@dataclass
class IsoTree:
    path: str
    root: TreeNode
    facet: str
    pool: ImageHandlePool

    def close(self) -> None:
        self.pool.close_all()


def _pick_facet(iso: pycdlib.PyCdlib) -> str:
    if iso.has_rock_ridge():
        return "rock_ridge"
    if iso.has_joliet():
        return "joliet"
    return "iso9660"


def _strip_version(identifier: str) -> str:
    name = identifier.split(";", 1)[0]
    if name.endswith("."):
        name = name[:-1]
    return name


def record_name(record: Any, facet: str) -> str:
    if facet == "rock_ridge" and record.rock_ridge is not None:
        rr_name = record.rock_ridge.name()
        if rr_name:
            return rr_name.decode("utf-8", errors="replace")

    identifier = record.file_identifier()
    if facet == "joliet":
        return _strip_version(identifier.decode("utf-16_be", errors="replace"))
    return _strip_version(identifier.decode("ascii", errors="replace"))


def _build_node(record: Any, name: str, facet: str, block_size: int, pool: ImageHandlePool) -> TreeNode:
    if not record.is_dir():
        return TreeNode(
            name=name,
            is_dir=False,
            offset=record.extent_location() * block_size,
            size=record.get_data_length(),
            source=pool,
        )

    try:
        entries = [
            (child, record_name(child, facet))
            for child in record.children
            if not (child.is_dot() or child.is_dotdot())
        ]
    except PyCdlibException as exc:
        logger.warning("Failed to list directory %r: %s", name or "/", exc)
        return TreeNode(name=name, is_dir=True, load_error=str(exc))

    children = tuple(_build_node(child, child_name, facet, block_size, pool) for child, child_name in entries)
    return TreeNode(name=name, is_dir=True, children=children)


def load_iso_tree(path: str, max_idle: int = 8) -> IsoTree:
    """Open ``path`` with pycdlib and build its tree.

    Raises :class:`ImageError` if the file cannot be read or is not a valid
    ISO 9660 image.
    """
    iso = pycdlib.PyCdlib()
    try:
        iso.open(path)
    except (OSError, PyCdlibException) as exc:
        raise ImageError(f"Failed to read ISO image {path}: {exc}") from exc

    try:
        facet = _pick_facet(iso)
        block_size = iso.pvd.logical_block_size()
        root_record = iso.get_record(**{FACET_PATH_ARG[facet]: "/"})
        pool = ImageHandlePool(functools.partial(open, path, "rb"), max_idle=max_idle)
        root = _build_node(root_record, "", facet, block_size, pool)
    except PyCdlibException as exc:
        raise ImageError(f"Failed to read ISO image {path}: {exc}") from exc
    finally:
        iso.close()

    logger.info("Loaded ISO image %s (names from %s)", path, facet)
    return IsoTree(path=path, root=root, facet=facet, pool=pool)
