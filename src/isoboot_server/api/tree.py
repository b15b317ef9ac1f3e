from __future__ import annotations

from collections.abc import Iterator

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from ..config import Settings
from ..services.listing import render_listing
from ..services.metrics import BYTES_SERVED
from ..services.tree import TreeError, TreeNode, resolve
from .deps import get_root, get_settings

router = APIRouter(tags=["Image"])


def _count_bytes(chunks: Iterator[bytes]) -> Iterator[bytes]:
    for chunk in chunks:
        BYTES_SERVED.inc(len(chunk))
        yield chunk


@router.get("/{request_path:path}")
def browse(
    request_path: str,
    root: TreeNode = Depends(get_root),
    settings: Settings = Depends(get_settings),
):
    """Directory listing or raw file content for a path inside the image."""
    node = resolve(root, request_path)
    if node is None:
        raise HTTPException(status_code=404, detail="Not Found")

    if node.is_dir:
        try:
            children = node.list_children()
        except TreeError as exc:
            raise HTTPException(status_code=500, detail="Failed to get directory children") from exc
        return StreamingResponse(
            render_listing(request_path, children),
            media_type="text/html; charset=utf-8",
        )

    return StreamingResponse(
        _count_bytes(node.iter_content(settings.chunk_size)),
        media_type="application/octet-stream",
    )
