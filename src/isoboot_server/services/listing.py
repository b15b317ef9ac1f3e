from __future__ import annotations

import html
from collections.abc import Iterable, Iterator
from urllib.parse import quote

from .tree import TreeNode, split_path


def child_link(request_path: str, name: str) -> str:
    """Absolute link to ``name`` inside the directory at ``request_path``."""
    return "/" + "/".join([*split_path(request_path), name])


def render_listing(request_path: str, children: Iterable[TreeNode]) -> Iterator[str]:
    """Yield an HTML listing, one fragment per child, in enumeration order."""
    yield "<html><body><ul>"
    for child in children:
        href = quote(child_link(request_path, child.name))
        yield f'<li><a href="{href}">{html.escape(child.name)}</a></li>'
    yield "</ul></body></html>"
