from fastapi import Request

from ..config import Settings
from ..services.boot_script import BootConfiguration
from ..services.tree import TreeNode


def get_root(request: Request) -> TreeNode:
    return request.app.state.image.root


def get_boot_config(request: Request) -> BootConfiguration:
    return request.app.state.boot_config


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
