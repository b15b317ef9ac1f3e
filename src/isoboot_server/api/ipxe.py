from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ..config import Settings
from ..services.boot_script import BootConfiguration, generate
from ..services.metrics import BOOT_SCRIPTS
from .deps import get_boot_config, get_settings

router = APIRouter(tags=["PXE"])


@router.get("/boot.ipxe")
def ipxe_script(
    request: Request,
    boot: BootConfiguration = Depends(get_boot_config),
    settings: Settings = Depends(get_settings),
):
    """iPXE script that boots the configured kernel and initrds from this server."""
    host = settings.boot_host or request.headers.get("host", request.url.netloc)
    script = generate(boot, host)
    if script is None:
        BOOT_SCRIPTS.labels(result="unconfigured").inc()
        raise HTTPException(status_code=404, detail="Not Found")

    BOOT_SCRIPTS.labels(result="ok").inc()
    structlog.get_logger().info("boot_script", host=host, initrds=len(boot.initrds))
    return PlainTextResponse(script, media_type="text/plain")
