from fastapi import APIRouter, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest


def metrics_router(path: str) -> APIRouter:
    """Metrics endpoints under ``path``; registered only when configured."""
    router = APIRouter(prefix=path.rstrip("/"), tags=["Metrics"])

    @router.get("")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @router.get("/handle-pool")
    def handle_pool_metrics(request: Request):
        """Get image handle pool metrics."""
        return request.app.state.image.pool.get_metrics()

    return router
