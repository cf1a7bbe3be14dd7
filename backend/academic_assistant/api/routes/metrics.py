"""Prometheus metrics endpoint."""
from fastapi import APIRouter
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

router = APIRouter()


def metrics_response() -> Response:
    """Render the default registry in the Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/metrics")
async def get_metrics():
    """
    Get upload, processing and question answering metrics.

    Returns:
        Prometheus metrics in text format
    """
    return metrics_response()
