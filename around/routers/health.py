from datetime import datetime

from fastapi import APIRouter, Depends

from around.config import Settings
from around.core.deps import get_settings
from around.services.metrics import metrics_endpoint

router = APIRouter(tags=["ops"])


@router.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@router.get("/metrics")
async def prometheus_metrics(settings: Settings = Depends(get_settings)):
    return metrics_endpoint(settings.METRICS_ENABLED)
