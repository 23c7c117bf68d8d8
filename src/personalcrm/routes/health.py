from __future__ import annotations

import os
from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "environment": os.environ.get("ENVIRONMENT") or "development",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
