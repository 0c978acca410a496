from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter

router: APIRouter = APIRouter(tags=["health"])


def _status() -> Dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/")
def root() -> Dict[str, str]:
    return _status()


@router.get("/api/health")
def health() -> Dict[str, str]:
    return _status()
