"""Health check endpoints"""
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from chirpy.database import DocumentStore, get_db
from chirpy.exceptions import StoreError

router = APIRouter(tags=["health"])

# Track startup time
STARTUP_TIME = time.time()


@router.get("/api/healthz", response_class=PlainTextResponse)
def healthz() -> str:
    """Liveness probe: 200 while the process is up"""
    return "OK"


@router.get("/api/healthz/ready")
def readiness_check(db: DocumentStore = Depends(get_db)):
    """
    Readiness check - verifies the database file can be loaded

    Returns 200 if ready to serve traffic, 503 if not ready
    """
    checks: Dict[str, Any] = {"database": False, "database_latency_ms": None}

    try:
        start = time.time()
        doc = db.load()
        checks["database"] = True
        checks["database_latency_ms"] = round((time.time() - start) * 1000, 2)
    except StoreError as e:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "checks": checks, "message": f"Database check failed: {e}"},
        )

    return {
        "status": "ready",
        "checks": checks,
        "counts": {
            "users": len(doc.users),
            "chirps": len(doc.chirps),
            "revoked_tokens": len(doc.revoked_tokens),
        },
        "uptime_seconds": round(time.time() - STARTUP_TIME, 2),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
