"""Admin hit counter and reset endpoints"""
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse

from chirpy.config import settings
from chirpy.database import DocumentStore, get_db
from chirpy.middleware.monitoring import fileserver_hits
from chirpy.utils.logger import logger

router = APIRouter(tags=["admin"])

_METRICS_PAGE = (
    "<html><body><h1>Welcome, Chirpy Admin</h1>"
    "<p>Chirpy has been visited {hits} times!</p></body></html>"
)


@router.get("/admin/metrics", response_class=HTMLResponse)
def admin_metrics() -> str:
    """Report how many times the static site has been visited"""
    return _METRICS_PAGE.format(hits=fileserver_hits.hits)


@router.post("/api/reset", response_class=PlainTextResponse)
def reset(db: DocumentStore = Depends(get_db)) -> str:
    """
    Reset the hit counter

    With ``DEV_MODE`` enabled the database is wiped too.
    """
    fileserver_hits.reset()
    if settings.DEV_MODE:
        db.reset()
    logger.info("Hits reset", extra={"action": "reset"})
    return "Hits reset\n"
