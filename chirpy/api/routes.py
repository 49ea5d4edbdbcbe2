"""Health and admin endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

router = APIRouter()

METRICS_TEMPLATE = """<html>

<body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
</body>

</html>"""


@router.get("/api/healthz", response_class=PlainTextResponse)
def readiness() -> str:
    """Readiness probe."""
    return "OK"


@router.get("/admin/metrics", response_class=HTMLResponse)
def metrics(request: Request) -> str:
    """Admin page showing how many API requests the server has handled."""
    return METRICS_TEMPLATE.format(hits=request.app.state.hit_counter.hits)


@router.post("/admin/reset")
def reset_metrics(request: Request) -> dict:
    """Reset the API hit counter."""
    request.app.state.hit_counter.reset()
    return {"hits": 0}
