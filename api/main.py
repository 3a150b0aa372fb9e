import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.routes.flute import router as flute_router
from api.routes.metronome import router as metronome_router
from api.routes.tools import router as tools_router
from infrastructure.metrics import get_metrics_response

load_dotenv()

# Local dev servers for the workshop UI; override with a comma-separated CORS_ORIGINS
_DEFAULT_ORIGINS = (
    "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"
)

app = FastAPI(title="Shakuhachi Workshop")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",")
        if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(flute_router)
app.include_router(metronome_router)
app.include_router(tools_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
