import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wc26.database import init_db
from wc26.routes import brackets, predictions, public

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

APP_NAME = "WC26 Bracket Prediction API"

app = FastAPI(title=APP_NAME)

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(predictions.router, prefix="/api", tags=["predictions"])
app.include_router(brackets.router, prefix="/api", tags=["brackets"])

# Public read-only endpoints (no auth)
app.include_router(public.router, prefix="/api", tags=["public"])


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info(f"{APP_NAME} started with {len(app.routes)} routes")


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify the service is up"""
    return {"app_name": APP_NAME, "status": "healthy"}
