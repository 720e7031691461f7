from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from loca.api.middleware.request_log import RequestLogMiddleware
from loca.api.routes import api_router
from loca.core.config import settings
from loca.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    logger.info("%s started (env=%s)", settings.app_name, settings.app_env)
    if settings.demo_mode:
        logger.info("In demo mode (undeliverable mail is reported, not raised)")
    if not settings.emailer_url:
        logger.warning("EMAILER_URL is not set, every notification will fail")
    yield


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Unresolved-Tenants"],
)
app.add_middleware(RequestLogMiddleware)

app.include_router(api_router)


@app.get("/", tags=["health"])
async def root() -> dict[str, str]:
    return {"message": f"{settings.app_name} ready"}
