import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from accounts.api.exception_handlers import register_exception_handlers
from accounts.api.v1.router import api_router
from accounts.core.config import settings
from accounts.db import SessionLocal
from accounts.services.file import create_folders, profile_folder
from accounts.services.token_cleanup import TokenCleanupScheduler

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create upload folders and run the token cleanup for the life of the process."""
    create_folders()
    cleanup = TokenCleanupScheduler(
        SessionLocal,
        interval=settings.token_cleanup_interval,
        expire_after=settings.token_expire_after,
    )
    cleanup.start()
    app.state.token_cleanup = cleanup
    try:
        yield
    finally:
        await cleanup.stop()


app = FastAPI(title="Accounts", lifespan=lifespan)

if settings.frontend_url:
    parsed = urlparse(settings.frontend_url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")
app.mount("/images", StaticFiles(directory=profile_folder(), check_dir=False), name="images")


@app.get("/health")
def health():
    return {"status": "ok"}
