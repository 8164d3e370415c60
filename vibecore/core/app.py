from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vibecore.api.main import api_router

from .config import settings
from .version import __version__

app = FastAPI(
    title="vibecore",
    description="Preference profiling, content clustering and context-aware ranking for a local video library",
    version=__version__,
    docs_url=None if settings.APP_ENV != "development" else "/docs",
    redoc_url=None if settings.APP_ENV != "development" else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
