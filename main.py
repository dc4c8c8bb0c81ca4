from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging
import os
from dotenv import load_dotenv
from contextlib import asynccontextmanager

from config import settings
from core.logging import setup_logging
from routes import root, github, health
from dependencies import get_client

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = get_client()

    client.pre_resolve_domain()

    yield

    client.close()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(root.router)
app.include_router(github.router)
app.include_router(health.router)

if __name__ == "__main__":
    import uvicorn

    APP_HOST = os.getenv("HOST", settings.HOST)
    APP_PORT = int(os.getenv("PORT", settings.PORT))

    uvicorn.run(
        app,
        host=APP_HOST,
        port=APP_PORT,
        access_log=True,
        reload=False,
        workers=1,
        loop="uvloop",
        limit_concurrency=1000,
        limit_max_requests=10000
    )
