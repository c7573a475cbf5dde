"""Taskbridge application: the REST resources and the /graphql endpoint on one FastAPI app.

Run directly (``python src/api/main.py``) or through uvicorn.
"""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# .env must be loaded before the token issuer and user service read their settings
load_dotenv()

SRC_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(SRC_DIR))

from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes
from api.errors import register_error_handlers
from api.gql.schema import graphql_router
from api.routes import health, sessions, tasks, users
from utils.logging import setup_structured_logging

setup_structured_logging()
logger = logging.getLogger(__name__)

SERVICE_NAME = "Taskbridge API"


def _read_version() -> str:
    with open(SRC_DIR.parent / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]["version"]


VERSION = _read_version()


def _cors_settings() -> tuple[list[str], bool]:
    """Origins from CORS_ORIGINS (comma separated). A wildcard disables credentials."""
    raw = os.getenv("CORS_ORIGINS", "*").strip()
    if raw == "*":
        logger.warning("CORS allows any origin; set CORS_ORIGINS for production deployments")
        return ["*"], False
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    logger.info("CORS restricted", extra={"origins": origins})
    return origins, True


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = get_mongodb_client()
    if client is None:
        logger.warning("MongoDB unavailable at startup; requests needing the store will get 503")
    elif not ensure_all_indexes(client[DATABASE_NAME]):
        logger.warning("Some MongoDB indexes could not be created")
    else:
        logger.info("MongoDB indexes ready", extra={"database": DATABASE_NAME})
    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Users and tasks over equivalent REST and GraphQL APIs",
    version=VERSION,
    lifespan=lifespan,
)

_origins, _allow_credentials = _cors_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

for router in (users.router, sessions.router, tasks.router, health.router):
    app.include_router(router)
app.include_router(graphql_router, prefix="/graphql", tags=["graphql"])


@app.get("/")
def root():
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "graphql": "/graphql",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")), access_log=False)
