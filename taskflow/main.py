# taskflow/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from taskflow.api.api import api_router
from taskflow.core.config import settings
from taskflow.core.errors import register_exception_handlers
from taskflow.core.log_config import configure_logging
from taskflow.db import models, session

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    models.Base.metadata.create_all(bind=session.engine)
    logger.info("Database ready")
    yield

def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="TaskFlow API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("Incoming request: %s %s", request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the TaskFlow API"}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("taskflow.main:app", host="0.0.0.0", port=settings.PORT)
