"""ASGI entry point: ``uvicorn eqtracker.main:app``."""

from prometheus_fastapi_instrumentator import Instrumentator

from .core.config import settings
from .core.logging import setup_logging
from . import app

setup_logging()
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, include_in_schema=False)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("eqtracker.main:app", host=settings.HOST, port=settings.PORT)
