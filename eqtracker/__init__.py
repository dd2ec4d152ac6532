"""Application wiring for the club equipment checkout service.

Importing this package builds the FastAPI app: tables are created and
upgraded, middleware and exception handlers are installed and every API
router is mounted. ``eqtracker.main`` adds logging and metrics on top.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.errors import register_exception_handlers
from .db.migrate import run_migrations
from .db.session import Base, engine
from .middlewares import RequestContextMiddleware

# Registers the tables with ``Base.metadata``.
from .models import checkout as _checkout  # noqa: F401
from .models import deficiency as _deficiency  # noqa: F401
from .models import equipment as _equipment  # noqa: F401
from .models import user as _user  # noqa: F401

app = FastAPI(title=settings.APP_NAME)

# ---------- DB init/migrations ----------
Base.metadata.create_all(bind=engine)
run_migrations(engine)

# ---------- Middleware ----------
app.add_middleware(RequestContextMiddleware)
if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)

# ---------- Routers ----------
from .routers import api_auth as api_auth_router  # noqa: E402

app.include_router(api_auth_router.router)

from .routers import api_equipment as api_equipment_router  # noqa: E402

app.include_router(api_equipment_router.router)

from .routers import api_checkouts as api_checkouts_router  # noqa: E402

app.include_router(api_checkouts_router.router)

from .routers import api_deficiencies as api_deficiencies_router  # noqa: E402

app.include_router(api_deficiencies_router.router)

from .routers import api_reports as api_reports_router  # noqa: E402

app.include_router(api_reports_router.router)


@app.get("/health", tags=["meta"])
async def health() -> dict[str, bool]:
    return {"ok": True}


__all__ = ["app"]
