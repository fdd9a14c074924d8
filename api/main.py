from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import errors, logging_config, schema, settings
from core.db import Database, get_database
from guests import router as guests_router
from layouts import router as layouts_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging_config.setup_logging(settings.log_level())
    # One pool per process, handed to handlers through `get_database`.
    database = await Database.connect()
    try:
        if settings.auto_create_schema():
            await schema.ensure_schema(database)
        app.state.database = database
        yield
    finally:
        app.state.database = None
        await database.close()


app = FastAPI(lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.register_exception_handlers(app)

app.include_router(layouts_router.router, tags=["layouts"])
app.include_router(guests_router.router, tags=["guests"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/debug/db", include_in_schema=False)
async def debug_db(database: Database = Depends(get_database)):
    """
    Connectivity check. Echoes the driver's error message on failure, so it
    is only served when DEBUG_ENDPOINTS is set.
    """
    if not settings.debug_endpoints_enabled():
        return errors.error_response(404, "Not Found")
    try:
        await database.ping()
    except errors.StoreError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc.__cause__ or exc)})
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "seating planner api"}
