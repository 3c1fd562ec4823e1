import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.database import Base, SessionLocal, engine
from app.config import settings
from app.core import genai_client
from app.core.activity_log import log_activity
from app.core.errors import FamilyTreeError
from app.seed import seed_database
from app.utils.request_info import client_browser, client_ip

# Import models so SQLAlchemy registers tables
from app.models import (
    person,
    user,
    activity_log,
)

# Routers
from app.routers import (
    auth_router,
    tree_router,
    contributors_router,
    logs_router,
    geo_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -----------------------
# CREATE APP
# -----------------------
app = FastAPI(
    title="Family Tree API",
    description="Backend API for the family tree: people, relationships and activity logs.",
    version="1.0.0",
)
logger.info("DATABASE URL: %s", settings.DATABASE_URL)

# -----------------------
# CORS (ONLY ONCE)
# -----------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------
# DATABASE TABLES + SEED
# -----------------------
def init_db():
    Base.metadata.create_all(bind=engine)

    if settings.SEED_DATABASE:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()


init_db()


# -----------------------
# ERRORS
# -----------------------
@app.exception_handler(FamilyTreeError)
def family_tree_error_handler(request: Request, exc: FamilyTreeError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# -----------------------
# VISIT LOGGING
# -----------------------
def record_visit(ip: str | None, path: str, browser: str):
    db = SessionLocal()
    try:
        city = genai_client.city_from_ip(ip)
        log_activity(db, ip, "VISIT", f"Visited {path}", city=city, browser=browser)
    finally:
        db.close()


@app.middleware("http")
async def visit_logger(request: Request, call_next):
    # Page loads only; the client's own API calls are not visits
    if request.method == "GET" and not request.url.path.startswith("/api"):
        try:
            await run_in_threadpool(
                record_visit,
                client_ip(request),
                request.url.path,
                client_browser(request),
            )
        except Exception as e:
            logger.error("Error in visitor logging middleware: %s", e)

    return await call_next(request)


# -----------------------
# ROUTES
# -----------------------
app.include_router(auth_router.router)
app.include_router(tree_router.router)
app.include_router(contributors_router.router)
app.include_router(logs_router.router)
app.include_router(geo_router.router)


# -----------------------
# HEALTH CHECK
# -----------------------
@app.get("/")
def root():
    return {"message": "Family Tree API is running!"}
