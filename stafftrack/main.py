# stafftrack/main.py

from uuid import UUID

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
import sys
import time
import psutil
import uvicorn

from stafftrack.core.database import test_connection, init_db, AsyncSessionLocal
from stafftrack.core.config import settings
from stafftrack.api.deps import get_policy
from stafftrack.models.enums import AppRole
from stafftrack.schemas.user_role import RoleRecordUpsert
from stafftrack.services.role_service import get_role_record, upsert_role_record

# Routers
from stafftrack.api.endpoints import (
    me as me_router,
    roles as roles_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    level="DEBUG" if settings.ENV == "dev" else "INFO",
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV == "dev",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="StaffTrack Authorization Backend",
    version="1.0.0",
    description="Role and department authorization for the StaffTrack dashboard.",
)

START_TIME = time.time()


# ------------------------------------------------------------
# METRICS API
# ------------------------------------------------------------
@app.get("/api/metrics", tags=["System"])
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent

    db_start = time.time()
    db_latency = 0
    try:
        await test_connection()
        current_db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception as e:
        logger.error(f"Health check: database ping failed: {e}")
        current_db_status = "Error"

    return {
        "status": "Online",
        "version": app.version,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "uptime": uptime_seconds,
        "database": current_db_status,
        "db_latency": db_latency,
    }


# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(me_router.router)
app.include_router(roles_router.router)


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
async def seed_super_admin() -> None:
    if not settings.SUPER_ADMIN_USER_ID:
        logger.warning("SUPER_ADMIN_USER_ID not set. Skipping admin seeding.")
        return

    user_id = UUID(settings.SUPER_ADMIN_USER_ID)
    async with AsyncSessionLocal() as session:
        existing = await get_role_record(session, user_id)
        if existing and existing.role == AppRole.Admin:
            logger.info("Super Admin role already exists. Skipping.")
            return

        logger.info(f"Seeding Super Admin role for {user_id}")
        # promote in place; existing department grants are kept
        await upsert_role_record(
            session,
            user_id,
            RoleRecordUpsert(
                role=AppRole.Admin,
                department_access=existing.department_access if existing else [],
                department_edit_access=existing.department_edit_access if existing else [],
            ),
        )
        logger.success("Super Admin role created successfully.")


@app.on_event("startup")
async def on_startup():
    logger.info("Starting StaffTrack Authorization Backend...")

    # 1) Policy tables: a broken policy file must stop the boot
    policy = get_policy()
    logger.info(f"Policy ready: {policy!r}")

    # 2) Database connection test
    try:
        await test_connection()
        logger.success("Database connection established.")
    except Exception:
        logger.exception("Database connection failed. Role lookups will return 503.")
        return

    # 3) Tables + seed
    try:
        await init_db()
        logger.success("Database tables ready.")
        await seed_super_admin()
    except Exception:
        logger.exception("Database initialisation failed.")

    logger.success("Backend startup completed successfully.")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "StaffTrack Authorization Backend",
        "version": app.version,
    }


def run() -> None:
    """Entry point for the `stafftrack` console script."""
    uvicorn.run(
        "stafftrack.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENV == "dev",
    )
