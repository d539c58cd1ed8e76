from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from pathlib import Path
from .routers import events, status
from .middleware import api_key_middleware, rate_limit_middleware, logging_middleware
from apscheduler.schedulers.background import BackgroundScheduler
from .config import settings, load_monitor_config
from .dependencies import get_tracker, tracker_lock
from .services.checker import SiteChecker

# Scheduler is created here but started on application startup to avoid
# duplicate jobs when Uvicorn's auto-reload restarts the process.
scheduler = BackgroundScheduler()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)

logger = logging.getLogger(__name__)


def run_checks():
    """Scheduled job: check every configured site once."""
    try:
        config = load_monitor_config(settings.SITES_CONFIG)
    except FileNotFoundError:
        logger.warning(f"⚠️ Sites config {settings.SITES_CONFIG} not found, skipping check run")
        return

    checker = SiteChecker(config, get_tracker(), record_lock=tracker_lock)
    try:
        outcomes = checker.check_all_sites()
    finally:
        checker.client.close()
    failed = sum(1 for o in outcomes if not o.ok)
    logger.info(f"Check run finished: {len(outcomes) - failed}/{len(outcomes)} sites up")


app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware runs in reverse registration order:
# logging (outermost) -> rate limiting -> API key check (innermost)
app.middleware("http")(api_key_middleware)
app.middleware("http")(rate_limit_middleware)
app.middleware("http")(logging_middleware)

app.include_router(status.router, prefix="/api", tags=["Status"])
app.include_router(events.router, prefix="/events", tags=["Events"])


@app.get("/")
def root():
    return {"message": f"{settings.PROJECT_NAME} running"}


@app.on_event("startup")
def start_scheduler():
    if settings.CHECK_INTERVAL_MINUTES <= 0:
        logger.info("Scheduled checks disabled (CHECK_INTERVAL_MINUTES=0)")
        return
    if not Path(settings.SITES_CONFIG).exists():
        logger.warning(f"⚠️ {settings.SITES_CONFIG} not found, scheduled checks disabled")
        return
    if not scheduler.running:
        scheduler.add_job(run_checks, "interval", minutes=settings.CHECK_INTERVAL_MINUTES, id="site_checks", replace_existing=True)
        scheduler.start()


@app.on_event("shutdown")
def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
