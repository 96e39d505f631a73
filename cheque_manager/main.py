import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import models  # noqa: F401 - register tables with Base
from .config import ALLOWED_ORIGINS, APP_ENV, FRONTEND_BUILD_DIR
from .database import Base, engine
from .domain.cash.router import router as cash_router
from .domain.cheques.router import router as cheques_router
from .domain.dashboard.router import router as dashboard_router
from .domain.exports.router import router as export_router
from .domain.payments.router import router as payments_router
from .domain.settings.router import router as settings_router
from .errors import register_exception_handlers
from .routes.diagnostics import router as diagnostics_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Cheque Management API", version="1.0.0", lifespan=lifespan)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms")
    return response


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
api_router = APIRouter(prefix="/api")
api_router.include_router(cheques_router)
api_router.include_router(cash_router)
api_router.include_router(dashboard_router)
api_router.include_router(export_router)
api_router.include_router(payments_router)
api_router.include_router(settings_router)
api_router.include_router(diagnostics_router)
app.include_router(api_router)


API_ENDPOINTS = {
    "cheques": {
        "POST /api/cheques": "Record a cheque",
        "GET /api/cheques": "List cheques (status, page, limit)",
        "GET /api/cheques/calendar": "Cheques due in a month (month=YYYY-MM)",
        "GET /api/cheques/{id}": "Get a cheque",
        "PUT /api/cheques/{id}": "Update a cheque",
        "PATCH /api/cheques/{id}/status": "Change cheque status",
        "DELETE /api/cheques/{id}": "Delete a cheque",
    },
    "cash": {
        "POST /api/cash": "Record a cash receipt",
        "GET /api/cash": "List cash records (page, limit, startDate, endDate, reference_person)",
        "GET /api/cash/total": "Total cash (start_date, end_date)",
        "GET /api/cash/{id}": "Get a cash record",
        "PUT /api/cash/{id}": "Update a cash record",
        "DELETE /api/cash/{id}": "Delete a cash record",
    },
    "dashboard": {
        "GET /api/dashboard/summary": "Headline totals",
        "GET /api/dashboard/pending-cheques": "Next pending cheques",
        "GET /api/dashboard/bounced-cheques": "Bounced cheques",
        "GET /api/dashboard/cash-today": "Cash collected today",
        "GET /api/dashboard/payment-status": "Receipts against an invoice (invoice_id)",
        "GET /api/dashboard/monthly-stats": "Per-month activity (year)",
        "GET /api/dashboard/trends": "Cleared/bounced trends (months)",
        "GET /api/dashboard/status-breakdown": "Cheques by status",
        "GET /api/dashboard/top-payers": "Largest payers (limit)",
        "GET /api/dashboard/key-metrics": "Collection metrics",
    },
    "export": {
        "GET /api/export/all-cheques": "All cheques as CSV (format=csv)",
        "GET /api/export/cash-records": "Cash records as CSV (format=csv, month)",
        "GET /api/export/pending-cheques": "Pending cheques as CSV (format=csv)",
        "GET /api/export/summary-report": "Summary report as CSV (format=csv, month)",
    },
    "payments": {
        "POST /api/payments/create-order": "Create a payment order",
        "POST /api/payments/verify": "Verify a payment signature",
        "GET /api/payments/orders": "List payment orders",
        "GET /api/payments/orders/{orderId}": "Get a payment order",
        "POST /api/payments/webhook": "Payment gateway webhook",
        "GET /api/payments/config": "Public checkout configuration",
    },
    "settings": {
        "GET /api/user/settings": "Get user settings",
        "PUT /api/user/settings": "Update user settings",
        "POST /api/user/settings/reset": "Reset user settings",
    },
    "diagnostics": {
        "GET /api/test/send-email": "Send a sample reminder e-mail",
        "GET /api/test/reminder-status": "Reminder job status",
        "POST /api/test/trigger-reminders": "Run the reminder job now",
    },
}


@app.get("/")
def root():
    return {
        "message": "Cheque Management API is running",
        "version": app.version,
        "endpoints": API_ENDPOINTS,
        "health": "/health",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": APP_ENV,
    }


# Pre-built frontend bundle, served last so it never shadows the API
if FRONTEND_BUILD_DIR and Path(FRONTEND_BUILD_DIR).is_dir():
    app.mount("/app", StaticFiles(directory=FRONTEND_BUILD_DIR, html=True), name="frontend")
    logger.info(f"Serving frontend from {FRONTEND_BUILD_DIR}")
