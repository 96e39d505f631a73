import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

APP_ENV = os.getenv("APP_ENV", "development")
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")
PORT = int(os.getenv("PORT", "5000"))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cheque_management.db")

# Base URL used for links inside notification e-mails
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", f"http://localhost:{PORT}")

# Optional pre-built frontend bundle (Next.js static export)
FRONTEND_BUILD_DIR = os.getenv("FRONTEND_BUILD_DIR")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:3001,http://localhost:5000",
).split(",")

COMPANY_NAME = os.getenv("COMPANY_NAME", "Cheque Management System")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv(
    "EMAIL_FROM_ADDRESS", "Cheque Management System <onboarding@resend.dev>"
)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


# Reminder job
ENABLE_REMINDERS = os.getenv("ENABLE_REMINDERS", "false").lower() == "true"
REMINDER_EMAIL = os.getenv("REMINDER_EMAIL")
REMINDER_DAYS_BEFORE = _int_env("REMINDER_DAYS_BEFORE", 3)
REMINDER_TIME = os.getenv("REMINDER_TIME", "09:00")

# Razorpay Configuration
RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID")
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET")
RAZORPAY_WEBHOOK_SECRET = os.getenv("RAZORPAY_WEBHOOK_SECRET")
RAZORPAY_API_URL = os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "INR")
