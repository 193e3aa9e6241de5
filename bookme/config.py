import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bookme.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# Public base URL, used in links embedded in emails and push payloads
APP_URL = os.getenv("APP_URL", "http://localhost:3000")

# Shared secret for the external scheduler hitting /notifications/process
CRON_SECRET = os.getenv("CRON_SECRET")

# S3-compatible object storage
AWS_BUCKET_NAME = os.getenv("AWS_BUCKET_NAME", "bookme")
AWS_FOLDER_PREFIX = os.getenv("AWS_FOLDER_PREFIX", "")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
# Leave empty for AWS; set for R2/MinIO style endpoints
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL")

# Twilio SMS
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "BookMe <noreply@bookme.app>")

# Web Push (VAPID)
VAPID_PUBLIC_KEY = os.getenv("VAPID_PUBLIC_KEY")
VAPID_PRIVATE_KEY = os.getenv("VAPID_PRIVATE_KEY")
VAPID_SUBJECT = os.getenv("VAPID_SUBJECT", "mailto:admin@bookme.app")

# Chat assistant (OpenAI-compatible chat completions endpoint)
ABACUSAI_API_KEY = os.getenv("ABACUSAI_API_KEY")
CHAT_API_URL = os.getenv("CHAT_API_URL", "https://apps.abacus.ai/v1/chat/completions")
CHAT_MODEL = os.getenv("CHAT_MODEL", "gpt-4.1-mini")

# Reminder cron cadence for the arq worker
NOTIFICATION_INTERVAL_MINUTES = int(os.getenv("NOTIFICATION_INTERVAL_MINUTES", "5"))
