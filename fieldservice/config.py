import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./fieldservice.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Cloudflare R2 Configuration (job photos)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "job-photos")
PHOTO_MAX_BYTES = int(os.getenv("PHOTO_MAX_BYTES", str(10 * 1024 * 1024)))

# Location tracking
LOCATION_MIN_DISTANCE_METERS = float(os.getenv("LOCATION_MIN_DISTANCE_METERS", "10"))
LOCATION_UPDATE_INTERVAL_SECONDS = float(os.getenv("LOCATION_UPDATE_INTERVAL_SECONDS", "60"))
# Rows older than this are purged by the worker cron
LOCATION_RETENTION_DAYS = int(os.getenv("LOCATION_RETENTION_DAYS", "30"))

# Job listing pagination
JOBS_PAGE_LIMIT_DEFAULT = int(os.getenv("JOBS_PAGE_LIMIT_DEFAULT", "50"))
JOBS_PAGE_LIMIT_MAX = int(os.getenv("JOBS_PAGE_LIMIT_MAX", "200"))

# Frontend / CORS
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
