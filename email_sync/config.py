"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Store
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'email_sync.db'}")

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "email_sync.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Sync limits
SYNC_MAX_THREADS = int(os.getenv("SYNC_MAX_THREADS", "50"))
# Bounded listing used when the history cursor has expired server-side
SYNC_FALLBACK_MAX_THREADS = int(os.getenv("SYNC_FALLBACK_MAX_THREADS", "20"))
# Per-account deadline for tenant-wide runs; 0 disables it
SYNC_ACCOUNT_TIMEOUT_SECONDS = float(os.getenv("SYNC_ACCOUNT_TIMEOUT_SECONDS", "0"))

# Mock gateway fixture (CLI demo)
MOCK_MAILBOX_PATH = Path(os.getenv("MOCK_MAILBOX_PATH", str(DATA_DIR / "mailboxes.json")))

# OpenTelemetry
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTEL_EXPORTER_ENDPOINT = os.getenv("OTEL_EXPORTER_ENDPOINT", "http://localhost:4318/v1/traces")
SERVICE_NAME = os.getenv("SERVICE_NAME", "email-sync")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")
