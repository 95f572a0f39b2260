"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "job_portal")
DB_USER: str = os.getenv("DB_USER", "postgres")
DB_PASS: str = os.getenv("DB_PASS", "")

# Server-scoped connections still need a database to land in.
DB_MAINTENANCE_NAME: str = os.getenv("DB_MAINTENANCE_NAME", "postgres")

# ── Background tasks ──────────────────────────────────────
# 0 workers means one thread per task with no upper bound.
TASK_MAX_WORKERS: int = int(os.getenv("TASK_MAX_WORKERS", "8"))
TASK_QUEUE_SIZE: int = int(os.getenv("TASK_QUEUE_SIZE", "32"))

# ── Employer posting the jobs ─────────────────────────────
EMPLOYER_NAME: str = os.getenv("EMPLOYER_NAME", "CompanyXYZ")
EMPLOYER_EMAIL: str = os.getenv("EMPLOYER_EMAIL", "hr@companyxyz.com")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
