"""
config.py
Runtime settings (read from the environment, optionally via a .env file).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# Backend REST API
API_BASE_URL = os.getenv("ADMIN_API_BASE_URL", "http://localhost:5000").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("ADMIN_API_TIMEOUT", "10"))

# Server-side page size for the clients list
PAGE_SIZE = 25

# Only used for the dashboard label; the backend decides what "soon" means
EXPIRING_SOON_DAYS = 30

LOG_LEVEL = os.getenv("ADMIN_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("ADMIN_LOG_FILE") or None
