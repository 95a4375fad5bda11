"""
Runtime settings, read from the environment (a local .env is honoured).
"""

import os

from dotenv import load_dotenv

load_dotenv()

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", 8000))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Passed straight to httpx; the auditor adds no timeout or retry of its own.
FETCH_TIMEOUT = float(os.environ.get("FETCH_TIMEOUT", 15.0))
