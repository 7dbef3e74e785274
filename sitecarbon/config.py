# config.py
import os

# ---------- server ----------
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 4000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PUBLIC_DIR = os.getenv("PUBLIC_DIR", "public")

# ---------- cache ----------
CACHE_TTL = int(os.getenv("CACHE_TTL", 3600))  # seconds
CACHE_BACKEND = os.getenv("CACHE_BACKEND", "memory")  # "memory"|"redis"
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# ---------- green hosting registry ----------
GREEN_CHECK_ENDPOINT = os.getenv(
    "GREEN_CHECK_ENDPOINT", "https://api.thegreenwebfoundation.org/api/v3/greencheck"
)
GREEN_CHECK_TIMEOUT = float(os.getenv("GREEN_CHECK_TIMEOUT", 10))

# ---------- lighthouse ----------
LIGHTHOUSE_BIN = os.getenv("LIGHTHOUSE_BIN", "lighthouse")
AUDIT_TIMEOUT = float(os.getenv("AUDIT_TIMEOUT", 120))  # seconds
