import os
from typing import List, Optional

# Database
MERITJOURNAL_DB_URI = os.environ.get("MERITJOURNAL_DB_URI")
if MERITJOURNAL_DB_URI is None:
    raise ValueError("MERITJOURNAL_DB_URI environment variable not set")

MERITJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW = os.environ.get(
    "MERITJOURNAL_DB_POOL_RECYCLE_SECONDS"
)
MERITJOURNAL_DB_POOL_RECYCLE_SECONDS = 1800
try:
    if MERITJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW is not None:
        MERITJOURNAL_DB_POOL_RECYCLE_SECONDS = int(
            MERITJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW
        )
except ValueError:
    raise ValueError(
        f"MERITJOURNAL_DB_POOL_RECYCLE_SECONDS must be an integer: {MERITJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW}"
    )

MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW = os.environ.get(
    "MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS"
)
MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS = 30000
try:
    if MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW is not None:
        MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS = int(
            MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW
        )
except ValueError:
    raise ValueError(
        f"MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS must be an integer: {MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW}"
    )

MERITJOURNAL_DB_POOL_SIZE = 2
MERITJOURNAL_DB_POOL_SIZE_RAW = os.environ.get("MERITJOURNAL_DB_POOL_SIZE")
MERITJOURNAL_DB_MAX_OVERFLOW = 2
MERITJOURNAL_DB_MAX_OVERFLOW_RAW = os.environ.get("MERITJOURNAL_DB_MAX_OVERFLOW")
try:
    if MERITJOURNAL_DB_POOL_SIZE_RAW is not None:
        MERITJOURNAL_DB_POOL_SIZE = int(MERITJOURNAL_DB_POOL_SIZE_RAW)
except ValueError:
    raise ValueError(
        f"Could not parse MERITJOURNAL_DB_POOL_SIZE as int: {MERITJOURNAL_DB_POOL_SIZE_RAW}"
    )
try:
    if MERITJOURNAL_DB_MAX_OVERFLOW_RAW is not None:
        MERITJOURNAL_DB_MAX_OVERFLOW = int(MERITJOURNAL_DB_MAX_OVERFLOW_RAW)
except ValueError:
    raise ValueError(
        f"Could not parse MERITJOURNAL_DB_MAX_OVERFLOW as int: {MERITJOURNAL_DB_MAX_OVERFLOW_RAW}"
    )

# CORS
_origins_raw = os.environ.get(
    "MERITJOURNAL_CORS_ALLOWED_ORIGINS", "http://localhost:3000"
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip() for origin in _origins_raw.split(",") if origin.strip()
]

# Owner identity
MERITJOURNAL_AUTH_DISABLED = (
    os.environ.get("MERITJOURNAL_AUTH_DISABLED", "").lower() == "true"
)
MERITJOURNAL_DEFAULT_USER_ID = os.environ.get(
    "MERITJOURNAL_DEFAULT_USER_ID", "test-user-id"
)

MERITJOURNAL_JWT_SECRET = os.environ.get("MERITJOURNAL_JWT_SECRET", "")
if not MERITJOURNAL_AUTH_DISABLED and MERITJOURNAL_JWT_SECRET == "":
    raise ValueError(
        "MERITJOURNAL_JWT_SECRET environment variable must be set unless MERITJOURNAL_AUTH_DISABLED=true"
    )
MERITJOURNAL_JWT_ALGORITHMS: List[str] = [
    algorithm.strip()
    for algorithm in os.environ.get("MERITJOURNAL_JWT_ALGORITHMS", "HS256").split(",")
    if algorithm.strip()
]
MERITJOURNAL_JWT_AUDIENCE: Optional[str] = os.environ.get("MERITJOURNAL_JWT_AUDIENCE")

