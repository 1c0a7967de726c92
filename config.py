"""
config.py
---------
Central configuration module. Loads environment variables from the
.env file and exposes them as typed constants.

The database connection string is not read from here: it is the single
required command-line argument (see main.py).
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Server identity ───────────────────────────────────────
SERVER_NAME: str = "PostgreSQL MCP Server"
SERVER_VERSION: str = "1.0.0"
SERVER_DESCRIPTION: str = "A Model Context Protocol server for PostgreSQL"

# ── PostgreSQL ────────────────────────────────────────────
DB_SCHEMA: str = os.getenv("DB_SCHEMA", "public")
DB_POOL_MIN_CONN: int = int(os.getenv("DB_POOL_MIN_CONN", "1"))
DB_POOL_MAX_CONN: int = int(os.getenv("DB_POOL_MAX_CONN", "10"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
