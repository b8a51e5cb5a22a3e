"""Application settings."""

import os
from pathlib import Path

# Database
DB_PATH = os.getenv("SCP_DB_PATH", "scp_cache.duckdb")

# Logging
LOG_DIR = Path(os.getenv("SCP_LOG_DIR", "logs"))

# FireCloud API
FIRECLOUD_API_ROOT = os.getenv("FIRECLOUD_API_ROOT", "https://api.firecloud.org")
FIRECLOUD_API_TIMEOUT = int(os.getenv("FIRECLOUD_API_TIMEOUT", "60"))
FIRECLOUD_ACCESS_TOKEN = os.getenv("FIRECLOUD_ACCESS_TOKEN")
MAX_CONCURRENT = 10

# View cache
CACHE_VIEW_NAMESPACE = os.getenv("CACHE_VIEW_NAMESPACE", "localhost/single_cell/study")
CACHE_REMOVAL_WORKERS = int(os.getenv("CACHE_REMOVAL_WORKERS", "2"))
CACHE_REMOVAL_ATTEMPTS = int(os.getenv("CACHE_REMOVAL_ATTEMPTS", "3"))

# Analysis metadata
ANALYSIS_ID_PREFIX = "SCPA-"
DEFAULT_SCHEMA_VERSION = "4.6.1"
