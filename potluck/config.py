"""Runtime configuration defaults for storage, sync and the issues job."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

DB_PATH = os.environ.get("POTLUCK_DB_PATH", "data/potluck.db")
STORAGE_KEY = os.environ.get("POTLUCK_STORAGE_KEY", "friendsgiving_dishes_v6")

# "local" keeps the list in DB_PATH, "remote" reads the aggregated issues file.
SYNC_MODE = os.environ.get("POTLUCK_SYNC_MODE", "local")
REMOTE_DISHES_URL = os.environ.get("POTLUCK_REMOTE_URL", "")
REFRESH_SECONDS = float(os.environ.get("POTLUCK_REFRESH_SECONDS", "30"))
HTTP_TIMEOUT_SECONDS = float(os.environ.get("POTLUCK_HTTP_TIMEOUT", "10"))

GITHUB_REPOSITORY = os.environ.get("GITHUB_REPOSITORY", "")
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN", "")
GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")
ISSUE_LABEL = os.environ.get("POTLUCK_ISSUE_LABEL", "potluck")
ISSUES_PAGE_SIZE = 100
OUTPUT_PATH = os.environ.get("POTLUCK_OUTPUT_PATH", "data/dishes.json")

LOG_PATH = os.environ.get("POTLUCK_LOG_PATH", "/tmp/potluck-debug.log")
