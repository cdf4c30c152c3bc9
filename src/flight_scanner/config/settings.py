"""Settings and configuration management"""
import os
from datetime import datetime, timedelta
from pathlib import Path

# Base paths
BASE_DIR = Path(os.getenv("FLIGHT_SCANNER_HOME", Path.cwd()))
CONFIG_DIR = BASE_DIR / "config"
DATA_DIR = BASE_DIR / "data"
LOGS_DIR = BASE_DIR / "logs"

# Gmail API
SCOPES = ['https://www.googleapis.com/auth/gmail.readonly']
CREDENTIALS_FILE = os.getenv("CREDENTIALS_FILE", str(CONFIG_DIR / "credentials.json"))
TOKEN_FILE = os.getenv("TOKEN_FILE", str(CONFIG_DIR / "token.json"))
GMAIL_TIMEOUT = int(os.getenv("GMAIL_TIMEOUT", "30"))

# Database
DB_PATH = os.getenv("DB_PATH", str(DATA_DIR / "flights.db"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", str(LOGS_DIR / "flight_scanner.log"))

# Rate limiting and concurrency
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "5"))
MAX_WORKERS = int(os.getenv("MAX_WORKERS", "4"))
SCAN_LIMIT = int(os.getenv("SCAN_LIMIT", "100"))

# Gemini fallback extraction
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_TIMEOUT = int(os.getenv("GEMINI_TIMEOUT", "20"))
GEMINI_MAX_BODY_CHARS = int(os.getenv("GEMINI_MAX_BODY_CHARS", "2000"))

# Reporting
UNPARSEABLE_SAMPLE_SIZE = int(os.getenv("UNPARSEABLE_SAMPLE_SIZE", "10"))

# Search Query: flight-related mail from the last two years
_two_years_ago = datetime.now() - timedelta(days=730)
DEFAULT_SEARCH_QUERY = (
    "(flight OR booking OR confirmation OR itinerary) "
    f"after:{_two_years_ago:%Y/%m/%d}"
)

SEARCH_QUERY = os.getenv("SEARCH_QUERY", DEFAULT_SEARCH_QUERY)
