"""Constants for Gmail Digest."""

from pathlib import Path

# --- Config paths ---
CREDENTIALS_ENV_VAR = "GMAIL_DIGEST_CREDENTIALS_FILE"
TOKEN_PATH = Path("token.json")
TOKEN_FILE_MODE = 0o600

# --- OAuth ---
SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
CALLBACK_HOST = "localhost"
CALLBACK_PORT = 8080
CALLBACK_PATH = "/oauth2callback"
CALLBACK_RESPONSE = "Authorization code received. You can now close this browser window."

# --- Gmail API ---
METADATA_HEADERS = ["Subject", "From"]

# --- Queries ---
QUERY_DATE_FORMAT = "%Y/%m/%d"
RECENT_DAYS = 30
EXCLUDED_CATEGORIES = ["promotions", "social", "updates"]
EXCLUDED_LABELS = ["Automation", "Subscriptions"]

# --- Display ---
NO_DOMAIN_LABEL = "(no domain)"
