import os

from dotenv import load_dotenv

# Values already set in the environment take precedence over .env
load_dotenv(override=False)

GROUPHUB_URL = os.getenv("GROUPHUB_URL", "http://localhost:3000").rstrip("/")
REALTIME_URL = os.getenv("REALTIME_URL", GROUPHUB_URL)
REALTIME_PATH = os.getenv("REALTIME_PATH", "/ws/socket.io")
TOKEN = os.getenv("TOKEN", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

UPLOAD_URL = os.getenv("UPLOAD_URL", "https://upload.uploadcare.com/base/")
UPLOAD_PUBLIC_KEY = os.getenv("UPLOAD_PUBLIC_KEY", "")
UPLOAD_CDN_URL = os.getenv("UPLOAD_CDN_URL", "https://ucarecdn.com").rstrip("/")

SEARCH_DEBOUNCE_SECONDS = float(os.getenv("SEARCH_DEBOUNCE_SECONDS", "1.0"))
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

USER_ID = os.getenv("USER_ID", "")
GROUP_ID = os.getenv("GROUP_ID", "")
RECEIVER_ID = os.getenv("RECEIVER_ID", "")
