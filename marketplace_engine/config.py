import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://user:pass@db:5432/marketplace")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

HTTP_CONNECT_TIMEOUT_S = float(os.getenv("HTTP_CONNECT_TIMEOUT_S", "3.0"))
HTTP_READ_TIMEOUT_S = float(os.getenv("HTTP_READ_TIMEOUT_S", "30.0"))

# Remote GPU execution API
REMOTE_API_KEY = os.getenv("REMOTE_API_KEY", "")
REMOTE_BASE_URL = os.getenv("REMOTE_BASE_URL", "https://api.runpod.ai/v2")
REMOTE_MAX_RETRIES = int(os.getenv("REMOTE_MAX_RETRIES", "2"))
REMOTE_RETRY_DELAY_MS = int(os.getenv("REMOTE_RETRY_DELAY_MS", "1000"))

# /runsync blocks on the provider side, give it a longer read window
REMOTE_SYNC_READ_TIMEOUT_S = float(os.getenv("REMOTE_SYNC_READ_TIMEOUT_S", "90.0"))

# Error codes written onto execution records (not raised)
SUBMIT_FAILED_ERROR_CODE = "REMOTE_SUBMIT_FAILED"
REMOTE_JOB_ERROR_CODE = "REMOTE_JOB_ERROR"

# Header the upstream auth layer sets once the consumer is authenticated
CONSUMER_ID_HEADER = "X-Consumer-Id"

# Run history pagination
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100
