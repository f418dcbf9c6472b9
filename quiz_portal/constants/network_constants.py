"""Network configuration constants for the quiz portal."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
API_BASE_URL: str = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
REQUEST_TIMEOUT_SECONDS: float = 10.0
AUTH_SCHEME: str = "Bearer"
TOKEN_TTL_SECONDS: float = 8 * 60 * 60
IMAGE_TIMEOUT_SECONDS: float = 5.0
