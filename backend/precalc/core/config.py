import os
from dotenv import load_dotenv

# Load .env from the project root
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env"))

SECRET_KEY: str = os.getenv("SECRET_KEY", "precalc-dev-secret-change-in-prod")
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(BASE_DIR, "..", ".."))
PROJECT_DIR = os.path.abspath(os.path.join(BACKEND_DIR, ".."))

# Database: users + stored lesson progress, kept in backend/data/
DATABASE_PATH: str = os.getenv(
    "DATABASE_PATH",
    os.path.join(BACKEND_DIR, "data", "app.db"),
)
MIGRATIONS_DIR: str = os.path.join(BACKEND_DIR, "migrations")

# Lesson JSON tree served under /lessons, and the built single-page client
CONTENT_DIR: str = os.getenv("CONTENT_DIR", os.path.join(PROJECT_DIR, "content"))
LESSONS_DIR: str = os.getenv("LESSONS_DIR", os.path.join(CONTENT_DIR, "lessons"))
LESSON_INDEX_PATH: str = "precalc/index.json"
CLIENT_DIST_DIR: str = os.getenv("CLIENT_DIST_DIR", os.path.join(PROJECT_DIR, "client", "dist"))

# HTTP server
PORT: int = int(os.getenv("PORT", "8080"))
CORS_ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",") if origin.strip()
]

# HTTP client
API_BASE_URL: str = os.getenv("API_BASE_URL", "").strip()
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

# Third-party widgets, loaded lazily by the client from a CDN
DESMOS_API_KEY: str = os.getenv("DESMOS_API_KEY", "desmos")
DESMOS_SCRIPT_URL: str = f"https://www.desmos.com/api/v1.11/calculator.js?apiKey={DESMOS_API_KEY}"
KATEX_VERSION: str = os.getenv("KATEX_VERSION", "0.16.11")
KATEX_SCRIPT_URL: str = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist/katex.min.js"
KATEX_STYLESHEET_URL: str = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist/katex.min.css"

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
