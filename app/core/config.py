import os
from dotenv import load_dotenv

load_dotenv()

# -----------------------
# Database Config
# -----------------------
DB_TYPE = os.getenv("DB_TYPE", "sqlite").lower()

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres setup")
    # Hosted providers hand out postgres:// URLs; the async driver needs its own scheme
    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+asyncpg://", 1)
    elif DATABASE_URL.startswith("postgresql://"):
        DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
elif DB_TYPE == "sqlite":
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./stock.db")
else:
    raise ValueError(f"Unsupported DB_TYPE: {DB_TYPE}")

DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
DB_SSL = os.getenv("DB_SSL", "false").lower() == "true"

# -----------------------
# Photo uploads
# -----------------------
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_PHOTOS_PER_PRODUCT = int(os.getenv("MAX_PHOTOS_PER_PRODUCT", "5"))
MAX_PHOTO_SIZE_BYTES = int(os.getenv("MAX_PHOTO_SIZE_BYTES", str(5 * 1024 * 1024)))
ALLOWED_PHOTO_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")

# -----------------------
# App
# -----------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
