# config.py
import os
from dotenv import load_dotenv

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "tuition_db")

JWT_SECRET = os.getenv("JWT_SECRET", "dev-only-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "tuition_session")
SESSION_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "7"))
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() in ("1", "true", "yes")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

# Default admin seeded on first boot
ADMIN_ID = os.getenv("ADMIN_ID", "admin-001")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Super Admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@tuition.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin-secure-access")

# Matches the 50mb JSON body limit of the old Express server
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
