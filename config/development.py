import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "smart_attendance"),
}

# "mysql" or "memory" (memory keeps everything in-process, handy without a DB server)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))

# Browser front end runs on the Vite dev server
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")

RECOGNITION_MATCH_PROBABILITY = float(os.getenv("RECOGNITION_MATCH_PROBABILITY", "0.55"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo admin/lecturer/student accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
