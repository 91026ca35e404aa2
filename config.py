import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./credential_sync.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # One-time codes
    OTP_LENGTH = int(data.get("OTP_LENGTH", 6))
    OTP_TTL_MINUTES = int(data.get("OTP_TTL_MINUTES", 10))
    OTP_MAX_ATTEMPTS = int(data.get("OTP_MAX_ATTEMPTS", 5))

    # Reset tokens
    RESET_TOKEN_TTL_MINUTES = int(data.get("RESET_TOKEN_TTL_MINUTES", 10))
    RESET_TOKEN_BYTES = int(data.get("RESET_TOKEN_BYTES", 32))

    # Password policy and scrypt parameters
    PASSWORD_MIN_LENGTH = int(data.get("PASSWORD_MIN_LENGTH", 8))
    PASSWORD_MAX_LENGTH = int(data.get("PASSWORD_MAX_LENGTH", 128))
    SCRYPT_N = int(data.get("SCRYPT_N", 2**14))
    SCRYPT_R = int(data.get("SCRYPT_R", 8))
    SCRYPT_P = int(data.get("SCRYPT_P", 1))
    SCRYPT_DKLEN = int(data.get("SCRYPT_DKLEN", 64))
    SCRYPT_SALT_BYTES = int(data.get("SCRYPT_SALT_BYTES", 16))

    # Notification dispatch: "log" or "http"
    EMAIL_BACKEND = data.get("EMAIL_BACKEND", "log")
    EMAIL_API_URL = data.get("EMAIL_API_URL", "")
    EMAIL_API_TOKEN = data.get("EMAIL_API_TOKEN", "")
    EMAIL_FROM_ADDRESS = data.get("EMAIL_FROM_ADDRESS", "noreply@example.com")
    EMAIL_FROM_NAME = data.get("EMAIL_FROM_NAME", "Store Support")
    EMAIL_TIMEOUT_SECONDS = float(data.get("EMAIL_TIMEOUT_SECONDS", 10))

    # Secondary identity store
    IDENTITY_STORE_ENABLED = bool(data.get("IDENTITY_STORE_ENABLED", False))
    IDENTITY_STORE_BASE_URL = data.get(
        "IDENTITY_STORE_BASE_URL", "https://identitytoolkit.googleapis.com"
    )
    IDENTITY_STORE_PROJECT_ID = data.get("IDENTITY_STORE_PROJECT_ID", "")
    IDENTITY_STORE_ACCESS_TOKEN = data.get("IDENTITY_STORE_ACCESS_TOKEN", "")
    IDENTITY_STORE_TIMEOUT_SECONDS = float(data.get("IDENTITY_STORE_TIMEOUT_SECONDS", 5))
