import os
from dotenv import load_dotenv
from typing import Optional, List

# Load .env from the project root (the parent of the 'certadmin' package)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
dotenv_path = os.path.join(PROJECT_ROOT, '.env')
load_dotenv(dotenv_path)

class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Certificados Admin")
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Firebase
    # Base64-encoded service account JSON takes precedence over a key file path.
    FIREBASE_ADMIN_SA_BASE64: Optional[str] = os.getenv("FIREBASE_ADMIN_SA_BASE64")
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    # Public web config for the login page (Firebase JS SDK)
    FIREBASE_WEB_API_KEY: Optional[str] = os.getenv("FIREBASE_WEB_API_KEY")
    FIREBASE_WEB_AUTH_DOMAIN: Optional[str] = os.getenv("FIREBASE_WEB_AUTH_DOMAIN")
    FIREBASE_WEB_PROJECT_ID: Optional[str] = os.getenv("FIREBASE_WEB_PROJECT_ID")
    PAGES_TEMPLATES_DIR: str = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates", "pages")

    # Auth
    MASTER_ADMIN_EMAILS_STR: str = os.getenv("MASTER_ADMIN_EMAILS", "")
    @property
    def MASTER_ADMIN_EMAILS(self) -> List[str]:
        return [e.strip().lower() for e in self.MASTER_ADMIN_EMAILS_STR.split(',') if e.strip()]

    SESSION_COOKIE_NAME: str = "session"
    SESSION_EXPIRES_SECONDS: int = int(os.getenv("SESSION_EXPIRES_SECONDS", str(60 * 60 * 24 * 7))) # 7 days

    @property
    def SESSION_COOKIE_SECURE(self) -> bool:
        return self.ENVIRONMENT == "production"

    # Notifications
    TOAST_DEFAULT_DURATION_MS: int = int(os.getenv("TOAST_DEFAULT_DURATION_MS", "5000"))

    # CORS
    CORS_ALLOWED_ORIGINS_STR: str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    @property
    def CORS_ALLOWED_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ALLOWED_ORIGINS_STR.split(',') if origin.strip()]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Application settings
    APP_FRONTEND_URL: str = os.getenv("APP_FRONTEND_URL", "http://localhost:8000")

    # Email settings
    EMAIL_HOST: Optional[str] = os.getenv("EMAIL_HOST")
    EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587")) # Default to 587 for TLS
    EMAIL_USERNAME: Optional[str] = os.getenv("EMAIL_USERNAME")
    EMAIL_PASSWORD: Optional[str] = os.getenv("EMAIL_PASSWORD")
    EMAIL_FROM_ADDRESS: Optional[str] = os.getenv("EMAIL_FROM_ADDRESS")
    EMAIL_FROM_NAME: Optional[str] = os.getenv("EMAIL_FROM_NAME", PROJECT_NAME)
    EMAIL_USE_TLS: bool = os.getenv("EMAIL_USE_TLS", "true").lower() == "true"
    EMAIL_USE_SSL: bool = os.getenv("EMAIL_USE_SSL", "false").lower() == "true"
    EMAILS_TEMPLATES_DIR: str = os.getenv(
        "EMAILS_TEMPLATES_DIR",
        os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates", "emails"),
    )


settings = Settings()
