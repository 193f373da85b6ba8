# volunteer_api/core/config.py
import os

from dotenv import load_dotenv


DEFAULT_FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def merge_unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in items:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


class Settings:
    def __init__(self) -> None:
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | prod
        if self.ENV != "prod":
            # Prod reads only the real environment.
            load_dotenv()

        # ----------------------------
        # Logging
        # ----------------------------
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        self.LOG_FILE = os.getenv("LOG_FILE", "").strip() or None

        # ----------------------------
        # Database
        # ----------------------------
        default_db = "" if self.ENV == "prod" else "sqlite:///./volunteer_hub.db"
        self.DATABASE_URL = os.getenv("DATABASE_URL", default_db).strip()

        # ----------------------------
        # Firebase ID tokens
        # ----------------------------
        self.FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "").strip()
        self.FIREBASE_JWKS_URL = os.getenv("FIREBASE_JWKS_URL", DEFAULT_FIREBASE_JWKS_URL).strip()
        self.FIREBASE_JWKS_CACHE_SECONDS = int(os.getenv("FIREBASE_JWKS_CACHE_SECONDS", "3600"))

        # ----------------------------
        # CORS
        # ----------------------------
        dev_defaults = [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]

        cors_from_env = parse_csv(os.getenv("CORS_ORIGINS"))
        if self.ENV == "prod":
            self.CORS_ORIGINS = merge_unique(cors_from_env)
        else:
            self.CORS_ORIGINS = merge_unique(cors_from_env + dev_defaults)

        # ----------------------------
        # Server
        # ----------------------------
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "5000"))

        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        missing: list[str] = []

        if not self.DATABASE_URL:
            missing.append("DATABASE_URL")
        if not self.FIREBASE_PROJECT_ID:
            missing.append("FIREBASE_PROJECT_ID")
        if not self.CORS_ORIGINS:
            missing.append("CORS_ORIGINS")

        if self.DATABASE_URL.startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must not point at SQLite in prod")

        cors_joined = ",".join(self.CORS_ORIGINS)
        if "localhost" in cors_joined or "127.0.0.1" in cors_joined:
            raise RuntimeError("CORS_ORIGINS contains localhost/dev origins in prod")

        if missing:
            raise RuntimeError(f"Missing required prod env vars: {', '.join(missing)}")

    @property
    def firebase_issuer(self) -> str:
        if not self.FIREBASE_PROJECT_ID:
            return ""
        return f"https://securetoken.google.com/{self.FIREBASE_PROJECT_ID}"


settings = Settings()
