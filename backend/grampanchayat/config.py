"""Application settings and validation."""

import os
from pathlib import Path
from typing import List

BASE = Path(__file__).resolve().parent.parent


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _normalize_db_url(url: str) -> str:
    # Hosted Postgres providers still hand out the legacy scheme.
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


class Settings:
    ENV: str
    JWT_SECRET: str
    JWT_ALGORITHM: str
    JWT_EXPIRE_HOURS: int
    ALLOW_INSECURE_JWT: bool
    DATABASE_URL: str
    CORS_ORIGINS: List[str]
    MAX_FILE_SIZE: int
    MAX_DOCUMENT_SIZE: int
    STORAGE_BACKEND: str
    SUPABASE_URL: str
    SUPABASE_SERVICE_KEY: str
    SUPABASE_BUCKET_NAME: str
    LOCAL_STORAGE_DIR: str
    ADMIN_EMAIL: str
    ADMIN_PASSWORD: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.JWT_SECRET = os.getenv("JWT_SECRET", "change_me_for_prod")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "24"))
        self.ALLOW_INSECURE_JWT = os.getenv("ALLOW_INSECURE_JWT", "false").lower() == "true"
        self.DATABASE_URL = _normalize_db_url(os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'app.db'}"))
        self.CORS_ORIGINS = _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001"))
        self.MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", str(5 * 1024 * 1024)))  # images, 5 MB
        self.MAX_DOCUMENT_SIZE = int(os.getenv("MAX_DOCUMENT_SIZE", str(10 * 1024 * 1024)))
        self.STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local").lower()
        self.SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
        self.SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")
        self.SUPABASE_BUCKET_NAME = os.getenv("SUPABASE_BUCKET_NAME", "grampanchayat-files")
        self.LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", str(BASE / "data" / "uploads"))
        self.ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@grampanchayat.gov.in")
        self.ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
        self._validate()

    def _validate(self):
        if self.ENV != "dev" and not self.ALLOW_INSECURE_JWT and self.JWT_SECRET == "change_me_for_prod":
            raise RuntimeError("JWT_SECRET must be set to a non-default value in non-dev environments")
        if self.STORAGE_BACKEND not in ("local", "supabase"):
            raise RuntimeError(f"unknown STORAGE_BACKEND: {self.STORAGE_BACKEND}")
        if self.STORAGE_BACKEND == "supabase" and not (self.SUPABASE_URL and self.SUPABASE_SERVICE_KEY):
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the supabase storage backend")


settings = Settings()
