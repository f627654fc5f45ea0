# config.py

import os
from sqlalchemy.pool import QueuePool


def _flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-dev-key")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///afgf_cache.db")
    SQLALCHEMY_BINDS = {
        # read-only IMDb-derived title index built outside this app
        "titles": os.getenv("TITLES_DATABASE_URL", "sqlite:///data/movies.db"),
    }
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    TVDB_BASE_URL = os.getenv("TVDB_BASE_URL", "https://api4.thetvdb.com/v4")
    TVDB_APIKEY = (os.getenv("TVDB_APIKEY") or "").strip() or None
    TVDB_PIN = (os.getenv("TVDB_PIN") or "").strip() or None
    TVDB_TOKEN = (os.getenv("TVDB_TOKEN") or "").strip() or None
    TVDB_TOKEN_FILE = os.getenv("TVDB_TOKEN_FILE", "instance/tvdb_token.txt")
    TVDB_TIMEOUT = float(os.getenv("TVDB_TIMEOUT", "12"))
    TVDB_LOGIN_ON_START = _flag("TVDB_LOGIN_ON_START", "true")

    # serverless deployments ship the database read-only
    CACHE_READ_ONLY = bool(os.getenv("VERCEL")) or _flag("CACHE_READ_ONLY")
    CLEAR_SEARCH_CACHE_ON_START = _flag("CLEAR_SEARCH_CACHE_ON_START")

    TIME_ZONE = os.getenv("TIME_ZONE", "UTC")
    MAX_GUESSES = int(os.getenv("MAX_GUESSES", "10"))
    SCHEDULER_ENABLED = _flag("SCHEDULER_ENABLED", "true")

    @staticmethod
    def init_app(app):
        pass


class DevelopmentConfig(Config):
    DEBUG = True
    CLEAR_SEARCH_CACHE_ON_START = _flag("CLEAR_SEARCH_CACHE_ON_START", "true")


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True

    @classmethod
    def get_database_uri(cls):
        uri = os.getenv("DATABASE_URL", "")
        if uri.startswith("postgres://"):
            uri = uri.replace("postgres://", "postgresql://", 1)
        if uri and "sslmode" not in uri:
            uri += "?sslmode=require"
        return uri or Config.SQLALCHEMY_DATABASE_URI

    SQLALCHEMY_DATABASE_URI = get_database_uri.__func__(None)
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 280,
        "pool_size": 5,
        "max_overflow": 10,
        "poolclass": QueuePool
    }


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_BINDS = {"titles": "sqlite:///:memory:"}
    SQLALCHEMY_ENGINE_OPTIONS = {}
    TVDB_APIKEY = "test-key"
    TVDB_PIN = None
    TVDB_TOKEN = None
    TVDB_TOKEN_FILE = None
    TVDB_LOGIN_ON_START = False
    CACHE_READ_ONLY = False
    CLEAR_SEARCH_CACHE_ON_START = False
    TIME_ZONE = "UTC"
    MAX_GUESSES = 10
    SCHEDULER_ENABLED = False


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig
}
