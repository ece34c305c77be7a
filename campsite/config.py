# campsite/config.py
import os
from dotenv import load_dotenv

load_dotenv()

_DEFAULT_BLOCK_TYPES = "heading,text,image"


def _block_types(raw):
    """
    Parse PAGE_SECTION_BLOCK_TYPES, e.g. "news=heading,text,image,link;gallery=gallery".
    Regions that are not listed fall back to DEFAULT_BLOCK_TYPES.
    """
    regions = {}
    for entry in (raw or "").split(";"):
        if "=" not in entry:
            continue
        region, types = entry.split("=", 1)
        regions[region.strip()] = tuple(t.strip() for t in types.split(",") if t.strip())
    return regions


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret-change-me-please-32b")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MEDIA_URL_PREFIX = os.getenv("MEDIA_URL_PREFIX", "/uploads")
    MAX_IMAGE_MB = int(os.getenv("MAX_IMAGE_MB", "10"))
    MAX_FILE_MB = int(os.getenv("MAX_FILE_MB", "50"))

    DEFAULT_BLOCK_TYPES = tuple(os.getenv("DEFAULT_BLOCK_TYPES", _DEFAULT_BLOCK_TYPES).split(","))
    PAGE_SECTION_BLOCK_TYPES = _block_types(os.getenv("PAGE_SECTION_BLOCK_TYPES"))

    HISTORY_PAGE_SIZE = 20


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///campsite-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-bytes"
    PAGE_SECTION_BLOCK_TYPES = {
        "news": ("heading", "text", "image", "link", "file", "gallery"),
    }


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
