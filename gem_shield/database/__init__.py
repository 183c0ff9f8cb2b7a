"""Advisory database synchronisation for GemShield."""

from .sync import DEFAULT_PATH, URL, AdvisoryDatabase, DatabaseConfig

__all__ = [
    "AdvisoryDatabase",
    "DatabaseConfig",
    "DEFAULT_PATH",
    "URL",
]
