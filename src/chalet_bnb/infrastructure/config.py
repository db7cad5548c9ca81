"""
Configuration for Chalet BnB.

Settings are read from environment variables once, when this module is
imported. Set the variables before starting the program:

    CHALET_BNB_DB          database name (default: chalet_bnb)
    CHALET_BNB_MONGO_HOST  MongoDB host or mongodb:// URI (default: localhost)
    CHALET_BNB_MONGO_PORT  MongoDB port (default: 27017)
    LOG_LEVEL              logging level name (default: INFO)
    LOG_FILE               optional path of a log file
"""

import os
from dataclasses import dataclass
from typing import Optional


"""Application settings loaded from environment variables."""
@dataclass
class Settings:
    db_name: str = os.getenv("CHALET_BNB_DB", "chalet_bnb")
    mongo_host: str = os.getenv("CHALET_BNB_MONGO_HOST", "localhost")
    mongo_port: int = int(os.getenv("CHALET_BNB_MONGO_PORT", "27017"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None


settings = Settings()
