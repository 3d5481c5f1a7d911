import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Database settings
    db_file: str = os.getenv("LIBRARY_DB_FILE", "library.db")

    # Library settings
    library_name: str = os.getenv("LIBRARY_NAME", "Digital Knowledge Hub")
    newest_books_limit: int = int(os.getenv("NEWEST_BOOKS_LIMIT", "5"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Digital Library")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()


settings = Settings()
