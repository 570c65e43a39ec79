"""Configuration loader for the Registration API"""

import os
from pathlib import Path

from dotenv import load_dotenv

project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

# Configuration dictionary - set once at initialization
config = {
    "database_url": os.getenv("DATABASE_URL", "sqlite:///./registrations.db"),
    "database_echo": os.getenv("DEBUG", "false").lower() == "true",
    "port": int(os.getenv("PORT", "5000")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "log_format": os.getenv("LOG_FORMAT", "%(levelname)s:%(name)s:%(message)s"),
    "environment": os.getenv("ENVIRONMENT", "development"),
    # Search behaviour of the lenient /filter endpoint: "contains" or "exact"
    "filter_search_mode": os.getenv("FILTER_SEARCH_MODE", "contains"),
    "export_filename": os.getenv("EXPORT_FILENAME", "registrations.xlsx"),
    "cors_origins": [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ],
}
