# backend/config.py
import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()

_DEFAULT_USE_CASES_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "data",
    "use_cases.yaml",
)


class Settings:
    def __init__(self) -> None:
        # The Grid GraphQL catalog
        self.GRID_API_URL = os.getenv(
            "GRID_API_URL", "https://beta.node.thegrid.id/graphql"
        )
        self.GRID_API_TIMEOUT = float(os.getenv("GRID_API_TIMEOUT", "15"))

        # Catalog fetch behaviour
        self.CATALOG_DEFAULT_LIMIT = int(os.getenv("CATALOG_DEFAULT_LIMIT", "50"))
        self.CATALOG_CACHE_TTL = float(os.getenv("CATALOG_CACHE_TTL", "300"))

        # Static use-case table
        self.USE_CASES_PATH = os.getenv("USE_CASES_PATH", _DEFAULT_USE_CASES_PATH)

        # API / logging
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ORIGINS = [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
            ).split(",")
            if o.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()
