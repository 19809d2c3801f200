from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Collect Your Cards Table Service"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/collectyourcards"

    # Base URL of the card API consumed by the REST clients
    api_base_url: str = "http://localhost:3001"
    request_timeout: float = 30.0
    # Bearer token used by CLI jobs calling the card API
    api_token: str | None = None

    # Page size for infinite-scroll requests
    page_size: int = 100


settings = Settings()


# =============================================================================
# TABLE ENGINE LIMITS
# =============================================================================

# Columns can never be dragged narrower than this
MIN_COLUMN_WIDTH = 50

# Full-load mode fetches the whole record set in one request, capped here
FULL_LOAD_LIMIT = 10_000

# Remaining scroll distance (px) at which the next page is requested
LOAD_MORE_THRESHOLD_PX = 200

# Search input settles for this long before the view is re-filtered
SEARCH_DEBOUNCE_SECONDS = 0.3
