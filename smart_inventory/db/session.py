from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from smart_inventory.db.boltic import BolticClient

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BOLTIC_API_URL: str = "https://asia-south1.api.boltic.io/service/platform"
    BOLTIC_API_KEY: str = ""
    BOLTIC_SALES_LOOP_URL: str = (
        "https://asia-south1.workflow.boltic.app/8d321f41-0f56-44e7-b790-db8f2fa0dba1/newsales"
    )
    SALES_SYNC_WORKFLOW: str = "A_sales_signals_sync"
    HTTP_TIMEOUT: float = 5.0  # httpx default

    PREVIEW_ROWS: int = 20
    MAX_INGEST_SESSIONS: int = 100
    TOP_SKU_LIMIT: int = 5

    FYND_API_BASE: str = "https://api.fynd.com"
    FYND_COMPANY_ID: str = ""
    FYND_AUTH_TOKEN: str = ""

    LOG_LEVEL: str = "INFO"

@lru_cache
def get_settings() -> Settings:
    return Settings()

async def get_boltic_client():
    """FastAPI dependency yielding a client bound to the configured Boltic workspace."""
    settings = get_settings()
    client = BolticClient(
        settings.BOLTIC_API_URL,
        api_key=settings.BOLTIC_API_KEY,
        sales_loop_url=settings.BOLTIC_SALES_LOOP_URL,
        timeout=settings.HTTP_TIMEOUT,
    )
    try:
        yield client
    finally:
        await client.aclose()
