from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    BOT_TOKEN: str

    # OpenAI-compatible chat completions (qualifier + match summary)
    OPENAI_API_KEY: str
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_PROJECT: Optional[str] = None
    QUALIFIER_MODEL: str = "gpt-4.1"
    MATCH_SUMMARY_MODEL: str = "gpt-4.1"
    LLM_TIMEOUT: float = 60.0
    LLM_VERIFY_SSL: bool = True

    # Inventory (published Google Sheets CSV or a local export)
    INVENTORY_CSV_URL: str = ""
    INVENTORY_CSV_PATH: str = "inventory.csv"
    CATALOG_REFRESH_MINUTES: int = 15

    LOG_FILE: str = "bot.log"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
