"""
Configuration classes for the inventory intelligence project.
Defines pipeline limits and forecast-oracle settings in a type-safe, extensible way.
"""

import os
from dataclasses import dataclass

from utils.env import env_float, env_int, load_project_dotenv


@dataclass
class InventoryIntelligenceConfig:
    forecast_item_limit: int = 10  # Oracle calls per run; highest-revenue items first
    max_concurrent_forecasts: int = 5
    market: str = "Kenya"
    default_business_sector: str = "general"
    fallback_confidence_level: float = 60.0


@dataclass
class ForecastOracleConfig:
    model: str = "gpt-4o-mini"
    temperature: float = 0.2
    max_tokens: int = 400
    retry_attempts: int = 3
    retry_backoff: float = 1.0
    api_key: str | None = None

    @classmethod
    def from_env(cls) -> "ForecastOracleConfig":
        """Build a config from the environment, after loading the project `.env`."""
        load_project_dotenv()
        defaults = cls()
        return cls(
            model=os.getenv("INVENTORY_FORECAST_MODEL", defaults.model),
            temperature=env_float("INVENTORY_FORECAST_TEMPERATURE", defaults.temperature),
            max_tokens=env_int("INVENTORY_FORECAST_MAX_TOKENS", defaults.max_tokens),
            retry_attempts=env_int("INVENTORY_FORECAST_RETRIES", defaults.retry_attempts),
            retry_backoff=env_float("INVENTORY_FORECAST_BACKOFF", defaults.retry_backoff),
            api_key=os.getenv("OPENAI_API_KEY"),
        )


# Example usage:
# pipeline_config = InventoryIntelligenceConfig(forecast_item_limit=5)
# oracle_config = ForecastOracleConfig.from_env()
