"""Configuration management for Arbigraph."""
import os
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from dotenv import load_dotenv

load_dotenv()

DEFAULT_QUOTE_CURRENCIES = "USDT,BTC,ETH,BNB,BUSD"
BINANCE_TICKER_STREAM = "wss://stream.binance.com:9443/ws/!ticker@arr"


def _split_env(name: str, default: str) -> List[str]:
    return [item for item in os.getenv(name, default).split(",") if item.strip()]


class EngineConfig(BaseModel):
    """Symbol normalisation and cycle detection parameters."""
    model_config = ConfigDict(validate_default=True)

    quote_currencies: List[str] = Field(
        default_factory=lambda: _split_env("QUOTE_CURRENCIES", DEFAULT_QUOTE_CURRENCIES)
    )
    cycle_tolerance: float = Field(
        default_factory=lambda: float(os.getenv("CYCLE_TOLERANCE", "1e-12")),
        ge=0.0,
    )

    @field_validator("quote_currencies")
    @classmethod
    def _normalise_quotes(cls, value: List[str]) -> List[str]:
        quotes = []
        for code in value:
            code = code.strip().upper()
            if code and code not in quotes:
                quotes.append(code)
        if not quotes:
            raise ValueError("at least one quote currency is required")
        return quotes


class FeedConfig(BaseModel):
    """Market data stream configuration."""
    model_config = ConfigDict(validate_default=True)

    url: str = Field(default_factory=lambda: os.getenv("FEED_URL", BINANCE_TICKER_STREAM))
    heartbeat: float = Field(
        default_factory=lambda: float(os.getenv("FEED_HEARTBEAT", "30")),
        gt=0.0,
    )
    reconnect_delay: float = Field(
        default_factory=lambda: float(os.getenv("RECONNECT_DELAY", "1.0")),
        ge=0.0,
    )
    max_reconnect_delay: float = Field(
        default_factory=lambda: float(os.getenv("MAX_RECONNECT_DELAY", "60")),
        ge=0.0,
    )
    max_reconnects: int = Field(
        default_factory=lambda: int(os.getenv("MAX_RECONNECTS", "5")),
        ge=0,
    )


class Config(BaseModel):
    """Main application configuration."""
    model_config = ConfigDict(validate_default=True)

    engine: EngineConfig = Field(default_factory=EngineConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_dir: str = Field(default_factory=lambda: os.getenv("LOG_DIR", "logs"))
    history_size: int = Field(
        default_factory=lambda: int(os.getenv("HISTORY_SIZE", "20")),
        ge=1,
    )

# single global config instance that everything uses
config = Config()
