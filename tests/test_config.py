"""Tests for configuration loading."""
import pytest
from pydantic import ValidationError
from arbigraph.config import (
    BINANCE_TICKER_STREAM, Config, EngineConfig, FeedConfig
)


class TestEngineConfig:
    """Test engine configuration."""
    
    def test_defaults(self, monkeypatch):
        """Test default quote set and tolerance."""
        monkeypatch.delenv("QUOTE_CURRENCIES", raising=False)
        monkeypatch.delenv("CYCLE_TOLERANCE", raising=False)
        
        engine = EngineConfig()
        
        assert engine.quote_currencies == ["USDT", "BTC", "ETH", "BNB", "BUSD"]
        assert engine.cycle_tolerance == 1e-12
    
    def test_quote_currencies_from_env(self, monkeypatch):
        """Test comma list from the environment is cleaned."""
        monkeypatch.setenv("QUOTE_CURRENCIES", " usdt, FDUSD ,,btc,USDT")
        
        engine = EngineConfig()
        
        assert engine.quote_currencies == ["USDT", "FDUSD", "BTC"]
    
    def test_tolerance_from_env(self, monkeypatch):
        """Test tolerance override."""
        monkeypatch.setenv("CYCLE_TOLERANCE", "1e-9")
        
        assert EngineConfig().cycle_tolerance == 1e-9
    
    def test_empty_quote_set_from_env_rejected(self, monkeypatch):
        """Test a blank QUOTE_CURRENCIES fails validation."""
        monkeypatch.setenv("QUOTE_CURRENCIES", " , ")

        with pytest.raises(ValidationError):
            EngineConfig()

    def test_negative_tolerance_from_env_rejected(self, monkeypatch):
        """Test CYCLE_TOLERANCE is range-checked."""
        monkeypatch.setenv("CYCLE_TOLERANCE", "-1")

        with pytest.raises(ValidationError):
            EngineConfig()

    def test_empty_quote_set_rejected(self):
        """Test a config with no quote currency is invalid."""
        with pytest.raises(ValidationError):
            EngineConfig(quote_currencies=[" ", ""])
    
    def test_negative_tolerance_rejected(self):
        """Test tolerance must be non-negative."""
        with pytest.raises(ValidationError):
            EngineConfig(cycle_tolerance=-1.0)


class TestFeedConfig:
    """Test feed configuration."""
    
    def test_defaults(self, monkeypatch):
        """Test default stream settings."""
        for name in ("FEED_URL", "FEED_HEARTBEAT", "RECONNECT_DELAY", "MAX_RECONNECTS"):
            monkeypatch.delenv(name, raising=False)
        
        feed = FeedConfig()
        
        assert feed.url == BINANCE_TICKER_STREAM
        assert feed.heartbeat == 30.0
        assert feed.reconnect_delay == 1.0
        assert feed.max_reconnects == 5
    
    def test_env_overrides(self, monkeypatch):
        """Test stream settings from the environment."""
        monkeypatch.setenv("FEED_URL", "wss://example.test/ws")
        monkeypatch.setenv("MAX_RECONNECTS", "9")
        
        feed = FeedConfig()
        
        assert feed.url == "wss://example.test/ws"
        assert feed.max_reconnects == 9

    def test_negative_reconnects_from_env_rejected(self, monkeypatch):
        """Test stream settings from the environment are range-checked."""
        monkeypatch.setenv("MAX_RECONNECTS", "-3")

        with pytest.raises(ValidationError):
            FeedConfig()


class TestConfig:
    """Test top-level configuration."""
    
    def test_nested_sections(self, monkeypatch):
        """Test sections and logging defaults."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        
        cfg = Config()
        
        assert isinstance(cfg.engine, EngineConfig)
        assert isinstance(cfg.feed, FeedConfig)
        assert cfg.log_level == "DEBUG"
        assert cfg.history_size > 0
