#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for all application configuration,
including environment variables, defaults, and validation. The resulting
Config is immutable and is passed to components through their constructors.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Tuple

import pytz

from .exceptions import ConfigurationError
from .tracks import Track, DEFAULT_TRACKS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourcesConfig:
    """Article source configuration."""
    newsapi_key: Optional[str] = None
    newsapi_url: str = "https://newsapi.org/v2/everything"
    newsapi_language: str = "en"
    newsapi_page_size: int = 5
    serpapi_key: Optional[str] = None
    serpapi_url: str = "https://serpapi.com/search.json"
    serpapi_num_results: int = 5
    max_queries_per_track: int = 2
    max_feeds_per_track: int = 2
    feed_entry_limit: int = 5


@dataclass(frozen=True)
class RetryConfig:
    """Network retry policy."""
    retries: int = 3
    base_delay_ms: int = 1000
    timeout_seconds: int = 15


@dataclass(frozen=True)
class CacheConfig:
    """Aggregated content cache configuration."""
    backend: str = "file"  # file | memory
    path: str = "data/content_cache.json"
    content_ttl_seconds: int = 21600  # 6 hours


@dataclass(frozen=True)
class IntegrationConfig:
    """External integration configuration."""
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    slack_webhook_url: Optional[str] = None
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    email_sender: Optional[str] = None


@dataclass(frozen=True)
class ApplicationConfig:
    """Core application configuration."""
    lesson_recipient: Optional[str] = None
    history_path: str = "data/lesson_history.csv"
    timezone: str = "UTC"

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False


@dataclass(frozen=True)
class Config:
    """Master configuration container."""
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    integrations: IntegrationConfig = field(default_factory=IntegrationConfig)
    app: ApplicationConfig = field(default_factory=ApplicationConfig)
    tracks: Tuple[Track, ...] = DEFAULT_TRACKS

    def has_openai(self) -> bool:
        """Check if the composition API is available."""
        return bool(self.integrations.openai_api_key)

    def has_slack(self) -> bool:
        """Check if the operator channel is available."""
        return bool(self.integrations.slack_webhook_url)

    def has_email(self) -> bool:
        """Check if lesson email delivery is fully configured."""
        return bool(
            self.app.lesson_recipient
            and self.integrations.smtp_username
            and self.integrations.smtp_password
        )


class ConfigManager:
    """Builds and validates configuration from the environment."""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration manager.

        Args:
            environ: Mapping to read settings from (defaults to os.environ)
        """
        self._environ = environ if environ is not None else os.environ
        self._config: Optional[Config] = None

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force rebuilding configuration from environment

        Returns:
            Complete configuration object
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._environ.get(key)
        if value is None or value.strip() == "":
            return default
        return value.strip()

    def _env_int(self, key: str, default: int) -> int:
        raw = self._env(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(key, f"expected an integer, got '{raw}'")

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""
        sources_config = SourcesConfig(
            newsapi_key=self._env('NEWSAPI_KEY'),
            newsapi_url=self._env('NEWSAPI_URL', SourcesConfig.newsapi_url),
            newsapi_language=self._env('NEWSAPI_LANGUAGE', 'en'),
            newsapi_page_size=self._env_int('NEWSAPI_PAGE_SIZE', 5),
            serpapi_key=self._env('SERPAPI_KEY'),
            serpapi_url=self._env('SERPAPI_URL', SourcesConfig.serpapi_url),
            serpapi_num_results=self._env_int('SERPAPI_NUM_RESULTS', 5)
        )

        retry_config = RetryConfig(
            retries=self._env_int('HTTP_RETRIES', 3),
            base_delay_ms=self._env_int('HTTP_BASE_DELAY_MS', 1000),
            timeout_seconds=self._env_int('HTTP_TIMEOUT', 15)
        )

        cache_config = CacheConfig(
            backend=(self._env('CACHE_BACKEND', 'file') or 'file').lower(),
            path=self._env('CACHE_PATH', CacheConfig.path),
            content_ttl_seconds=self._env_int('CONTENT_CACHE_TTL', 21600)
        )

        integration_config = IntegrationConfig(
            openai_api_key=self._env('OPENAI_API_KEY'),
            openai_model=self._env('OPENAI_MODEL', IntegrationConfig.openai_model),
            slack_webhook_url=self._env('SLACK_WEBHOOK_URL'),
            smtp_host=self._env('SMTP_HOST', IntegrationConfig.smtp_host),
            smtp_port=self._env_int('SMTP_PORT', 465),
            smtp_username=self._env('SMTP_USERNAME'),
            smtp_password=self._env('SMTP_PASSWORD'),
            email_sender=self._env('EMAIL_SENDER') or self._env('SMTP_USERNAME')
        )

        app_config = ApplicationConfig(
            lesson_recipient=self._env('LESSON_RECIPIENT'),
            history_path=self._env('HISTORY_PATH', ApplicationConfig.history_path),
            timezone=self._env('TIMEZONE', 'UTC'),
            log_level=(self._env('LOG_LEVEL', 'INFO') or 'INFO').upper(),
            verbose_logging=(self._env('VERBOSE_LOGGING', 'false') or '').lower() == 'true'
        )

        config = Config(
            sources=sources_config,
            retry=retry_config,
            cache=cache_config,
            integrations=integration_config,
            app=app_config
        )

        self._validate_config(config)
        return config

    def _validate_config(self, config: Config) -> None:
        """Validate configuration values."""
        errors = []

        if config.retry.retries < 1:
            errors.append("HTTP_RETRIES must be at least 1")

        if config.retry.base_delay_ms < 0:
            errors.append("HTTP_BASE_DELAY_MS must not be negative")

        if config.retry.timeout_seconds < 1:
            errors.append("HTTP_TIMEOUT must be at least 1 second")

        if config.cache.backend not in ('file', 'memory'):
            errors.append("CACHE_BACKEND must be 'file' or 'memory'")

        if config.cache.content_ttl_seconds < 1:
            errors.append("CONTENT_CACHE_TTL must be at least 1 second")

        if not 1 <= config.sources.newsapi_page_size <= 100:
            errors.append("NEWSAPI_PAGE_SIZE must be between 1 and 100")

        try:
            pytz.timezone(config.app.timezone)
        except pytz.UnknownTimeZoneError:
            errors.append(f"TIMEZONE '{config.app.timezone}' is not a known timezone")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.app.log_level not in valid_log_levels:
            errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

        if errors:
            raise ConfigurationError('environment', '; '.join(errors))

        logger.debug("Configuration validation passed")

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        numeric_level = getattr(logging, config.app.log_level)
        logging.getLogger().setLevel(numeric_level)

        if config.app.verbose_logging:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            formatter = logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S')
            handler.setFormatter(formatter)


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None
