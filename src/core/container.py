#!/usr/bin/env python3
"""
Dependency Injection Container

Wires the lesson pipeline together from configuration. Components never
read configuration themselves; the factories below pass values in
through constructors.
"""

import logging
from typing import Any, Dict, Callable, TypeVar, Optional
from functools import wraps
import threading

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Container:
    """Simple dependency injection container with lifecycle management."""

    def __init__(self):
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def register_singleton(self, service_name: str, factory: Callable[[], T]) -> None:
        """Register a service created once on first use and reused."""
        with self._lock:
            factory._is_singleton = True
            self._factories[service_name] = factory
            self._singletons.pop(service_name, None)

    def register_factory(self, service_name: str, factory: Callable[[], T]) -> None:
        """Register a service created anew on every get()."""
        with self._lock:
            self._factories[service_name] = factory

    def register_instance(self, service_name: str, instance: T) -> None:
        """Register a pre-built instance (tests use this to swap in fakes)."""
        with self._lock:
            self._singletons[service_name] = instance

    def get(self, service_name: str) -> Any:
        """
        Get service instance by name.

        Raises:
            KeyError: If service is not registered
        """
        if service_name in self._singletons:
            return self._singletons[service_name]

        if service_name not in self._factories:
            raise KeyError(f"Service '{service_name}' not registered")

        with self._lock:
            factory = self._factories[service_name]
            if getattr(factory, '_is_singleton', False):
                if service_name not in self._singletons:
                    self._singletons[service_name] = factory()
                    logger.debug(f"Created singleton instance for '{service_name}'")
                return self._singletons[service_name]
            return factory()

    def has(self, service_name: str) -> bool:
        """Check if service is registered."""
        return service_name in self._factories or service_name in self._singletons

    def clear(self) -> None:
        """Clear all registered services and instances."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()


def singleton(factory_func: Callable[[], T]) -> Callable[[], T]:
    """Decorator to mark a factory function as singleton."""
    @wraps(factory_func)
    def wrapper():
        return factory_func()

    wrapper._is_singleton = True
    return wrapper


# Global container instance
_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get global container instance."""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = Container()
                _setup_default_services(_container)
    return _container


def reset_container() -> None:
    """Reset global container (useful for testing)."""
    global _container
    with _container_lock:
        if _container:
            _container.clear()
        _container = None


def _setup_default_services(container: Container) -> None:
    """Set up default service registrations with configuration injection."""

    @singleton
    def create_config():
        from core.config import get_config
        return get_config()

    @singleton
    def create_http_client():
        from core.http_client import RetryingHttpClient
        config = container.get('config')
        return RetryingHttpClient(
            retries=config.retry.retries,
            base_delay_ms=config.retry.base_delay_ms,
            timeout=config.retry.timeout_seconds
        )

    @singleton
    def create_cache():
        from core.cache import create_cache
        config = container.get('config')
        return create_cache(config.cache.backend, config.cache.path)

    @singleton
    def create_aggregator():
        from core.aggregation import ContentAggregator
        from core.sources import KeywordSearchSource, WebSearchSource, FeedSource
        config = container.get('config')
        http = container.get('http_client')
        sources = config.sources
        return ContentAggregator(
            cache=container.get('cache'),
            keyword_source=KeywordSearchSource(
                http, sources.newsapi_key, sources.newsapi_url,
                language=sources.newsapi_language, page_size=sources.newsapi_page_size
            ),
            web_source=WebSearchSource(
                http, sources.serpapi_key, sources.serpapi_url,
                num_results=sources.serpapi_num_results
            ),
            feed_source=FeedSource(http, entry_limit=sources.feed_entry_limit),
            ttl_seconds=config.cache.content_ttl_seconds,
            max_queries=sources.max_queries_per_track,
            max_feeds=sources.max_feeds_per_track
        )

    @singleton
    def create_openai_client():
        from core.exceptions import ConfigurationError
        from integrations.openai_client import OpenAIClient
        config = container.get('config')
        if not config.has_openai():
            raise ConfigurationError('OPENAI_API_KEY', 'required to compose lessons')
        return OpenAIClient(
            api_key=config.integrations.openai_api_key,
            model=config.integrations.openai_model
        )

    @singleton
    def create_orchestrator():
        from core.generation import LessonComposer, LessonOrchestrator
        composer = LessonComposer(container.get('openai_client'))
        return LessonOrchestrator(container.get('aggregator'), composer)

    @singleton
    def create_history():
        from core.history import HistoryStore
        return HistoryStore(container.get('config').app.history_path)

    def create_email_sender():
        from integrations.email_sender import EmailSender
        config = container.get('config')
        if not config.has_email():
            return None
        integrations = config.integrations
        return EmailSender(
            host=integrations.smtp_host,
            port=integrations.smtp_port,
            username=integrations.smtp_username,
            password=integrations.smtp_password,
            sender=integrations.email_sender,
            recipient=config.app.lesson_recipient
        )

    def create_slack_notifier():
        from integrations.slack_notifier import SlackNotifier
        config = container.get('config')
        if not config.has_slack():
            return None
        return SlackNotifier(config.integrations.slack_webhook_url)

    def create_daily_run():
        from core.pipeline import DailyLessonRun
        return DailyLessonRun(
            orchestrator=container.get('orchestrator'),
            history=container.get('history'),
            email_sender=container.get('email_sender'),
            notifier=container.get('slack_notifier'),
            timezone_name=container.get('config').app.timezone
        )

    # Register services
    container.register_singleton('config', create_config)
    container.register_singleton('http_client', create_http_client)
    container.register_singleton('cache', create_cache)
    container.register_singleton('aggregator', create_aggregator)
    container.register_singleton('openai_client', create_openai_client)
    container.register_singleton('orchestrator', create_orchestrator)
    container.register_singleton('history', create_history)

    # Non-singletons (None when the channel is not configured)
    container.register_factory('email_sender', create_email_sender)
    container.register_factory('slack_notifier', create_slack_notifier)
    container.register_factory('daily_run', create_daily_run)

    logger.debug("Default services registered in container")

