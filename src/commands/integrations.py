#!/usr/bin/env python3
"""
Integrations command endpoints for checking external service configuration.
"""

import logging
from argparse import Namespace

from .base import BaseCommand

logger = logging.getLogger(__name__)


class IntegrationsCommand(BaseCommand):
    """Show and test the configured external integrations."""

    subcommands = ['status', 'test']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute integrations subcommand."""
        try:
            if subcommand == "status":
                return self.status(args)
            elif subcommand == "test":
                return self.test(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"integrations {subcommand}")

    def status(self, args: Namespace) -> int:
        """Show which integrations are configured."""
        config = self.config
        checks = [
            ("NewsAPI", bool(config.sources.newsapi_key)),
            ("SerpAPI", bool(config.sources.serpapi_key)),
            ("OpenAI", config.has_openai()),
            ("Email", config.has_email()),
            ("Slack", config.has_slack()),
        ]

        print("📊 Integration Status:")
        for name, configured in checks:
            print(f"   • {name}: {'✅ Configured' if configured else '❌ Missing'}")
        return 0

    def test(self, args: Namespace) -> int:
        """Send a test message to the operator channel."""
        notifier = self._container.get('slack_notifier')
        if notifier is None:
            print("❌ Slack webhook not configured (SLACK_WEBHOOK_URL)")
            return 1

        print("🔍 Testing Slack connection...")
        if notifier.test_connection():
            print("✅ Slack integration working")
            return 0
        print("❌ Slack integration failed")
        return 1
