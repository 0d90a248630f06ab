#!/usr/bin/env python3
"""
Cache command endpoints for the aggregated content cache.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.aggregation import content_cache_key

logger = logging.getLogger(__name__)


class CacheCommand(BaseCommand):
    """Inspect and clear the aggregated content cache."""

    subcommands = ['stats', 'clear']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute cache subcommand."""
        try:
            if subcommand == "stats":
                return self.stats(args)
            elif subcommand == "clear":
                return self.clear(args)
            else:
                return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"cache {subcommand}")

    def stats(self, args: Namespace) -> int:
        """Show which tracks have fresh cached content."""
        cache = self.cache
        stats = cache.get_stats()

        print(f"\n=== Content Cache ({stats['backend']}) ===")
        print(f"📦 Entries: {len(cache)}")
        print(f"⏳ TTL: {self.config.cache.content_ttl_seconds}s")
        for track in self.config.tracks:
            fresh = cache.get(content_cache_key(track)) is not None
            print(f"  • {track.name}: {'✅ fresh' if fresh else 'empty or expired'}")
        return 0

    def clear(self, args: Namespace) -> int:
        """Drop cached content for the selected tracks (all by default)."""
        tracks = self.resolve_tracks(getattr(args, 'track', None))
        cache = self.cache

        if len(tracks) == len(self.config.tracks):
            cache.clear()
            print("🧹 Cleared all cached content")
            return 0

        for track in tracks:
            cache.delete(content_cache_key(track))
            print(f"🧹 Cleared cached content for {track.name}")
        return 0
