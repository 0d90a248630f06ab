#!/usr/bin/env python3
"""
CLI Router for the daily lesson pipeline.

Modular command architecture: each top-level command maps to a command
class in the ``commands`` package.
"""

import argparse
import logging
import sys
from typing import Optional, List

# Load environment variables first
import core.env_loader  # Auto-loads .env file

from commands import get_command, COMMANDS
from core.config import get_config_manager
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for lesson pipeline commands.

    Command structure:
    - python run.py lesson generate --track data-science-ml --no-email
    - python run.py lesson preview --track software-engineering
    - python run.py history dashboard --output dashboard.json
    - python run.py cache clear
    """

    def __init__(self, container=None):
        """Initialize CLI router."""
        self.container = container
        self._command_parsers = {}
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Daily micro-lesson generator",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_lesson_parser(subparsers)
        self._add_history_parser(subparsers)
        self._add_cache_parser(subparsers)
        self._add_integrations_parser(subparsers)

        return parser

    def _add_lesson_parser(self, subparsers):
        """Add lesson command parser."""
        lesson_parser = subparsers.add_parser(
            'lesson',
            help='Generate and preview lessons'
        )
        self._command_parsers['lesson'] = lesson_parser

        lesson_subparsers = lesson_parser.add_subparsers(
            dest='subcommand',
            help='Lesson operations',
            metavar='{generate,preview}'
        )

        # Generate subcommand
        generate_parser = lesson_subparsers.add_parser('generate', help="Generate today's lessons, record and email them")
        generate_parser.add_argument('--track', nargs='+', default=['all'], help='Tracks by name or slug (default: all)')
        generate_parser.add_argument('--date', default=None, help='Generate for this date (YYYY-MM-DD) instead of today')
        generate_parser.add_argument('--no-email', action='store_true', help='Skip email delivery')
        generate_parser.add_argument('--dry-run', action='store_true', help='Print lessons only; no history, email or Slack')

        # Preview subcommand
        preview_parser = lesson_subparsers.add_parser('preview', help='Generate one lesson and print it')
        preview_parser.add_argument('--track', required=True, help='Track name or slug')
        preview_parser.add_argument('--date', default=None, help='Preview for this date (YYYY-MM-DD)')
        preview_parser.add_argument('--html', action='store_true', help='Print the HTML email body')

    def _add_history_parser(self, subparsers):
        """Add history command parser."""
        history_parser = subparsers.add_parser(
            'history',
            help='Lesson history and dashboard data'
        )
        self._command_parsers['history'] = history_parser

        history_subparsers = history_parser.add_subparsers(
            dest='subcommand',
            help='History operations',
            metavar='{stats,dashboard,recent}'
        )

        history_subparsers.add_parser('stats', help='Show lesson history statistics')

        dashboard_parser = history_subparsers.add_parser('dashboard', help='Dashboard data as JSON')
        dashboard_parser.add_argument('--output', default=None, help='Write JSON to this file instead of stdout')

        recent_parser = history_subparsers.add_parser('recent', help='Show recent lessons')
        recent_parser.add_argument('--limit', type=int, default=5, help='Number of lessons to show (default: 5)')

    def _add_cache_parser(self, subparsers):
        """Add cache command parser."""
        cache_parser = subparsers.add_parser(
            'cache',
            help='Aggregated content cache'
        )
        self._command_parsers['cache'] = cache_parser

        cache_subparsers = cache_parser.add_subparsers(
            dest='subcommand',
            help='Cache operations',
            metavar='{stats,clear}'
        )

        cache_subparsers.add_parser('stats', help='Show cache status per track')

        clear_parser = cache_subparsers.add_parser('clear', help='Clear cached content')
        clear_parser.add_argument('--track', nargs='+', default=['all'], help='Tracks to clear (default: all)')

    def _add_integrations_parser(self, subparsers):
        """Add integrations command parser."""
        integrations_parser = subparsers.add_parser(
            'integrations',
            help='External service configuration'
        )
        self._command_parsers['integrations'] = integrations_parser

        integrations_subparsers = integrations_parser.add_subparsers(
            dest='subcommand',
            help='Integration operations',
            metavar='{status,test}'
        )

        integrations_subparsers.add_parser('status', help='Show which integrations are configured')
        integrations_subparsers.add_parser('test', help='Send a test message to the Slack webhook')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  # Scheduled mode (all tracks, email + Slack when configured)
  python run.py lesson generate

  # Manual runs
  python run.py lesson generate --track cloud-devops --no-email
  python run.py lesson generate --dry-run
  python run.py lesson preview --track data-science-ml --html

  # Other commands
  python run.py history stats
  python run.py history dashboard --output dashboard.json
  python run.py cache clear
  python run.py integrations test
"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args = self.parser.parse_args(args)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self._command_parsers[args.command].print_help()
            return 1

        try:
            command = get_command(args.command, self.container)
            return command.execute(subcommand, args)
        except Exception as e:
            logger.error(f"Error executing {args.command} {subcommand}: {e}", exc_info=True)
            return 1


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        get_config_manager().update_logging()
    except ConfigurationError as e:
        logger.error(e.message)
        return 78

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
