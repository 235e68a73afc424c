#!/usr/bin/env python3
"""
mc-bridge - Mission Control ↔ CRM task synchronization.

Administrative entry point: inspect the bridge, trigger a poll or push a
single task by hand.
"""

import argparse
import logging
import sys

from mc_bridge.core.config import load_config, get_default_config_path
from mc_bridge.commands import (
    StatusCommand,
    PollCommand,
    PushCommand,
    ConfigureCommand,
)


def main(argv=None):
    """Main entry point for mc-bridge."""
    parser = argparse.ArgumentParser(
        description="Bidirectional task sync between Mission Control and the CRM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mc-bridge status                # Show bridge status
  mc-bridge status --health       # Run health checks against the CRM
  mc-bridge poll                  # Pull CRM changes now
  mc-bridge poll --since 2026-03-01T00:00:00Z
  mc-bridge push TASK_ID          # Push one MC task to the CRM
  mc-bridge configure --url URL --key KEY
        """
    )

    default_config = get_default_config_path()

    parser.add_argument(
        '--config',
        help=f'Path to configuration file (default: {default_config})',
        default=None
    )

    parser.add_argument(
        '--db',
        help='Path to the Mission Control SQLite database (overrides config)',
        default=None
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    status_parser = subparsers.add_parser('status', help='Show bridge status')
    status_parser.add_argument(
        '--health',
        action='store_true',
        help='Run connectivity and poller health checks'
    )

    poll_parser = subparsers.add_parser('poll', help='Run one CRM → MC poll cycle')
    poll_parser.add_argument(
        '--since',
        help='ISO timestamp to poll from (default: now)',
        default=None
    )

    push_parser = subparsers.add_parser('push', help='Push one MC task to the CRM')
    push_parser.add_argument('task_id', help='Mission Control task id')

    configure_parser = subparsers.add_parser('configure', help='Save bridge settings')
    configure_parser.add_argument('--url', help='Supabase project URL')
    configure_parser.add_argument('--key', help='Supabase service key')
    configure_parser.add_argument('--agency-id', help='Agency id stamped on CRM tasks')
    configure_parser.add_argument('--poll-interval', type=float, help='Seconds between polls')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    if not args.command:
        parser.print_help()
        return 1

    config = load_config(args.config)
    if args.db:
        config.db_path = args.db

    if args.verbose:
        actual_config_path = args.config if args.config else default_config
        print(f"Using config: {actual_config_path}")

    try:
        if args.command == 'status':
            success = StatusCommand(config, verbose=args.verbose).run(health=args.health)

        elif args.command == 'poll':
            success = PollCommand(config, verbose=args.verbose).run(since=args.since)

        elif args.command == 'push':
            success = PushCommand(config, verbose=args.verbose).run(args.task_id)

        elif args.command == 'configure':
            success = ConfigureCommand(config, verbose=args.verbose).run(
                config_path=args.config,
                url=args.url,
                key=args.key,
                agency_id=args.agency_id,
                poll_interval=args.poll_interval,
            )

        else:
            parser.print_help()
            return 1

        return 0 if success else 1

    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
