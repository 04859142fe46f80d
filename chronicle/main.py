"""
Chronicle command line.

Thin caller around one LogStore: append an entry, print entries, or compact
the file. The store is always closed (queued writes flushed) before exit.

Usage:
    python -m chronicle [--config config.json] [--path app.log] log "Server started"
    python -m chronicle --path app.log log --raw "already formatted line"
    python -m chronicle --path app.log show [--date 24/12/2024] [--content started]
    python -m chronicle --path app.log cleanup
    python -m chronicle --path app.log serve --interval 3600

Property of Uncompromising Sensors LLC.
"""

import asyncio
import argparse
import signal
import sys
from typing import List, Optional

from chronicle.core.config import StoreConfig, loadStoreConfig
from chronicle.core.errors import ChronicleError, ConfigurationError
from chronicle.core.logStore import LogStore
from sdk.logging import getLogger, configureLogging


def buildParser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='chronicle', description='Single-file log store')
    parser.add_argument('--config', default=None, help='Path to JSON config file')
    parser.add_argument('--path', default=None, help='Backing log file (overrides config)')

    commands = parser.add_subparsers(dest='command', required=True)

    logCmd = commands.add_parser('log', help='Append an entry')
    logCmd.add_argument('text', help='Entry text')
    logCmd.add_argument('--raw', action='store_true', help='Write text verbatim (no timestamp)')

    showCmd = commands.add_parser('show', help='Print entries')
    showCmd.add_argument('--date', default=None, help='Date filter, e.g. 24/12/2024')
    showCmd.add_argument('--content', default=None, help='Substring filter')

    commands.add_parser('cleanup', help='Drop entries older than the retention window')

    serveCmd = commands.add_parser('serve', help='Compact periodically until interrupted')
    serveCmd.add_argument('--interval', type=float, default=None,
                          help='Seconds between clean-ups (default: cleanUpIntervalSeconds from config)')

    return parser


async def runCommand(args: argparse.Namespace, config: StoreConfig) -> int:
    """Execute one command against a store built from config."""
    log = getLogger()

    overrides = {}
    if args.command == 'log' and args.raw:
        overrides['autoFormat'] = False
    store = LogStore.fromConfig(config, **overrides)

    try:
        if args.command == 'log':
            # Awaited here so the CLI can report write failures
            await store.log(args.text)

        elif args.command == 'show':
            for entry in await store.getLogs(date=args.date, content=args.content):
                print(entry)

        elif args.command == 'cleanup':
            result = await store.cleanUp()
            log.info(f"[Main] Clean-up done: kept {len(result.kept)}, dropped {result.dropped}")

        elif args.command == 'serve':
            interval = args.interval if args.interval is not None else config.cleanUpIntervalSeconds
            if interval is None:
                raise ConfigurationError("serve needs --interval or cleanUpIntervalSeconds in the config")
            store.schedulePeriodicCleanUp(interval)

            stopEvent = asyncio.Event()
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.add_signal_handler(sig, stopEvent.set)
                except (NotImplementedError, RuntimeError):
                    pass  # Windows: fall back to KeyboardInterrupt

            log.info(f"[Main] Compacting {store.path} every {interval}s (Ctrl+C to stop)")
            await stopEvent.wait()
            log.info("[Main] Shutdown signal received")
    finally:
        await store.close()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns the process exit code."""
    args = buildParser().parse_args(argv)

    try:
        config = loadStoreConfig(args.config)
    except ConfigurationError as e:
        print(f"chronicle: {e}", file=sys.stderr)
        return 1

    if args.path:
        config.path = args.path

    try:
        configureLogging(**config.logging)
    except (TypeError, ValueError) as e:
        print(f"chronicle: invalid logging config: {e}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(runCommand(args, config))
    except ChronicleError as e:
        print(f"chronicle: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == '__main__':
    sys.exit(main())
