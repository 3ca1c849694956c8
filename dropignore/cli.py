#!/usr/bin/env python3
"""
dropignore command line interface

- Scans a tree and syncs the Dropbox ignored marker from .dropIgnore files
- Marks explicitly listed files as ignored
- Reports verdicts without touching anything
- Creates a starter .dropIgnore
"""

import argparse
import json
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from . import __version__
from .attributes import create_attribute_service
from .config import DropIgnoreConfig
from .errors import DropIgnoreError, WalkCancelled
from .ignore import init_ignore_file
from .ignore.constants import SERVICE_CHOICES
from .sync import AttributeSynchronizer
from .utils import configure_logging, get_logger
from .walker import TreeWalker

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class DropIgnoreCLI:
    """Argument parsing and command dispatch"""

    def __init__(self, argv: Optional[List[str]] = None):
        self.argv = sys.argv[1:] if argv is None else argv
        self.cancel_event = threading.Event()

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser"""
        # SUPPRESS keeps a subcommand from resetting options given before it
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument('--service', choices=SERVICE_CHOICES, default=argparse.SUPPRESS,
            help='Where the ignored marker is stored (default: auto)')
        common.add_argument('--ignore-file', dest='ignore_filename', metavar='NAME',
            default=argparse.SUPPRESS,
            help='Rule file name (default: .dropIgnore)')
        common.add_argument('--pattern', dest='patterns', action='append', metavar='PATTERN',
            default=argparse.SUPPRESS,
            help='Extra pattern applied at the root (repeatable)')
        common.add_argument('--follow-symlinks', action='store_true', default=argparse.SUPPRESS,
            help='Descend into symlinked directories')
        common.add_argument('--dry-run', action='store_true', default=argparse.SUPPRESS,
            help='Show what would change without changing it')
        common.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
            help='Show debug output')
        common.add_argument('--log-level', default=argparse.SUPPRESS,
            help='Log level (TRACE, DEBUG, INFO, WARNING, ERROR)')
        common.add_argument('--log-file', default=argparse.SUPPRESS,
            help='Also write logs to this file')
        common.add_argument('--json-log', action='store_true', default=argparse.SUPPRESS,
            help='Emit logs as JSON lines')

        parser = argparse.ArgumentParser(
            prog='dropignore',
            description='Keep Dropbox from syncing files matched by .dropIgnore rules',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self.get_usage_examples(),
            parents=[common],
        )
        parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
        parser.add_argument('-f', '--files', nargs='+', metavar='FILE',
            help='Files to ignore (skips rule file scanning)')

        subparsers = parser.add_subparsers(dest='command', help='Commands')

        scan_parser = subparsers.add_parser('scan', parents=[common],
            help='Apply .dropIgnore rules below a directory (default)')
        scan_parser.add_argument('path', nargs='?', default='.',
            help='Directory to scan (default: current directory)')
        scan_parser.add_argument('--json', action='store_true',
            help='Print a JSON summary of the run')

        ignore_parser = subparsers.add_parser('ignore', parents=[common],
            help='Mark the given files as ignored')
        ignore_parser.add_argument('paths', nargs='+', metavar='FILE',
            help='Files to ignore')

        status_parser = subparsers.add_parser('status', parents=[common],
            help='Show computed verdicts and current markers')
        status_parser.add_argument('path', nargs='?', default='.',
            help='Directory to inspect (default: current directory)')
        status_parser.add_argument('--json', action='store_true',
            help='Output as JSON')
        status_parser.add_argument('--changed', action='store_true',
            help='Only list files whose marker would change')

        init_parser = subparsers.add_parser('init', parents=[common],
            help='Create a .dropIgnore file')
        init_parser.add_argument('path', nargs='?', default='.',
            help='Directory where to create the file (default: current directory)')
        init_parser.add_argument('--force', action='store_true',
            help='Overwrite an existing file')
        init_parser.add_argument('--minimal', '-m', action='store_true',
            help='Only include essential patterns')
        init_parser.add_argument('--add', '-a', action='append', dest='custom_patterns',
            help='Add custom pattern (can be used multiple times)')

        return parser

    def get_usage_examples(self) -> str:
        """Get usage examples for help text"""
        return """
Examples:
  dropignore                        # Apply rules below the current directory
  dropignore scan ~/Dropbox/code    # Apply rules below a directory
  dropignore scan --dry-run         # Show what would change
  dropignore status --changed       # List files whose marker is out of date
  dropignore -f build.log out.bin   # Ignore specific files
  dropignore init --minimal         # Create a starter .dropIgnore

Environment Variables:
  DROPIGNORE_FILENAME         Rule file name (default: .dropIgnore)
  DROPIGNORE_SERVICE          auto, xattr, stream, sidecar or memory
  DROPIGNORE_FOLLOW_SYMLINKS  Descend into symlinked directories
  DROPIGNORE_LOG_LEVEL        Log level
  DROPIGNORE_LOG_FORMAT       Set to json for JSON log lines
"""

    def parse_args(self) -> argparse.Namespace:
        return self.build_parser().parse_args(self.argv)

    def load_config(self, args: argparse.Namespace) -> DropIgnoreConfig:
        """Environment configuration with command-line overrides"""
        config = DropIgnoreConfig.from_env()
        patterns = getattr(args, 'patterns', None)
        return config.with_overrides(
            ignore_filename=getattr(args, 'ignore_filename', None),
            service=getattr(args, 'service', None),
            follow_symlinks=getattr(args, 'follow_symlinks', None),
            dry_run=getattr(args, 'dry_run', None),
            default_patterns=config.default_patterns + patterns if patterns else None,
        )

    def setup_logging(self, args: argparse.Namespace):
        level = getattr(args, 'log_level', None)
        if level is None and getattr(args, 'verbose', False):
            level = 'DEBUG'
        configure_logging(
            log_level=level,
            log_file=getattr(args, 'log_file', None),
            json_output=True if getattr(args, 'json_log', False) else None,
        )

    def run(self) -> int:
        """Main entry point"""
        args = self.parse_args()
        self.setup_logging(args)

        try:
            config = self.load_config(args)

            if args.files:
                return self.cmd_ignore(args, config, args.files)

            command = args.command or 'scan'
            if command == 'scan':
                return self.cmd_scan(args, config)
            if command == 'ignore':
                return self.cmd_ignore(args, config, args.paths)
            if command == 'status':
                return self.cmd_status(args, config)
            if command == 'init':
                return self.cmd_init(args, config)

            logger.error(f"Unknown command '{command}'")
            return EXIT_FAILURE
        except WalkCancelled as e:
            logger.error(str(e))
            return EXIT_FAILURE
        except DropIgnoreError as e:
            logger.error(str(e))
            return EXIT_FAILURE

    def _synchronizer(self, config: DropIgnoreConfig, root: Path) -> AttributeSynchronizer:
        service = create_attribute_service(
            config.service,
            root=root,
            attribute_name=config.attribute_name,
            sidecar_filename=config.sidecar_filename,
        )
        logger.debug(f"Using {service!r}")
        return AttributeSynchronizer(service, dry_run=config.dry_run)

    def cmd_scan(self, args: argparse.Namespace, config: DropIgnoreConfig) -> int:
        root = Path(getattr(args, 'path', '.')).absolute()
        synchronizer = self._synchronizer(config, root)
        walker = TreeWalker.from_config(config, synchronizer, cancel_event=self.cancel_event)

        with self._cancel_on_interrupt():
            result = walker.walk(root)

        if getattr(args, 'json', False):
            print(json.dumps(result.to_dict(), indent=2))

        if result.had_errors:
            logger.warning(
                f"Finished with problems: {result.walk.directories_skipped} directories skipped, "
                f"{result.walk.rule_files_skipped} rule files skipped, "
                f"{result.sync.errors} files not updated"
            )
        return EXIT_OK

    def cmd_ignore(self, args: argparse.Namespace, config: DropIgnoreConfig,
                   paths: List[str]) -> int:
        synchronizer = self._synchronizer(config, Path.cwd())
        logger.info("Files:")
        for path in paths:
            logger.info(path)

        stats = synchronizer.ignore_files(paths)
        synchronizer.flush()

        logger.info(f"{stats.ignored} files ignored, {stats.errors} errors")
        return EXIT_OK if stats.errors == 0 else EXIT_FAILURE

    def cmd_status(self, args: argparse.Namespace, config: DropIgnoreConfig) -> int:
        root = Path(args.path).absolute()
        service = create_attribute_service(
            config.service,
            root=root,
            attribute_name=config.attribute_name,
            sidecar_filename=config.sidecar_filename,
        )
        walker = TreeWalker.from_config(config, cancel_event=self.cancel_event)

        rows = []
        with self._cancel_on_interrupt():
            for file_path, ignored in walker.verdicts(root):
                try:
                    current = service.is_ignored(file_path)
                except DropIgnoreError as e:
                    logger.warning(str(e))
                    current = None
                if args.changed and current == ignored:
                    continue
                rows.append({
                    'path': file_path.relative_to(root).as_posix(),
                    'ignored': ignored,
                    'marked': current,
                })

        if args.json:
            print(json.dumps({'root': str(root), 'files': rows}, indent=2))
        else:
            for row in rows:
                verdict = 'ignored' if row['ignored'] else 'synced'
                flag = '' if row['marked'] == row['ignored'] else '  (out of date)'
                print(f"{verdict:8} {row['path']}{flag}")
        return EXIT_OK

    def cmd_init(self, args: argparse.Namespace, config: DropIgnoreConfig) -> int:
        path = Path(args.path).resolve()
        if not path.is_dir():
            logger.error(f"'{path}' is not a directory")
            return EXIT_FAILURE

        created = init_ignore_file(
            path,
            force=args.force,
            minimal=args.minimal,
            custom_patterns=args.custom_patterns,
            ignore_filename=config.ignore_filename,
        )

        ignore_path = path / config.ignore_filename
        if created:
            print(f"Created {ignore_path}")
            return EXIT_OK

        print(f"{ignore_path} already exists. Use --force to overwrite.")
        return EXIT_FAILURE

    def _cancel_on_interrupt(self):
        return _InterruptHandler(self.cancel_event)


class _InterruptHandler:
    """First Ctrl-C stops the walk at the next directory, the second aborts"""

    def __init__(self, cancel_event: threading.Event):
        self.cancel_event = cancel_event
        self._previous = None
        self._installed = False

    def _handle(self, signum, frame):
        if self.cancel_event.is_set():
            raise KeyboardInterrupt
        logger.warning("Interrupted, stopping at the next directory (Ctrl-C again to abort)")
        self.cancel_event.set()

    def __enter__(self):
        if threading.current_thread() is threading.main_thread():
            self._previous = signal.signal(signal.SIGINT, self._handle)
            self._installed = True
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._installed:
            signal.signal(signal.SIGINT, self._previous)
            self._installed = False
        return False


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    cli = DropIgnoreCLI(argv)
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
