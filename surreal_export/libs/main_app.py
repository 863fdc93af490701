"""
Main Application

Command-line layer of the export tool: parses arguments, resolves the
connection parameters, runs the export and maps failures to messages and
exit codes.
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

from .. import __version__
from .core import ConfigManager, ConnectionParameters, setup_logging
from .core.constants import ConnectionConstants, ErrorMessages
from .core.exceptions import ExportError
from .export import ExportClient, ExportResult, require_single_path

logger = logging.getLogger(__name__)


class ExportManager:
    """Main application orchestrator for the export tool"""

    def __init__(
        self,
        config_provider: Optional[ConfigManager] = None,
        export_client: Optional[ExportClient] = None,
        skip_tls: bool = False
    ):
        """
        Initialize ExportManager with dependency injection

        Args:
            config_provider: Configuration provider (defaults to ConfigManager)
            export_client: Export client (defaults to ExportClient)
            skip_tls: Whether to skip TLS verification on the default client
        """
        self.skip_tls = skip_tls
        self.config_manager = config_provider or ConfigManager()
        self.export_client = export_client or ExportClient(skip_tls=skip_tls)

    def resolve_connection(self, overrides: Optional[Dict[str, Optional[str]]] = None) -> ConnectionParameters:
        """
        Resolve connection parameters from flags, environment and config

        Args:
            overrides: Command-line values, None where the flag was not given

        Returns:
            ConnectionParameters: Immutable parameters for one export
        """
        return self.config_manager.resolve_connection(overrides)

    def run_export(self, paths: List[str], overrides: Optional[Dict[str, Optional[str]]] = None) -> ExportResult:
        """
        Run one export, raising on failure

        Args:
            paths: Positional destination arguments (exactly one expected)
            overrides: Command-line connection values

        Returns:
            ExportResult: Outcome of the successful export

        Raises:
            ExportError: On any failure, tagged with its kind
        """
        destination = require_single_path(paths)
        params = self.resolve_connection(overrides)
        return self.export_client.export(params, destination)

    def export(self, paths: List[str], overrides: Optional[Dict[str, Optional[str]]] = None) -> int:
        """
        Run one export and report the outcome

        Args:
            paths: Positional destination arguments (exactly one expected)
            overrides: Command-line connection values

        Returns:
            int: Exit code (0 for success, 1 for error)
        """
        try:
            self.run_export(paths, overrides)
            return 0
        except ExportError as e:
            logger.error(f"Export failed ({e.kind}): {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            self.export_client.close()


def create_export_manager(config_provider: Optional[ConfigManager] = None,
                          skip_tls: bool = False) -> ExportManager:
    """
    Factory function to create ExportManager with default dependencies

    Args:
        config_provider: Loaded configuration provider (optional)
        skip_tls: Whether to skip TLS verification

    Returns:
        ExportManager: Configured instance
    """
    return ExportManager(config_provider=config_provider, skip_tls=skip_tls)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the export command"""
    parser = argparse.ArgumentParser(
        prog='surreal-export',
        description='Export data from an existing database',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Example:\n  surreal-export --auth root:root backup.db"
    )

    # Arity is validated by the application so a usage error is reported the same way as others
    parser.add_argument('paths', nargs='*', metavar='file', help='Output file for the exported data')

    connection_group = parser.add_argument_group('connection')
    connection_group.add_argument(
        '--auth', '-a',
        help=f'Master authentication details to use when connecting (default: {ConnectionConstants.DEFAULT_AUTH})'
    )
    connection_group.add_argument(
        '--scheme',
        help=f'HTTP connection scheme to use to connect to the database (default: {ConnectionConstants.DEFAULT_SCHEME})'
    )
    connection_group.add_argument(
        '--host',
        help=f'Database server host to connect to (default: {ConnectionConstants.DEFAULT_HOST})'
    )
    connection_group.add_argument(
        '--port',
        help=f'Database server port to connect to (default: {ConnectionConstants.DEFAULT_PORT})'
    )
    connection_group.add_argument('--skip-tls', action='store_true', help='Skip TLS verification for insecure requests')

    config_group = parser.add_argument_group('configuration')
    config_group.add_argument('--config', help='Configuration file path')
    config_group.add_argument('--generate-config', action='store_true',
                              help='Generate configuration template (stdout by default, use --output to save to file)')
    config_group.add_argument('--output', help='Output directory for the generated configuration file')

    parser.add_argument('--verbose', '-v', action='store_true', help='Enable informational logging')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def handle_generate_config(args, config_manager: ConfigManager) -> int:
    """Print or write the configuration template"""
    if args.output:
        config_path = config_manager.generate_config_template(args.output)
        print(f"Configuration template written to {config_path}")
    else:
        print(config_manager.get_config_template_content())
    return 0


def connection_overrides_from_args(args) -> Dict[str, Optional[str]]:
    """Extract the connection values given on the command line"""
    return {
        'auth': args.auth,
        'scheme': args.scheme,
        'host': args.host,
        'port': args.port,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug, verbose=args.verbose)

    try:
        config_manager = ConfigManager(custom_config_path=args.config)

        if args.generate_config:
            return handle_generate_config(args, config_manager)

        # Checked before any configuration or network work
        require_single_path(args.paths)

        config_manager.load_config()

        debug = args.debug or bool(config_manager.get_value('global.debug', False))
        verbose = args.verbose or bool(config_manager.get_value('global.verbose', False))
        if (debug, verbose) != (args.debug, args.verbose):
            setup_logging(debug=debug, verbose=verbose)

        skip_tls = args.skip_tls or bool(config_manager.get_value('global.skip_tls', False))

        export_manager = create_export_manager(config_provider=config_manager, skip_tls=skip_tls)
        return export_manager.export(args.paths, connection_overrides_from_args(args))

    except ExportError as e:
        logger.error(f"Export failed ({e.kind}): {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(f"\n{ErrorMessages.CANCELLED}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
