"""Command line entry point for stack-to-graph.

Subcommands:
- parse: print the frames of a captured stack as JSON lines
- report: parse a captured stack and write it to the configured sink

The stack file may be '-' to read from stdin.
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from stack_to_graph._version import __version__

if TYPE_CHECKING:
    from stack_to_graph.config.schema import AppConfig

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from stack_to_graph.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.INFO
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse (default: sys.argv[1:])

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="stack-to-graph",
        description="Turn captured call stacks into call graphs",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Print parsed frames as JSON lines")
    parse_cmd.add_argument("stack_file", help="File containing the stack text, or '-'")

    report_cmd = subparsers.add_parser("report", help="Report a stack to the graph sink")
    report_cmd.add_argument("stack_file", help="File containing the stack text, or '-'")
    report_cmd.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config/config.yaml"),
        help="Path to configuration file (default: config/config.yaml)",
    )

    health_cmd = subparsers.add_parser("health", help="Check configuration and sink")
    health_cmd.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config/config.yaml"),
        help="Path to configuration file (default: config/config.yaml)",
    )

    return parser.parse_args(argv)


def read_stack(stack_file: str) -> str:
    """Read stack text from a file, or stdin for '-'."""
    if stack_file == "-":
        return sys.stdin.read()
    return Path(stack_file).read_text()


def reconfigure_logging(config: "AppConfig", debug: bool = False) -> None:
    """Reconfigure logging from the config file's ``logging`` section.

    Args:
        config: Loaded application configuration
        debug: Keep DEBUG level regardless of the configured level
    """
    from stack_to_graph.utils.logging import LogLevel, configure_logging

    configure_logging(
        level=LogLevel.DEBUG if debug else config.logging.level,
        log_format=config.logging.format,
        file_path=config.logging.file.path if config.logging.file.enabled else None,
        file_enabled=config.logging.file.enabled,
    )


def run_parse(stack_file: str) -> int:
    """Print every parsed frame of a stack as one JSON object per line."""
    from stack_to_graph.core.stack_parser import StackParser

    frames = StackParser().parse(read_stack(stack_file))
    for frame in frames:
        print(json.dumps(asdict(frame)))
    return 0


def run_report(stack_file: str, config_path: Path, debug: bool = False) -> int:
    """Report a stack to the sink selected in the configuration."""
    from stack_to_graph.config.loader import load_config
    from stack_to_graph.core.reporter import create_reporter
    from stack_to_graph.utils.errors import SinkWriteError

    log.info("loading_configuration", path=str(config_path))
    config = load_config(config_path)
    reconfigure_logging(config, debug=debug)

    with create_reporter(config) as reporter:
        try:
            written = reporter.report_stacktrace(read_stack(stack_file))
        except SinkWriteError as e:
            log.error("report_failed", error=str(e))
            return 1

    log.info("report_complete", written=written)
    return 0


def run_health(config_path: Path, debug: bool = False) -> int:
    """Run health checks and print the report as JSON."""
    from stack_to_graph.adapters.graph import create_sink
    from stack_to_graph.config.loader import load_config
    from stack_to_graph.utils.health import HealthChecker

    config = load_config(config_path)
    reconfigure_logging(config, debug=debug)

    sink = create_sink(config)
    try:
        report = HealthChecker(config, sink).run_all_checks()
    finally:
        sink.close()

    print(json.dumps(report.to_dict()))
    return 0 if report.healthy else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        if args.command == "parse":
            return run_parse(args.stack_file)
        if args.command == "report":
            return run_report(args.stack_file, args.config, debug=args.debug)
        return run_health(args.config, debug=args.debug)
    except FileNotFoundError as e:
        log.error("file_not_found", error=str(e))
        return 1
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
