"""CLI entry point for the emergency alert dispatcher.

This module sends a single emergency alert from the command line,
going through the same method bridge the application layer uses.

Usage:
    python -m emergency_alert_dispatch [options]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from typing import Any, NoReturn

from pydantic import ValidationError

from emergency_alert_dispatch import __version__
from emergency_alert_dispatch.authorization import StaticAuthorizer
from emergency_alert_dispatch.bridge import (
    METHOD_SEND_EMERGENCY_SMS,
    METHOD_TRIGGER_WEATHER_EMERGENCY,
    MethodBridge,
)
from emergency_alert_dispatch.config import Settings, clear_settings_cache, get_settings
from emergency_alert_dispatch.dispatch.dispatcher import AlertDispatcher
from emergency_alert_dispatch.dispatch.errors import ConfigurationError
from emergency_alert_dispatch.dispatch.plan import build_dispatch_plan
from emergency_alert_dispatch.dispatch.rate_limiter import RateLimiter
from emergency_alert_dispatch.dispatch.transports import (
    DryRunTransport,
    SmsGatewayTransport,
    TransportClient,
)
from emergency_alert_dispatch.metrics import start_metrics_server

# Application info
APP_NAME = "Emergency Alert Dispatch"
APP_VERSION = __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

CATEGORY_METHODS = {
    "standard": METHOD_SEND_EMERGENCY_SMS,
    "weather": METHOD_TRIGGER_WEATHER_EMERGENCY,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="emergency-alert-dispatch",
        description="Broadcast an emergency alert to the configured contacts.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m emergency_alert_dispatch --location "MG Road" --message "Accident"
  python -m emergency_alert_dispatch --category weather --condition hailstorm --temperature -5
  python -m emergency_alert_dispatch --config-check     Validate config and exit
  python -m emergency_alert_dispatch --dry-run ...      Log alerts instead of sending
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    parser.add_argument(
        "--config-check",
        action="store_true",
        help="Validate configuration and recipient lists, then exit",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level (default: from settings)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log alerts instead of sending them",
    )

    alert = parser.add_argument_group("alert")
    alert.add_argument(
        "--category",
        choices=sorted(CATEGORY_METHODS),
        default="standard",
        help="Alert category (default: standard)",
    )
    alert.add_argument("--location", default="", help="Location of the emergency")
    alert.add_argument("--message", default="", help="Free-text alert message")
    alert.add_argument(
        "--priority",
        action="store_true",
        help="Flag the alert as high priority",
    )
    alert.add_argument("--condition", default="", help="Weather condition (weather alerts)")
    alert.add_argument(
        "--temperature",
        type=float,
        default=0.0,
        help="Temperature in degrees Celsius (weather alerts)",
    )

    return parser


def configure_logging(level: str) -> None:
    """Configure structured logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if level == "DEBUG" else "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def print_banner() -> None:
    """Print the application startup banner to stderr."""
    banner = f"""
╔══════════════════════════════════════════════════════════════╗
║   {APP_NAME:^56}   ║
║   {"v" + APP_VERSION:^56}   ║
╚══════════════════════════════════════════════════════════════╝
"""
    print(banner, file=sys.stderr)


def validate_config() -> Settings | None:
    """Validate and load configuration.

    Returns:
        Settings instance if valid, None if invalid.
    """
    try:
        clear_settings_cache()
        return get_settings()
    except ValidationError as e:
        print("Configuration validation failed:", file=sys.stderr)
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"  {field}: {msg}", file=sys.stderr)
        return None


def run_config_check(settings: Settings) -> int:
    """Validate recipient lists and print the configuration summary.

    Args:
        settings: Validated settings.

    Returns:
        Exit code.
    """
    try:
        plan = build_dispatch_plan(settings)
    except ConfigurationError as e:
        print(f"Recipient configuration invalid: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    summary = settings.redacted_summary()
    print("Configuration is valid!")
    print()
    print("Configuration:")
    for key, value in summary.items():
        print(f"  {key}: {value}")
    print()
    print("Dispatch plans:")
    for category in plan.categories:
        recipients = plan.resolve(category).recipients
        roles = ", ".join(r.role for r in recipients)
        print(f"  {category.value}: {len(recipients)} recipients ({roles})")
    print()
    if settings.sms_gateway.enabled:
        print("  SMS gateway: configured")
    else:
        print("  SMS gateway: not configured (only --dry-run will work)")
    return EXIT_SUCCESS


def build_transport(settings: Settings, dry_run: bool) -> TransportClient:
    """Select the transport for this run.

    Raises:
        ConfigurationError: If a real send is requested without a gateway.
    """
    if dry_run:
        return DryRunTransport()

    gateway = settings.sms_gateway
    if gateway.url is None or gateway.api_key is None:
        raise ConfigurationError(
            "SMS_GATEWAY_URL and SMS_GATEWAY_API_KEY are required unless --dry-run is set"
        )
    return SmsGatewayTransport(
        gateway.url,
        gateway.api_key.get_secret_value(),
        sender_id=gateway.sender_id,
        timeout=gateway.timeout,
    )


def create_bridge(settings: Settings, dry_run: bool) -> MethodBridge:
    """Wire plan, transport, pacing and authorization into a bridge."""
    interval = settings.dispatch.send_interval_seconds
    dispatcher = AlertDispatcher(
        build_dispatch_plan(settings),
        build_transport(settings, dry_run),
        rate_limiter_factory=lambda: RateLimiter(interval),
    )
    authorizer = StaticAuthorizer(granted=settings.sms_permission_granted or dry_run)
    return MethodBridge(dispatcher, authorizer)


def build_call(args: argparse.Namespace) -> tuple[str, dict[str, Any]]:
    """Translate CLI arguments into a bridge method call."""
    method = CATEGORY_METHODS[args.category]
    if method == METHOD_TRIGGER_WEATHER_EMERGENCY:
        arguments: dict[str, Any] = {
            "location": args.location,
            "weatherCondition": args.condition,
            "temperature": args.temperature,
            "message": args.message,
            "priority": args.priority,
        }
    else:
        arguments = {
            "location": args.location,
            "message": args.message,
            "priority": args.priority,
        }
    return method, arguments


async def run_dispatch(bridge: MethodBridge, method: str, arguments: dict[str, Any]) -> int:
    """Send one alert through the bridge and print the reply.

    Returns:
        Exit code.
    """
    logger = logging.getLogger(__name__)
    try:
        response = await bridge.handle(method, arguments)
    except Exception as e:
        logger.exception("Dispatch failed: %s", e)
        return EXIT_ERROR

    print(json.dumps(response))
    return EXIT_ERROR if "code" in response else EXIT_SUCCESS


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Validate configuration first
    settings = validate_config()
    if settings is None:
        sys.exit(EXIT_CONFIG_ERROR)

    log_level = args.log_level or settings.log_level
    configure_logging(log_level)

    print_banner()

    if args.config_check:
        sys.exit(run_config_check(settings))

    dry_run = args.dry_run or settings.dry_run

    try:
        bridge = create_bridge(settings, dry_run)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    if settings.metrics_port:
        start_metrics_server(settings.metrics_port)

    method, arguments = build_call(args)
    try:
        exit_code = asyncio.run(run_dispatch(bridge, method, arguments))
    except KeyboardInterrupt:
        exit_code = EXIT_INTERRUPTED
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
