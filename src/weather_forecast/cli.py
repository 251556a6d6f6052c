"""CLI: look up the forecast for an address, or clear cached forecasts."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import ConfigError, GeocodingError, InvalidKeyError, WeatherApiError
from .log_setup import configure_logging, setup_logger
from .models import ResultEnvelope
from .orchestrator import ForecastOrchestrator, build_orchestrator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse forecast CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show current conditions and a multi-day forecast for an address."
    )
    parser.add_argument("address", nargs="?", default=None, help="Free-text street address.")
    parser.add_argument(
        "--clear-cache",
        metavar="ZIP",
        default=None,
        help="Drop the cached forecast for one zip/postal code.",
    )
    parser.add_argument(
        "--clear-all",
        action="store_true",
        help="Drop every cached forecast.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the result envelope as JSON instead of tables.",
    )
    args = parser.parse_args(argv)
    if args.address is None and args.clear_cache is None and not args.clear_all:
        parser.error("an address, --clear-cache ZIP or --clear-all is required")
    return args


def _format_ts(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def _fmt(value: object, suffix: str = "") -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:g}{suffix}"
    return f"{value}{suffix}"


def _print_result(console: Console, result: ResultEnvelope) -> None:
    location = result.location
    current = result.forecast.current
    source = "cache" if result.from_cache else "live"
    console.print(f"[bold]{location.formatted_address}[/bold] (zip {location.postal_key})")
    console.print(
        f"Source={source} cached_at={_format_ts(result.cached_at)} "
        f"expires_at={_format_ts(result.expires_at)}"
    )

    now_table = Table(title="Current Conditions")
    now_table.add_column("Temp")
    now_table.add_column("Feels Like")
    now_table.add_column("Condition", overflow="fold")
    now_table.add_column("Humidity")
    now_table.add_column("Wind")
    now_table.add_column("UV")
    now_table.add_row(
        f"{_fmt(current.temperature_f, '°F')} / {_fmt(current.temperature_c, '°C')}",
        f"{_fmt(current.feels_like_f, '°F')} / {_fmt(current.feels_like_c, '°C')}",
        current.condition or "-",
        _fmt(current.humidity, "%"),
        " ".join(
            part for part in [_fmt(current.wind_mph, " mph"), current.wind_direction or ""] if part
        ),
        _fmt(current.uv_index),
    )
    console.print(now_table)

    if not result.forecast.days:
        console.print("No forecast days returned.")
        return

    table = Table(title=f"{len(result.forecast.days)}-Day Forecast")
    table.add_column("Date")
    table.add_column("High / Low")
    table.add_column("Condition", overflow="fold")
    table.add_column("Rain %")
    table.add_column("Precip")
    table.add_column("Sunrise / Sunset")
    for day in result.forecast.days:
        table.add_row(
            day.date or "-",
            f"{_fmt(day.max_temp_f, '°F')} / {_fmt(day.min_temp_f, '°F')}",
            day.condition or "-",
            _fmt(day.chance_of_rain),
            _fmt(day.total_precip_in, " in"),
            f"{day.astro.sunrise or '-'} / {day.astro.sunset or '-'}",
        )
    console.print(table)


def _run(
    args: argparse.Namespace,
    orchestrator: ForecastOrchestrator,
    console: Console,
    logger: logging.Logger,
) -> int:
    if args.clear_all:
        cleared = orchestrator.clear_all_caches()
        console.print("All cached forecasts cleared." if cleared else "Cache clear failed.")
        return 0 if cleared else 1
    if args.clear_cache is not None:
        cleared = orchestrator.clear_cache(args.clear_cache)
        console.print(
            f"Cache cleared for {args.clear_cache.strip()}." if cleared else "Cache clear failed."
        )
        return 0 if cleared else 1

    try:
        result = orchestrator.get_forecast(args.address)
    except GeocodingError as exc:
        logger.warning("Geocoding error for address '%s': %s", args.address, exc)
        console.print(f"Unable to find location: {exc}")
        return 1
    except WeatherApiError as exc:
        logger.error("Weather API error: %s", exc)
        console.print(f"Unable to retrieve weather data: {exc}")
        return 1
    except Exception as exc:  # noqa: BLE001 - last-resort boundary for unexpected failures
        logger.exception("Unexpected error while fetching forecast: %s", type(exc).__name__)
        console.print("An unexpected error occurred. Please try again later.")
        return 1

    if args.as_json:
        console.print_json(json.dumps(result.model_dump(mode="json")))
    else:
        _print_result(console, result)
    return 0


def main(
    argv: list[str] | None = None,
    builder: Callable[
        [Settings, logging.Logger], tuple[ForecastOrchestrator, Callable[[], None]]
    ] = build_orchestrator,
) -> int:
    """Run a single forecast lookup or cache maintenance command."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    logger = configure_logging(settings)
    logger.info("Starting forecast lookup: %s", json.dumps(settings.safe_summary()))

    try:
        orchestrator, close = builder(settings, logger)
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    try:
        return _run(args, orchestrator, console, logger)
    except InvalidKeyError as exc:
        console.print(f"Invalid zip code: {exc}")
        return 2
    finally:
        close()


if __name__ == "__main__":
    raise SystemExit(main())
