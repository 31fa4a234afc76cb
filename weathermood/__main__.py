"""Fetch the dashboard once and print the derived view as JSON."""

from __future__ import annotations

import argparse
import asyncio
import sys

from weathermood.core.config import get_settings
from weathermood.core.logging import configure_logging
from weathermood.main import open_session
from weathermood.schemas.weather import Coordinates
from weathermood.services.location import StaticLocationProvider


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    location = None
    if args.lat is not None and args.lon is not None:
        location = StaticLocationProvider(Coordinates(lat=args.lat, lon=args.lon))

    async with open_session(settings, location=location) as session:
        if args.unit:
            await session.update_settings({"temperature_unit": args.unit})
        if args.no_filter:
            await session.update_settings({"enable_weather_filtering": False})
        if args.category:
            await session.select_category(args.category)
            await session.refresh_weather()
        else:
            await session.refresh()
        view = session.view()

    print(view.model_dump_json(indent=2))
    return 1 if view.weather_error and view.news_error else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="weathermood", description=__doc__)
    parser.add_argument("--lat", type=float, help="Latitude (defaults to the configured city)")
    parser.add_argument("--lon", type=float, help="Longitude (defaults to the configured city)")
    parser.add_argument("--category", help="News category, or 'all' for the saved preference")
    parser.add_argument("--unit", choices=["celsius", "fahrenheit"])
    parser.add_argument("--no-filter", action="store_true", help="Disable mood filtering")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
