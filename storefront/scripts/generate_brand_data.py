"""
Fetch brand colors and logos for every source and write the static brand document.

Usage:
    python -m storefront.scripts.generate_brand_data [--output PATH] [--delay SECONDS]
"""
import argparse
import asyncio
import sys
from typing import List, Optional

import httpx

from storefront.core.config import Settings, get_settings, load_env_file
from storefront.core.logging import configure_logging, get_logger
from storefront.infrastructure.http import HttpxConnector
from storefront.services.brand_service import BrandClient, generate_brand_cache

logger = get_logger(__name__)


async def run(settings: Settings, output: str, delay: float) -> int:
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT) as client:
        brand_client = BrandClient(settings, HttpxConnector(client))
        document = await generate_brand_cache(brand_client, output, delay=delay)

    errors = document["metadata"]["errors"] or []
    for error in errors:
        logger.warning(error)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_env_file()
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Generate the static brand data document.")
    parser.add_argument("--output", default=settings.BRAND_DATA_FILE, help="Path of the JSON document to write")
    parser.add_argument("--delay", type=float, default=0.5, help="Seconds to wait between brand API calls")
    args = parser.parse_args(argv)

    configure_logging()
    if not settings.BRAND_DEV_API_KEY:
        logger.warning("BRAND_DEV_API_KEY is not set, every brand will use its fallback palette")

    try:
        return asyncio.run(run(settings, args.output, args.delay))
    except OSError as exc:
        print("Brand data generation failed:", exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
