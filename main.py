"""Listings cache service: populate from the listing source and keep it fresh."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cache.listings_cache import ListingsCache, create_cache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Suppress per-request logs from httpx
logging.getLogger("httpx").setLevel(logging.WARNING)

SUPPORTED_SOURCES = ("linear", "file")

# Environment variable → key in the "linear" config section
ENV_OVERRIDES = {
    "LINEAR_API_URL": "base_url",
    "LINEAR_API_KEY": "api_key",
    "LINEAR_COMPANY_ID": "company_id",
}


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Let LINEAR_* environment variables override the linear config section."""
    linear_config = config.setdefault("linear", {})
    for env_var, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            linear_config[key] = value
    return config


async def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from config.json"""
    config_path = config_path or Path(__file__).parent / "config.json"
    with open(config_path, "r", encoding="utf-8") as f:
        config = json.load(f)

    # Validate required fields
    if "source" not in config:
        raise ValueError("Missing required field 'source' in config.json")

    if config["source"] not in SUPPORTED_SOURCES:
        raise ValueError(
            f"Unsupported source '{config['source']}', expected one of {SUPPORTED_SOURCES}"
        )

    if config["source"] == "file" and not config.get("file", {}).get("path"):
        raise ValueError("Missing required field 'file.path' for file source")

    # Relative paths are resolved against the config file's directory
    config_dir = Path(config_path).parent
    aliases_file = config.get("aliases_file")
    if aliases_file and not Path(aliases_file).is_absolute():
        config["aliases_file"] = str(config_dir / aliases_file)

    file_path = config.get("file", {}).get("path")
    if file_path and not Path(file_path).is_absolute():
        config["file"]["path"] = str(config_dir / file_path)

    return apply_env_overrides(config)


async def run_auto_sync(cache: ListingsCache) -> None:
    """Keep the cache fresh until interrupted."""
    cache.start_auto_sync()
    try:
        while True:
            await asyncio.sleep(cache.sync_interval)
            logger.info(f"Cache status: {json.dumps(cache.status_report(), ensure_ascii=False)}")
    finally:
        await cache.close()


async def main():
    """Main entry point for the listings cache service."""
    cache = None
    try:
        config = await load_config()
        cache = create_cache(config)

        ready = await cache.ensure_initialized()
        report = cache.status_report()
        print(json.dumps(report, indent=2, ensure_ascii=False))

        if not ready:
            logger.error(f"Initial population failed: {report['last_error']}")
            return

        logger.info(f"Listings cache ready with {report['listings_count']} listings")

        if config.get("cache", {}).get("auto_sync", False):
            await run_auto_sync(cache)
            cache = None

    except FileNotFoundError:
        logger.error("config.json not found")
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
    finally:
        if cache is not None:
            await cache.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
