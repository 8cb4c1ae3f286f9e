"""Alias slug table: old or alternate URLs that redirect to a canonical slug."""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)


def load_slug_aliases(path: Optional[Union[str, Path]]) -> Dict[str, str]:
    """
    Load the alias table from a YAML mapping of alias → canonical slug.

    Example file:
        bulevardi-1-helsinki: bulevardi-1
        heikkilantie-1: heikkilantie-1-c-47

    A missing file gives an empty table. Entries that are not string pairs,
    or that point at themselves, are dropped with a warning.

    Raises:
        ValueError: If the file is not a YAML mapping
    """
    if not path:
        return {}

    path = Path(path)
    if not path.exists():
        logger.info(f"No slug alias file at {path}, continuing without aliases")
        return {}

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Slug alias file {path} must contain a mapping")

    aliases: Dict[str, str] = {}
    for alias, canonical in data.items():
        if not isinstance(alias, str) or not isinstance(canonical, str):
            logger.warning(f"Ignoring non-string slug alias entry: {alias!r} -> {canonical!r}")
            continue
        if alias == canonical:
            logger.warning(f"Ignoring self-referencing slug alias: {alias}")
            continue
        aliases[alias] = canonical

    logger.info(f"Loaded {len(aliases)} slug aliases from {path}")
    return aliases
