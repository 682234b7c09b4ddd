#!/usr/bin/env python3
"""Remote store configuration.

Credentials for the hosted table are read from the process environment
(SUPABASE_URL and SUPABASE_ANON_KEY), optionally seeded from a .env file.
When either value is missing the daemon keeps running with store access
disabled; see store.NullStore.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from cloudclip.constants import TABLE_NAME

logger = logging.getLogger(__name__)

URL_ENVVAR = "SUPABASE_URL"
KEY_ENVVAR = "SUPABASE_ANON_KEY"


@dataclass(frozen=True)
class StoreConfig:
    """Connection settings for the remote clipboard table.

    Attributes:
        url: Project endpoint URL.
        key: Access key used by the client.
        table: Name of the table holding clipboard entries.
    """

    url: str
    key: str
    table: str = TABLE_NAME


def load_env_file() -> None:
    """Load .env from the working directory without overriding set values."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


def load_store_config(
    url: str | None, key: str | None, table: str = TABLE_NAME
) -> StoreConfig | None:
    """Build a StoreConfig, or None when credentials are missing.

    Args:
        url: Endpoint URL, usually from SUPABASE_URL.
        key: Access key, usually from SUPABASE_ANON_KEY.
        table: Table name for clipboard entries.

    Returns:
        StoreConfig when both credentials are present, None otherwise.
    """
    url = (url or "").strip()
    key = (key or "").strip()
    if not url or not key:
        logger.warning(
            "No store credentials found (%s/%s), clipboard will not be synced",
            URL_ENVVAR,
            KEY_ENVVAR,
        )
        return None
    return StoreConfig(url=url, key=key, table=table)
