"""
Plugin Configuration

Munin passes plugin settings through the environment. They are read once at
startup into a PluginConfig which is handed to the services that need it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from utils.helpers import safe_int

logger = logging.getLogger(__name__)

DEFAULT_SEARCHD_LOG_PATH = "/var/log/sphinxsearch/searchd.log"
DEFAULT_QUERY_LOG_PATH = "/var/log/sphinxsearch/query.log"
DEFAULT_INTERVAL = 300
DEFAULT_GRAPH_CATEGORY = "Sphinx"


def _lookup(env: Mapping[str, str], name: str) -> Optional[str]:
    """Read a setting by its lower-case Munin name, falling back to upper case"""
    value = env.get(name)
    if value is None:
        value = env.get(name.upper())
    if value is not None and not value.strip():
        return None
    return value


@dataclass(frozen=True)
class PluginConfig:
    searchd_log_path: str = DEFAULT_SEARCHD_LOG_PATH
    query_log_path: str = DEFAULT_QUERY_LOG_PATH
    interval: int = DEFAULT_INTERVAL
    graph_category: str = DEFAULT_GRAPH_CATEGORY

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError(f"interval must be a positive number of seconds, got {self.interval}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "PluginConfig":
        if env is None:
            env = os.environ

        interval = DEFAULT_INTERVAL
        raw_interval = _lookup(env, "interval")
        if raw_interval is not None:
            parsed = safe_int(raw_interval.strip())
            if parsed is None or parsed <= 0:
                logger.warning(
                    "Ignoring invalid interval %r, using %d seconds",
                    raw_interval,
                    DEFAULT_INTERVAL,
                )
            else:
                interval = parsed

        return cls(
            searchd_log_path=_lookup(env, "searchd_log_path") or DEFAULT_SEARCHD_LOG_PATH,
            query_log_path=_lookup(env, "query_log_path") or DEFAULT_QUERY_LOG_PATH,
            interval=interval,
            graph_category=_lookup(env, "graph_category") or DEFAULT_GRAPH_CATEGORY,
        )
