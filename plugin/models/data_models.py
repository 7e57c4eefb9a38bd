"""
Data Models (DTOs - Data Transfer Objects)

This module contains all dataclass and enum definitions used throughout the plugin.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List

from models.errors import UnsupportedMetric


class LogSource(str, Enum):
    """The two Sphinx logs the plugin reads"""
    QUERY = "query"
    DAEMON = "searchd"


class Metric(str, Enum):
    """Metrics the plugin can report, one per invocation"""
    QUERY_RATE = "query_rate"
    QUERY_TIME = "query_time"
    RESULTS_RETURNED = "results_returned"
    INDEX_REBUILDS = "index_rebuilds"
    TIME_PER_REBUILD = "time_per_rebuild"

    @property
    def source(self) -> LogSource:
        if self in (Metric.INDEX_REBUILDS, Metric.TIME_PER_REBUILD):
            return LogSource.DAEMON
        return LogSource.QUERY

    @classmethod
    def names(cls) -> List[str]:
        return [m.value for m in cls]

    @classmethod
    def from_name(cls, name: str) -> "Metric":
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedMetric(name) from None


class Command(str, Enum):
    """Invocation modes of the Munin plugin protocol"""
    SUGGEST = "suggest"
    CONFIG = "config"
    AUTOCONF = "autoconf"
    FETCH = "fetch"
    DEBUG = "debug"


class RebuildStep(str, Enum):
    START = "start"
    FINISH = "finish"
    OTHER = "other"


@dataclass
class QueryEvent:
    """Represents a single parsed query log line"""
    timestamp: datetime
    time_spent: float
    results_returned: int


@dataclass
class RebuildEvent:
    """Represents a single timestamped searchd log line"""
    timestamp: datetime
    step: RebuildStep


@dataclass
class MetricInfo:
    """Static graph metadata for one metric"""
    title: str
    vlabel: str
    label: str
    info: str


@dataclass
class WindowAggregate:
    """
    Counters collected over one time window.
    Derived values are zero whenever their count is zero.
    """
    interval_seconds: int
    query_count: int = 0
    total_query_time: float = 0.0
    total_results: int = 0
    rebuild_count: int = 0
    total_rebuild_duration: float = 0.0
    query_lines_processed: int = 0

    @property
    def query_rate(self) -> float:
        """Queries per minute over the configured interval"""
        if not self.query_count:
            return 0.0
        return self.query_count / (self.interval_seconds / 60.0)

    @property
    def avg_query_time(self) -> float:
        return self.total_query_time / self.query_count if self.query_count else 0.0

    @property
    def avg_results_returned(self) -> float:
        return self.total_results / self.query_count if self.query_count else 0.0

    @property
    def avg_rebuild_duration(self) -> float:
        if not self.rebuild_count:
            return 0.0
        return self.total_rebuild_duration / self.rebuild_count
