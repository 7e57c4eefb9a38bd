"""
Aggregator Class - Computes metrics over a time window

This module folds parsed log events into a WindowAggregate.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional

from models.data_models import (
    LogSource,
    Metric,
    QueryEvent,
    RebuildEvent,
    RebuildStep,
    WindowAggregate,
)
from models.errors import LogUnavailable, UnparsableTimestamp
from services.parser import LogParser
from services.storage import LogStore
from utils.config import PluginConfig

logger = logging.getLogger(__name__)


class PairingState(Enum):
    IDLE = "idle"
    AWAITING_START = "awaiting_start"


class RebuildPairing:
    """
    Pairs rotation FINISH lines with the START line that precedes them.
    Events must arrive newest first, so a FINISH is always seen before its START.
    """

    def __init__(self) -> None:
        self.state = PairingState.IDLE
        self.pending_finish: Optional[datetime] = None
        self.rebuild_count = 0
        self.total_duration = 0.0

    def feed(self, event: RebuildEvent) -> PairingState:
        """Apply one event and return the resulting state"""
        if self.state is PairingState.IDLE:
            if event.step is RebuildStep.FINISH:
                self.pending_finish = event.timestamp
                self.state = PairingState.AWAITING_START
        elif event.step is RebuildStep.START:
            duration = self.pending_finish - event.timestamp
            self.rebuild_count += 1
            self.total_duration += duration.total_seconds()
            self.pending_finish = None
            self.state = PairingState.IDLE
        return self.state


def pair_rebuilds(events: Iterable[RebuildEvent]) -> RebuildPairing:
    """Feed newest-first events through a fresh pairing machine"""
    pairing = RebuildPairing()
    for event in events:
        pairing.feed(event)
    return pairing


class Aggregator:
    """
    Aggregates Sphinx log lines into window statistics.
    Responsibilities:
    - Compute the window boundary
    - Scan only the log a metric needs, newest lines first
    - Stop scanning at the first event at or before the boundary
    - Leave a source at zero if its log cannot be read
    """

    def __init__(
        self,
        config: PluginConfig,
        log_parser: Optional[LogParser] = None,
        query_store: Optional[LogStore] = None,
        searchd_store: Optional[LogStore] = None,
    ):
        self.config = config
        self.parser = log_parser or LogParser()
        self.query_store = query_store or LogStore(config.query_log_path)
        self.searchd_store = searchd_store or LogStore(config.searchd_log_path)

    def window_start(self, now: Optional[datetime] = None) -> datetime:
        if now is None:
            now = datetime.now()
        return now - timedelta(seconds=self.config.interval)

    def collect(self, metric: Metric, now: Optional[datetime] = None) -> WindowAggregate:
        """Run the scan the requested metric needs and return the aggregate"""
        aggregate = WindowAggregate(interval_seconds=self.config.interval)
        start = self.window_start(now)

        if metric.source is LogSource.QUERY:
            self._collect_source(aggregate, self.query_store, self.scan_queries, start)
        else:
            self._collect_source(aggregate, self.searchd_store, self.scan_rebuilds, start)

        return aggregate

    def _collect_source(
        self,
        aggregate: WindowAggregate,
        store: LogStore,
        scan: Callable[[WindowAggregate, LogStore, datetime], None],
        start: datetime,
    ) -> None:
        try:
            scan(aggregate, store, start)
        except LogUnavailable as exc:
            logger.warning("%s, reporting zero", exc)
        except UnparsableTimestamp:
            logger.exception("Giving up on %s, reporting zero", store.file_path)

    def scan_queries(
        self, aggregate: WindowAggregate, store: LogStore, start: datetime
    ) -> None:
        """
        Fold query log lines newer than start into aggregate.
        The counters are only written once the whole scan succeeded.
        """
        count = 0
        total_time = 0.0
        total_results = 0
        lines = 0

        for line in store.read_lines_reversed():
            lines += 1
            event: Optional[QueryEvent] = self.parser.parse_query_line(line)
            if event is None:
                continue
            if event.timestamp <= start:
                break
            count += 1
            total_time += event.time_spent
            total_results += event.results_returned

        aggregate.query_count += count
        aggregate.total_query_time += total_time
        aggregate.total_results += total_results
        aggregate.query_lines_processed += lines
        logger.debug("%s: %d queries in window", store.file_path, count)

    def rebuild_events(self, store: LogStore, start: datetime) -> Iterator[RebuildEvent]:
        """Timestamped searchd events newer than start, newest first"""
        for line in store.read_lines_reversed():
            event = self.parser.parse_rebuild_line(line)
            if event is None:
                continue
            if event.timestamp <= start:
                return
            yield event

    def scan_rebuilds(
        self, aggregate: WindowAggregate, store: LogStore, start: datetime
    ) -> None:
        """Pair rotation lines newer than start and fold the rebuilds into aggregate"""
        pairing = pair_rebuilds(self.rebuild_events(store, start))

        if pairing.state is PairingState.AWAITING_START:
            logger.debug("rotation finished at %s has no start in window", pairing.pending_finish)

        aggregate.rebuild_count += pairing.rebuild_count
        aggregate.total_rebuild_duration += pairing.total_duration
