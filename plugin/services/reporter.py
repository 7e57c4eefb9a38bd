"""
MetricReporter Class - Handles Munin protocol output

This module renders plugin output in the text format the Munin node expects.
"""

import sys
from typing import Dict, List, Optional, TextIO, Tuple

from models.data_models import Metric, MetricInfo, WindowAggregate
from services.storage import LogStore
from utils.config import PluginConfig
from utils.helpers import format_fixed

METRIC_INFO: Dict[Metric, MetricInfo] = {
    Metric.QUERY_RATE: MetricInfo(
        title="Sphinx queries per minute",
        vlabel="queries / min",
        label="queries",
        info="Number of search queries per minute",
    ),
    Metric.QUERY_TIME: MetricInfo(
        title="Sphinx average query time",
        vlabel="seconds",
        label="avg time",
        info="Average time spent per search query",
    ),
    Metric.RESULTS_RETURNED: MetricInfo(
        title="Sphinx average results returned",
        vlabel="results",
        label="avg results",
        info="Average number of matches returned per search query",
    ),
    Metric.INDEX_REBUILDS: MetricInfo(
        title="Sphinx index rebuilds",
        vlabel="rebuilds",
        label="rebuilds",
        info="Number of completed index rotations",
    ),
    Metric.TIME_PER_REBUILD: MetricInfo(
        title="Sphinx average rebuild time",
        vlabel="seconds",
        label="avg rebuild",
        info="Average time between rotation start and rotation finish",
    ),
}


def metric_value(metric: Metric, aggregate: WindowAggregate) -> str:
    """Value text for one metric, "0" when nothing contributed to it"""
    if metric is Metric.QUERY_RATE:
        return format_fixed(aggregate.query_rate, aggregate.query_count, 2)
    if metric is Metric.QUERY_TIME:
        return format_fixed(aggregate.avg_query_time, aggregate.query_count, 4)
    if metric is Metric.RESULTS_RETURNED:
        return format_fixed(aggregate.avg_results_returned, aggregate.query_count, 4)
    if metric is Metric.INDEX_REBUILDS:
        return str(aggregate.rebuild_count)
    return format_fixed(aggregate.avg_rebuild_duration, aggregate.rebuild_count, 2)


class MetricReporter:
    """
    Writes Munin plugin output.
    Responsibilities:
    - List supported metrics (suggest)
    - Describe a metric's graph (config)
    - Report whether the plugin can run (autoconf)
    - Print the single value line of a fetch
    """

    def __init__(self, config: PluginConfig, out: Optional[TextIO] = None):
        self.config = config
        self.out = out or sys.stdout

    def _write(self, line: str) -> None:
        self.out.write(line + "\n")

    def suggest(self) -> None:
        for name in Metric.names():
            self._write(name)

    def config_lines(self, metric: Metric) -> List[Tuple[str, str]]:
        info = METRIC_INFO[metric]
        name = metric.value
        return [
            ("graph_title", info.title),
            ("graph_vlabel", info.vlabel),
            ("graph_category", self.config.graph_category),
            ("graph_args", "--base 1000 -l 0"),
            ("graph_info", f"{info.info} over the last {self.config.interval} seconds"),
            (f"{name}.label", info.label),
            (f"{name}.type", "GAUGE"),
            (f"{name}.min", "0"),
        ]

    def describe(self, metric: Metric) -> None:
        for key, value in self.config_lines(metric):
            self._write(f"{key} {value}")

    def autoconf(self) -> bool:
        """Print yes/no and return whether both logs can be read"""
        missing = [
            path
            for path in (self.config.query_log_path, self.config.searchd_log_path)
            if not LogStore(path).is_readable()
        ]
        if missing:
            self._write(f"no (cannot read {', '.join(missing)})")
            return False
        self._write("yes")
        return True

    def value(self, metric: Metric, aggregate: WindowAggregate) -> None:
        self._write(f"{metric.value}.value {metric_value(metric, aggregate)}")
