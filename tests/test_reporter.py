"""Tests for Munin protocol output."""

from __future__ import annotations

from io import StringIO

import pytest

from models.data_models import Metric, WindowAggregate
from services.reporter import METRIC_INFO, MetricReporter, metric_value
from utils.config import PluginConfig


@pytest.fixture
def out() -> StringIO:
    return StringIO()


def scenario_aggregate() -> WindowAggregate:
    return WindowAggregate(
        interval_seconds=300,
        query_count=10,
        total_query_time=5.0,
        total_results=200,
        rebuild_count=3,
        total_rebuild_duration=100.0,
    )


class TestMetricValue:
    @pytest.mark.parametrize(
        "metric, expected",
        [
            (Metric.QUERY_RATE, "2.00"),
            (Metric.QUERY_TIME, "0.5000"),
            (Metric.RESULTS_RETURNED, "20.0000"),
            (Metric.INDEX_REBUILDS, "3"),
            (Metric.TIME_PER_REBUILD, "33.33"),
        ],
    )
    def test_formatting(self, metric, expected):
        assert metric_value(metric, scenario_aggregate()) == expected

    @pytest.mark.parametrize("metric", list(Metric))
    def test_zero_counts_report_zero(self, metric):
        assert metric_value(metric, WindowAggregate(interval_seconds=300)) == "0"


class TestMetricReporter:
    def test_suggest_lists_all_metrics(self, out):
        MetricReporter(PluginConfig(), out).suggest()
        assert out.getvalue().splitlines() == [
            "query_rate",
            "query_time",
            "results_returned",
            "index_rebuilds",
            "time_per_rebuild",
        ]

    def test_every_metric_has_graph_info(self):
        assert set(METRIC_INFO) == set(Metric)

    def test_describe(self, out):
        config = PluginConfig(graph_category="Search", interval=600)
        MetricReporter(config, out).describe(Metric.QUERY_TIME)
        lines = out.getvalue().splitlines()
        assert "graph_title Sphinx average query time" in lines
        assert "graph_category Search" in lines
        assert "query_time.label avg time" in lines
        assert "query_time.type GAUGE" in lines
        assert any(line.startswith("graph_info ") and "600 seconds" in line for line in lines)
        assert all(" " in line for line in lines)

    def test_value_line(self, out):
        MetricReporter(PluginConfig(), out).value(Metric.QUERY_RATE, scenario_aggregate())
        assert out.getvalue() == "query_rate.value 2.00\n"

    def test_autoconf_yes(self, out, write_log):
        config = PluginConfig(
            query_log_path=str(write_log("query.log", ["x"])),
            searchd_log_path=str(write_log("searchd.log", ["y"])),
        )
        assert MetricReporter(config, out).autoconf() is True
        assert out.getvalue() == "yes\n"

    def test_autoconf_no(self, out, tmp_path, write_log):
        config = PluginConfig(
            query_log_path=str(write_log("query.log", ["x"])),
            searchd_log_path=str(tmp_path / "missing.log"),
        )
        assert MetricReporter(config, out).autoconf() is False
        assert out.getvalue().startswith("no (cannot read ")
        assert "missing.log" in out.getvalue()
