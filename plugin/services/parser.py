"""
LogParser Class - Handles parsing of Sphinx log lines

This module parses raw query log and searchd log lines into structured events.
"""

import re
from typing import Optional

from models.data_models import QueryEvent, RebuildEvent, RebuildStep
from utils.helpers import parse_ts

# [Wed May 01 11:59:00.123 2024] 0.004 sec [ext2/0/rel 35254 (0,20)] [products] laptop
QUERY_LINE_RE = re.compile(
    r"^\[(?P<timestamp>[^\]]+)\]\s+"
    r"(?P<time_spent>\d+(?:\.\d+)?)\s+sec\b"
    r".*?\[(?P<mode>[\w-]+)/(?P<filters>\d+)/(?P<sort>[^\s\]]+)\s+"
    r"(?P<results>\d+)\s+\("
)

# [Wed May 01 11:59:00.123 2024] [12345] rotating finished
TIMESTAMP_RE = re.compile(r"^\[(?P<timestamp>[^\]]+)\]")

ROTATION_FINISHED = "rotating finished"
ROTATION_STARTED = "rotating indices"


class LogParser:
    """
    Parses raw Sphinx log lines into events.
    Responsibilities:
    - Match the query log grammar
    - Classify searchd log lines for index rotation tracking
    A line that does not match returns None; that is noise, not an error.
    """

    @staticmethod
    def parse_query_line(line: str) -> Optional[QueryEvent]:
        """Parse one query log line, None if it does not match the grammar"""
        match = QUERY_LINE_RE.match(line)
        if match is None:
            return None

        return QueryEvent(
            timestamp=parse_ts(match.group("timestamp")),
            time_spent=float(match.group("time_spent")),
            results_returned=int(match.group("results")),
        )

    @staticmethod
    def parse_rebuild_line(line: str) -> Optional[RebuildEvent]:
        """
        Parse one searchd log line.
        Every line with a leading bracketed timestamp yields an event, so the
        scan can stop at the window boundary even on unrelated lines.
        """
        match = TIMESTAMP_RE.match(line)
        if match is None:
            return None

        if ROTATION_FINISHED in line:
            step = RebuildStep.FINISH
        elif ROTATION_STARTED in line:
            step = RebuildStep.START
        else:
            step = RebuildStep.OTHER

        return RebuildEvent(timestamp=parse_ts(match.group("timestamp")), step=step)
