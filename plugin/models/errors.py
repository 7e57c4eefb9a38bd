"""
Plugin Errors

Exceptions raised while collecting Sphinx log statistics.
"""


class PluginError(Exception):
    """Base class for all plugin errors"""


class LogUnavailable(PluginError):
    """A log file is missing or cannot be read"""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"log file {path} is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnparsableTimestamp(PluginError):
    """A structurally valid line carries a timestamp that cannot be parsed"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"cannot parse timestamp {text!r}")


class UnsupportedMetric(PluginError):
    """The requested metric name is not one the plugin reports"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unsupported metric {name!r}")
