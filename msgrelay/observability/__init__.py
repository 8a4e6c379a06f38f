"""Observability: logging and metrics for the message relay."""

from msgrelay.observability.logger import get_logger
from msgrelay.observability.metrics import Metrics

__all__ = ["get_logger", "Metrics"]
