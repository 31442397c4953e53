"""Domain services."""

from .record_converter import Record, RecordConverter, coerce_value
from .split_planner import plan_splits

__all__ = ["Record", "RecordConverter", "coerce_value", "plan_splits"]
