"""Statistics package."""

from money_notes.statistics.aggregator import StatisticsAggregator, select_bills

__all__ = ["StatisticsAggregator", "select_bills"]
