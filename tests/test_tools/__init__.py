"""
Test Tools Package
Tests for the tools module (time window, activity, expansion, status, aggregation)
"""

__all__ = [
    "test_time_window",
    "test_activity",
    "test_schedule_expander",
    "test_status_resolver",
    "test_adherence_aggregator",
]
