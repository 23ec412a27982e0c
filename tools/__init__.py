"""
Tools Package
Schedule derivation and adherence computation for DoseTrack
"""

from .time_window import (
    WindowState,
    parse_time_of_day,
    is_valid_time_of_day,
    scheduled_instant,
    minutes_since,
    is_late,
    is_past_cutoff,
    classify,
    classify_minutes
)

from .activity import (
    to_date_str,
    is_active_on
)

from .schedule_expander import (
    ScheduleExpander,
    DoseOccurrence,
    MedicationSnapshot,
    date_range,
    clean_times,
    valid_times,
    schedule_expander
)

from .status_resolver import (
    StatusResolver,
    LogIndex,
    log_key,
    log_status,
    infer_status,
    status_resolver
)

from .adherence_aggregator import (
    AdherenceAggregator,
    AdherenceCounts,
    AdherenceReport,
    DayAdherence,
    MedicationAdherence,
    collect_occurrences,
    adherence_aggregator
)

__all__ = [
    # Time Window
    "WindowState",
    "parse_time_of_day",
    "is_valid_time_of_day",
    "scheduled_instant",
    "minutes_since",
    "is_late",
    "is_past_cutoff",
    "classify",
    "classify_minutes",

    # Activity
    "to_date_str",
    "is_active_on",

    # Schedule Expander
    "ScheduleExpander",
    "DoseOccurrence",
    "MedicationSnapshot",
    "date_range",
    "clean_times",
    "valid_times",
    "schedule_expander",

    # Status Resolver
    "StatusResolver",
    "LogIndex",
    "log_key",
    "log_status",
    "infer_status",
    "status_resolver",

    # Adherence Aggregator
    "AdherenceAggregator",
    "AdherenceCounts",
    "AdherenceReport",
    "DayAdherence",
    "MedicationAdherence",
    "collect_occurrences",
    "adherence_aggregator"
]
