"""Privacy filtering for data crossing an agent's trust boundary."""

from a2a_sandbox.privacy.filter import (
    AvailabilityResult,
    PublicSchedule,
    TimeSlot,
    apply_privacy_filter,
    calculate_free_slots,
    create_availability_response,
    filter_schedule,
    filter_schedules,
    is_range_available,
    log_privacy_action,
)
from a2a_sandbox.privacy.rules import (
    SAFE_FIELDS,
    SCHEDULE_PRIVACY_RULES,
    SENSITIVE_FIELDS,
    PrivacyContext,
    PrivacyRule,
    is_safe_field,
    is_sensitive_field,
)

__all__ = [
    "SAFE_FIELDS",
    "SCHEDULE_PRIVACY_RULES",
    "SENSITIVE_FIELDS",
    "AvailabilityResult",
    "PrivacyContext",
    "PrivacyRule",
    "PublicSchedule",
    "TimeSlot",
    "apply_privacy_filter",
    "calculate_free_slots",
    "create_availability_response",
    "filter_schedule",
    "filter_schedules",
    "is_range_available",
    "log_privacy_action",
]
