"""
Hosting runtime: what a managed functions platform would otherwise provide.

- TriggerRegistry: routes document-created events to record-creation handlers
- Scheduler / DailySchedule: runs scheduled functions
"""

from runtime.scheduler import DailySchedule, ScheduleContext, Scheduler
from runtime.triggers import PathPattern, TriggerContext, TriggerRegistry

__all__ = [
    "DailySchedule",
    "ScheduleContext",
    "Scheduler",
    "PathPattern",
    "TriggerContext",
    "TriggerRegistry",
]
