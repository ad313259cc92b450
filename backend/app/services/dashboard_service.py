import logging
from datetime import date, timedelta

from app.services.kv_store import KVStore
from app.services.planner import SCHEDULE_PREFIX, filter_slots

logger = logging.getLogger("planpro.dashboard")

UPCOMING_DAYS = 7
RECENT_UNITS = 5


def _in_window(value: str | None, start: str, end: str) -> bool:
    return bool(value) and start <= value[:10] <= end


def get_teacher_dashboard(store: KVStore, today: date | None = None) -> dict:
    """
    Build the dashboard from the key-value store:
    - unit: unit plans (counts, recent activity, scheduled lessons)
    - lesson: lesson library
    - schedule: planner slots (today's schedule, next 7 days)
    """
    today = today or date.today()
    start = today.isoformat()
    end = (today + timedelta(days=UPCOMING_DAYS - 1)).isoformat()

    units = [e.value for e in store.get_by_prefix("unit:") if isinstance(e.value, dict)]
    library = [e.value for e in store.get_by_prefix("lesson:") if isinstance(e.value, dict)]
    slots = [e.value for e in store.get_by_prefix(SCHEDULE_PREFIX) if isinstance(e.value, dict)]

    embedded_lessons = 0
    upcoming_lessons = []
    for unit in units:
        lessons = unit.get("lessons") or []
        embedded_lessons += len(lessons)
        for lesson in lessons:
            scheduled = lesson.get("scheduledDate")
            if _in_window(scheduled, start, end):
                upcoming_lessons.append({
                    "unitId": unit.get("id"),
                    "unitTitle": unit.get("title", ""),
                    "lessonId": lesson.get("id"),
                    "title": lesson.get("title", ""),
                    "scheduledDate": scheduled,
                    "duration": lesson.get("duration", ""),
                })
    upcoming_lessons.sort(key=lambda l: l["scheduledDate"])

    week_slots = filter_slots(slots, start, end)
    todays_schedule = [s for s in week_slots if s.get("date") == start]

    recent_units = sorted(
        units, key=lambda u: u.get("updatedAt") or u.get("createdAt") or "", reverse=True,
    )[:RECENT_UNITS]

    logger.debug(
        "Dashboard for %s: %d units, %d library lessons, %d slots this week",
        start, len(units), len(library), len(week_slots),
    )
    return {
        "date": start,
        "stats": {
            "total_units": len(units),
            "total_lessons": embedded_lessons + len(library),
            "library_lessons": len(library),
            "lessons_planned_next_7_days": len(week_slots) + len(upcoming_lessons),
        },
        "todays_schedule": todays_schedule,
        "upcoming_lessons": upcoming_lessons,
        "recent_units": [
            {
                "id": u.get("id"),
                "title": u.get("title", ""),
                "subject": u.get("subject", ""),
                "gradeLevel": u.get("gradeLevel", ""),
                "lessonCount": len(u.get("lessons") or []),
                "updatedAt": u.get("updatedAt"),
            }
            for u in recent_units
        ],
    }
