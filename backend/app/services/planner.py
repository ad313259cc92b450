"""Weekly planner slots and the bell schedule they sit on."""

from app.core.errors import ValidationError
from app.models.planning import Period, ScheduleSlot

SCHEDULE_PREFIX = "schedule:"

PERIODS: list[Period] = [
    Period(id="p1", name="Period 1", time="08:30 - 09:30"),
    Period(id="p2", name="Period 2", time="09:35 - 10:35"),
    Period(id="break", name="Recess", time="10:35 - 10:55", type="break"),
    Period(id="p3", name="Period 3", time="11:00 - 12:00"),
    Period(id="p4", name="Period 4", time="12:05 - 01:05"),
    Period(id="lunch", name="Lunch", time="01:05 - 01:50", type="break"),
    Period(id="p5", name="Period 5", time="01:50 - 02:50"),
]

_PERIOD_ORDER = {p.id: i for i, p in enumerate(PERIODS)}


def slot_key(slot_date, period_id) -> str:
    return f"{SCHEDULE_PREFIX}{slot_date}:{period_id}"


def validate_slot(slot: ScheduleSlot) -> ScheduleSlot:
    if not slot.date or not slot.period_id:
        raise ValidationError("Missing date or periodId")
    return slot


def period_sort_key(slot: dict) -> tuple[str, int, str]:
    period_id = str(slot.get("periodId", ""))
    return (str(slot.get("date", "")), _PERIOD_ORDER.get(period_id, len(_PERIOD_ORDER)), period_id)


def filter_slots(slots: list[dict], start: str | None = None, end: str | None = None) -> list[dict]:
    """Slots whose ISO ``date`` falls in [start, end], ordered by date then period."""
    selected = []
    for slot in slots:
        slot_date = str(slot.get("date", ""))
        if start and slot_date < start:
            continue
        if end and slot_date > end:
            continue
        selected.append(slot)
    return sorted(selected, key=period_sort_key)
