# blueprints/lessons/services.py
from __future__ import annotations
import logging
from dataclasses import dataclass, asdict, replace
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .public_ids import generate_public_id

log = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/Kyiv"
LESSON_ID_PREFIX = "LSN"
STATUS_SCHEDULED = "scheduled"

# ===== ошибки =====
class GenerationError(Exception):
    code = "GENERATION_FAILED"

class GroupNotFound(GenerationError):
    code = "GROUP_NOT_FOUND"

    def __init__(self, group_id: Any):
        super().__init__("Group not found")
        self.group_id = group_id

class InvalidSchedule(GenerationError):
    code = "INVALID_SCHEDULE"

# ===== DTO =====
@dataclass(frozen=True)
class RecurrenceRule:
    group_id: int
    weekly_day: Optional[int]   # после нормализации 0=Sun..6=Sat
    start_time: Optional[str]   # "HH:MM" по местному времени группы
    duration_minutes: int
    timezone: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

@dataclass
class NewLesson:
    public_id: str
    group_id: int
    lesson_date: date
    start_datetime: datetime    # UTC, naive
    end_datetime: datetime      # UTC, naive
    status: str
    created_by: Optional[int]

@dataclass
class GenerationResult:
    generated: int
    skipped: int

@dataclass
class GroupGenerationResult:
    group_id: int
    generated: int
    skipped: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

class LessonStore(Protocol):
    def get_group_recurrence_rule(self, group_id: int) -> Optional[RecurrenceRule]:
        ...

    def list_lesson_dates(self, group_id: int) -> Sequence[Any]:
        ...

    def list_active_group_ids(self) -> Sequence[int]:
        ...

    def group_has_any_lesson(self, group_id: int) -> bool:
        ...

    def insert_lessons_transactionally(self, rows: Sequence[NewLesson]) -> None:
        ...

# ===== даты =====
def end_of_month(d: date) -> date:
    if d.month == 12:
        next_first = d.replace(year=d.year + 1, month=1, day=1)
    else:
        next_first = d.replace(month=d.month + 1, day=1)
    return next_first - timedelta(days=1)

def horizon_end(today: date, months_ahead: int) -> date:
    """Последний день месяца, отстоящего от текущего на months_ahead."""
    idx = today.month - 1 + months_ahead
    return end_of_month(date(today.year + idx // 12, idx % 12 + 1, 1))

def sunday_based_weekday(d: date) -> int:
    # isoweekday: Mon=1..Sun=7 → Sun=0..Sat=6
    return d.isoweekday() % 7

def normalize_weekday(raw: Any) -> int:
    """1..7 (7=Sun) и 0..6 (0=Sun) → 0..6. Всё остальное — ошибка данных."""
    if raw is None or isinstance(raw, bool):
        raise InvalidSchedule(f"Invalid weekly_day for group: {raw}")
    try:
        day = int(raw)
    except (TypeError, ValueError):
        raise InvalidSchedule(f"Invalid weekly_day for group: {raw}") from None
    if day == 7:
        day = 0
    if not 0 <= day <= 6:
        raise InvalidSchedule(f"Invalid weekly_day for group: {raw}")
    return day

def parse_start_time(raw: Any) -> time:
    if isinstance(raw, time):
        return raw
    try:
        parts = str(raw).strip().split(":")
        return time(int(parts[0]), int(parts[1]))
    except (ValueError, IndexError):
        raise InvalidSchedule(f"Invalid start_time for group: {raw}") from None

def date_key(val: Any) -> str:
    """yyyy-MM-dd из того, что вернула БД (date, datetime или строка с временем)."""
    if isinstance(val, datetime):
        return val.date().isoformat()
    if isinstance(val, date):
        return val.isoformat()
    s = str(val).strip()
    return s.replace("T", " ").split(" ", 1)[0]

def resolve_zone(name: Optional[str], fallback: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    key = name or fallback
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # "Europe" и т.п.: каталог tzdata, а не зона
        raise InvalidSchedule(f"Unknown timezone for group: {key}") from None

def local_to_utc(day: date, at: time, tz: ZoneInfo) -> datetime:
    """Настенное время группы → UTC (naive, как храним в БД)."""
    local = datetime.combine(day, at, tzinfo=tz)
    return local.astimezone(timezone.utc).replace(tzinfo=None)

def format_utc(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S")

# ===== генератор =====
class LessonGenerator:
    def __init__(
        self,
        store: LessonStore,
        *,
        today: Callable[[], date] = date.today,
        default_timezone: str = DEFAULT_TIMEZONE,
        id_prefix: str = LESSON_ID_PREFIX,
        make_public_id: Callable[[str], str] = generate_public_id,
    ):
        self.store = store
        self.today = today
        self.default_timezone = default_timezone
        self.id_prefix = id_prefix
        self.make_public_id = make_public_id

    def _load_rule(self, group_id: int) -> RecurrenceRule:
        rule = self.store.get_group_recurrence_rule(group_id)
        if rule is None:
            log.error("group not found", extra={"event": "lessons_generate_failed", "group_id": group_id})
            raise GroupNotFound(group_id)
        if not rule.start_time:
            raise InvalidSchedule("Missing start_time for group")
        if not isinstance(rule.duration_minutes, int) or rule.duration_minutes <= 0:
            raise InvalidSchedule(f"Invalid duration_minutes for group: {rule.duration_minutes}")
        rule = replace(
            rule,
            weekly_day=normalize_weekday(rule.weekly_day),
            timezone=rule.timezone or self.default_timezone,
        )
        # tz и время проверяем до любых записей
        resolve_zone(rule.timezone)
        parse_start_time(rule.start_time)
        return rule

    def cutoff(self, rule: RecurrenceRule, today: date, months_ahead: int) -> date:
        target = horizon_end(today, months_ahead)
        if rule.end_date and rule.end_date < target:
            return rule.end_date
        return target

    def first_occurrence(self, rule: RecurrenceRule, today: date) -> date:
        current = rule.start_date or today
        if current < today:
            current = today  # в прошлое не генерируем
        while sunday_based_weekday(current) != rule.weekly_day:
            current += timedelta(days=1)
        return current

    def plan(
        self,
        rule: RecurrenceRule,
        existing: set[str],
        *,
        today: date,
        months_ahead: int,
        created_by: Optional[int],
    ) -> Tuple[List[NewLesson], int]:
        """Чистая часть: кандидаты с шагом 7 дней до cutoff включительно."""
        tz = resolve_zone(rule.timezone, self.default_timezone)
        at = parse_start_time(rule.start_time)
        duration = timedelta(minutes=rule.duration_minutes)
        last = self.cutoff(rule, today, months_ahead)

        rows: List[NewLesson] = []
        skipped = 0
        current = self.first_occurrence(rule, today)
        while current <= last:
            if date_key(current) in existing:
                skipped += 1
            else:
                start_utc = local_to_utc(current, at, tz)
                rows.append(NewLesson(
                    public_id=self.make_public_id(self.id_prefix),
                    group_id=rule.group_id,
                    lesson_date=current,
                    start_datetime=start_utc,
                    end_datetime=start_utc + duration,
                    status=STATUS_SCHEDULED,
                    created_by=created_by,
                ))
            current += timedelta(days=7)
        return rows, skipped

    def generate_for_group(
        self,
        group_id: int,
        *,
        months_ahead: int = 1,
        created_by: Optional[int] = None,
        weeks_ahead: Optional[int] = None,
    ) -> GenerationResult:
        if months_ahead < 0:
            raise ValueError("months_ahead must be >= 0")
        if weeks_ahead is not None:
            # оставлен для совместимости со старыми клиентами, горизонт всегда помесячный
            log.debug("weeks_ahead=%s ignored", weeks_ahead)

        try:
            rule = self._load_rule(group_id)
        except InvalidSchedule as e:
            log.error("invalid group schedule", extra={
                "event": "lessons_generate_failed",
                "group_id": group_id,
                "error": str(e),
            })
            raise

        today = self.today()
        last = self.cutoff(rule, today, months_ahead)
        log.info("generating lessons", extra={
            "event": "lessons_generate_start",
            "group_id": group_id,
            "date_from": today.isoformat(),
            "date_to": last.isoformat(),
        })

        existing = {date_key(v) for v in self.store.list_lesson_dates(group_id)}
        rows, skipped = self.plan(
            rule, existing, today=today, months_ahead=months_ahead, created_by=created_by,
        )

        if rows:
            try:
                self.store.insert_lessons_transactionally(rows)
            except Exception:
                log.error("lesson insert failed", extra={
                    "event": "lessons_generate_failed",
                    "group_id": group_id,
                    "date_from": today.isoformat(),
                    "date_to": last.isoformat(),
                })
                raise

        result = GenerationResult(generated=len(rows), skipped=skipped)
        log.info("lessons generated", extra={
            "event": "lessons_generate_done",
            "group_id": group_id,
            "generated": result.generated,
            "skipped": result.skipped,
        })
        return result

    def generate_for_all_groups(
        self,
        *,
        months_ahead: int = 1,
        created_by: Optional[int] = None,
        weeks_ahead: Optional[int] = None,
    ) -> List[GroupGenerationResult]:
        """Первичная генерация: группы, у которых уже есть занятия, не трогаем."""
        results: List[GroupGenerationResult] = []
        for group_id in self.store.list_active_group_ids():
            try:
                if self.store.group_has_any_lesson(group_id):
                    log.info("group already has lessons", extra={
                        "event": "lessons_generate_skip", "group_id": group_id,
                    })
                    results.append(GroupGenerationResult(group_id, 0, 0))
                    continue
                res = self.generate_for_group(
                    group_id,
                    months_ahead=months_ahead,
                    created_by=created_by,
                    weeks_ahead=weeks_ahead,
                )
                results.append(GroupGenerationResult(group_id, res.generated, res.skipped))
            except Exception:
                # одна битая группа не должна валить остальные
                log.exception("group generation failed", extra={
                    "event": "lessons_generate_failed", "group_id": group_id,
                })
                results.append(GroupGenerationResult(group_id, 0, 0))
        return results
