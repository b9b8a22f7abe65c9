"""
Payment allocation: which lessons a payment covers.

Prices are computed in full float precision and only rounded when formatted
for display or submission.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from app.core.enums import PayerType, PaymentStatus
from app.core.recurrence import as_utc

# Slack allowed when comparing a running lesson total against a typed amount
AMOUNT_TOLERANCE = 0.01


def lesson_price(lesson: Any) -> float:
    """pricePerHour x duration / 60. pricePerHour may arrive as a decimal string."""
    return float(lesson.price_per_hour) * lesson.duration / 60


def format_amount(value: float) -> str:
    return f"{value:.2f}"


def parse_amount(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _status(lesson: Any) -> str:
    status = lesson.payment_status
    return status.value if isinstance(status, PaymentStatus) else str(status)


def payer_student_ids(payer_type: Union[PayerType, str], payer_id: Any, students: Iterable[Any]) -> Set[Any]:
    """Student ids whose lessons a payer can pay for."""
    if PayerType(payer_type) == PayerType.student:
        return {payer_id}
    return {s.id for s in students if s.parent_id == payer_id}


def candidate_lessons(
    payer_type: Union[PayerType, str],
    payer_id: Any,
    students: Iterable[Any],
    lessons: Iterable[Any],
    include_paid: bool = False,
) -> List[Any]:
    """Lessons of the payer's student(s); pending only unless include_paid."""
    student_ids = payer_student_ids(payer_type, payer_id, students)
    result = [l for l in lessons if l.student_id in student_ids]
    if not include_paid:
        result = [l for l in result if _status(l) == PaymentStatus.pending.value]
    return result


def auto_select_lessons_by_amount(amount: Any, lessons: Iterable[Any]) -> Optional[List[Any]]:
    """
    Greedy match of pending lessons against a target amount.

    Most recent lessons are considered first and a lesson is taken whenever it
    still fits under the target (plus tolerance). The pass is single and
    irrevocable, so an exact subset that needs a skipped lesson can be missed:
    prices [40, 25, 25] against 50 select only the 40.

    Returns the selected lesson ids, or None when amount is not a positive number.
    """
    target = parse_amount(amount)
    if target is None or not target > 0:
        return None

    pool = [l for l in lessons if _status(l) == PaymentStatus.pending.value]
    pool.sort(key=lambda l: as_utc(l.date_time), reverse=True)

    selected: List[Any] = []
    running = 0.0
    for lesson in pool:
        price = lesson_price(lesson)
        if running + price <= target + AMOUNT_TOLERANCE:
            selected.append(lesson.id)
            running += price
        if abs(running - target) < AMOUNT_TOLERANCE:
            break
    return selected


@dataclass
class PaymentSelection:
    """Editable state of a payment being recorded against lessons."""

    lesson_ids: List[Any] = field(default_factory=list)
    amount: str = ""
    payment_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    date_picked: bool = False
    _prices: Dict[Any, float] = field(default_factory=dict, repr=False)

    def pick_date(self, value: datetime) -> None:
        self.payment_date = value
        self.date_picked = True

    @property
    def total(self) -> float:
        return sum(self._prices[lesson_id] for lesson_id in self.lesson_ids)

    def toggle_lesson(self, lesson: Any) -> None:
        """Add or remove a lesson; the amount always follows the selection."""
        if lesson.id in self.lesson_ids:
            self.lesson_ids.remove(lesson.id)
            self._prices.pop(lesson.id, None)
        else:
            if not self.lesson_ids and not self.date_picked:
                self.payment_date = lesson.date_time
            self.lesson_ids.append(lesson.id)
            self._prices[lesson.id] = lesson_price(lesson)
        self.amount = format_amount(self.total)

    def auto_select(self, candidates: Iterable[Any]) -> bool:
        """Replace the selection with the greedy match for the current amount."""
        candidates = list(candidates)
        ids = auto_select_lessons_by_amount(self.amount, candidates)
        if ids is None:
            return False
        by_id = {l.id: l for l in candidates}
        self.lesson_ids = list(ids)
        self._prices = {lesson_id: lesson_price(by_id[lesson_id]) for lesson_id in ids}
        return True
