from typing import List

from app.api.lessons.schemas import LessonResponse
from app.core.schemas import CamelModel, UtcDatetime


class BlockedSlot(CamelModel):
    """Another student's lesson, reduced to the time it occupies."""

    date_time: UtcDatetime
    duration: int
    is_blocked: bool = True


class PortalLessons(CamelModel):
    lessons: List[LessonResponse]
    blocked_slots: List[BlockedSlot]
