"""Schedule router: grouped agenda and iCalendar export."""

from typing import List, Optional
from zoneinfo import ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_auth
from app.core.calendar_export import build_calendar
from app.core.lesson_display import agenda_sections, group_lessons_by_date, transform_lessons
from app.core.models import Lesson, Student
from app.core.schemas import DateGroup
from app.db.session import get_db

router = APIRouter(prefix="/api", tags=["schedule"], dependencies=[Depends(require_auth)])


async def _lessons_and_students(db: AsyncSession):
    lessons = (await db.execute(select(Lesson).order_by(Lesson.date_time))).scalars().all()
    students = (await db.execute(select(Student))).scalars().all()
    return lessons, students


@router.get("/schedule", response_model=List[DateGroup])
async def get_schedule(
    tz: Optional[str] = Query(None, description="IANA zone used to split days; defaults to DISPLAY_TIMEZONE"),
    db: AsyncSession = Depends(get_db),
) -> List[DateGroup]:
    lessons, students = await _lessons_and_students(db)
    try:
        groups = group_lessons_by_date(transform_lessons(lessons, students), tz=tz)
        return agenda_sections(groups, tz=tz)
    except ZoneInfoNotFoundError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown timezone")


@router.get("/calendar/ics")
async def export_calendar(db: AsyncSession = Depends(get_db)) -> Response:
    lessons, students = await _lessons_and_students(db)
    return Response(
        content=build_calendar(lessons, students),
        media_type="text/calendar",
        headers={"Content-Disposition": 'attachment; filename="lessons.ics"'},
    )
