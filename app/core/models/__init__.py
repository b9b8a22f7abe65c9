from app.core.models.parent import Parent
from app.core.models.student import DEFAULT_STUDENT_COLOR, Student
from app.core.models.lesson import Lesson
from app.core.models.recurring_lesson import RecurringLesson
from app.core.models.tag import CommentTag, Tag
from app.core.models.comment import Comment
from app.core.models.note import Note
from app.core.models.payment import Payment, PaymentLesson

__all__ = [
    "Comment",
    "CommentTag",
    "DEFAULT_STUDENT_COLOR",
    "Lesson",
    "Note",
    "Parent",
    "Payment",
    "PaymentLesson",
    "RecurringLesson",
    "Student",
    "Tag",
]
