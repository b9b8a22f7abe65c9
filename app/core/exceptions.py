from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SeriesDeleteError(Exception):
    """A sequential series delete stopped on its first failing member."""

    def __init__(self, lesson_id, deleted: int) -> None:
        super().__init__(f"Failed to delete lesson {lesson_id} after deleting {deleted}")
        self.lesson_id = lesson_id
        self.deleted = deleted
