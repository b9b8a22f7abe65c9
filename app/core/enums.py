from enum import Enum


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    unpaid = "unpaid"
    free = "free"
    cancelled = "cancelled"
    overdue = "overdue"


class RecurrenceFrequency(str, Enum):
    weekly = "weekly"
    biweekly = "biweekly"


class PayerType(str, Enum):
    student = "student"
    parent = "parent"
