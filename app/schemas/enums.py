from __future__ import annotations

from enum import Enum


class JobStatus(str, Enum):
    PENDING = "Pending"  # lead
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.CANCELLED)


class JobEvent(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    COMPLETE = "complete"
    CANCEL = "cancel"


class PaymentStatus(str, Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"


class LawnSize(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    ESTATE = "Estate"


class Frequency(str, Enum):
    ONE_OFF = "One-off"
    WEEKLY = "Weekly"
    FORTNIGHTLY = "Fortnightly"
    MONTHLY = "Monthly"


class CommunicationType(str, Enum):
    SMS = "SMS"
    EMAIL = "Email"
    CALL = "Call"
    SYSTEM = "System"


class ExpenseCategory(str, Enum):
    CAR_TRAVEL = "Car, Van & Travel Expenses"
    OFFICE_EQUIPMENT = "Office, Property & Equipment"
    RESELLING = "Reselling Goods (Materials)"
    LEGAL_FINANCIAL = "Legal & Financial Costs"
    MARKETING = "Advertising & Marketing"
    CLOTHING = "Clothing Expenses"
    STAFF = "Staff Costs"
    OTHER = "Other Business Expenses"
