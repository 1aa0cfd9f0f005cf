"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.business_settings import BusinessSettingsModel
from app.models.communication import CommunicationModel
from app.models.expense import ExpenseModel
from app.models.job import JobModel

__all__ = ["Base", "BusinessSettingsModel", "CommunicationModel", "ExpenseModel", "JobModel"]
