from datetime import datetime

import pytest
from pydantic import ValidationError

from app.schemas import (
    BusinessSettings,
    BusinessSettingsUpdate,
    Communication,
    CommunicationCreate,
    CustomerUpdate,
    ExpenseCreate,
    Job,
    JobCreate,
    JobStatus,
    JobUpdate,
    LawnSize,
    PaymentUpdate,
    QuoteRequest,
)


def test_job_defaults():
    job = Job(organization_id="org", customer_name="Ann", address="1 High St")
    assert job.status == JobStatus.PENDING
    assert job.duration_minutes == 45
    assert job.customer_id == "Ann-1 High St"
    assert len(job.id) == 26
    assert not job.is_timer_running


def test_job_naive_datetimes_become_utc():
    job = Job(organization_id="org", customer_name="Ann", completed_date=datetime(2024, 6, 3, 12, 0))
    assert job.completed_date.tzinfo is not None


def test_job_rejects_negative_price():
    with pytest.raises(ValidationError):
        Job(organization_id="org", customer_name="Ann", price_quote=-1)


def test_job_note_appending():
    job = Job(organization_id="org", customer_name="Ann")
    job.append_note("first")
    job.append_note("second")
    assert job.notes == "first\nsecond"


def test_enum_values_from_strings():
    data = JobCreate(customer_name="Ann", lawn_size="Estate", frequency="Fortnightly")
    assert data.lawn_size == LawnSize.ESTATE
    assert JobStatus.COMPLETED.is_terminal
    assert not JobStatus.SCHEDULED.is_terminal


def test_settings_working_days_validated():
    assert BusinessSettings(organization_id="org", working_days=[5, 1, 5]).working_days == [1, 5]
    with pytest.raises(ValidationError):
        BusinessSettings(organization_id="org", working_days=[7])


def test_settings_update_tracks_only_given_fields():
    update = BusinessSettingsUpdate(weekly_discount=20)
    assert update.model_dump(exclude_unset=True) == {"weekly_discount": 20}


def test_quote_request_area_must_be_positive():
    with pytest.raises(ValidationError):
        QuoteRequest(lawn_area=0)


def test_payment_update_without_status_means_toggle():
    assert PaymentUpdate().status is None


def test_communication_defaults_to_system():
    record = Communication(organization_id="org", customer_id="c", subject="s", body="b")
    assert record.type.value == "System"


def test_job_update_rejects_null_for_required_fields():
    with pytest.raises(ValidationError):
        JobUpdate(address=None)
    with pytest.raises(ValidationError):
        JobUpdate.model_validate({"price_quote": None})
    assert JobUpdate(zone=None, notes=None).model_dump(exclude_unset=True) == {"zone": None, "notes": None}


def test_settings_update_rejects_null_except_pricing():
    with pytest.raises(ValidationError):
        BusinessSettingsUpdate(schedule_start_hour=None)
    with pytest.raises(ValidationError):
        BusinessSettingsUpdate.model_validate({"working_days": None})
    update = BusinessSettingsUpdate(medium_lawn_price=None)
    assert update.model_dump(exclude_unset=True) == {"medium_lawn_price": None}


def test_manual_communication_cannot_be_system():
    with pytest.raises(ValidationError):
        CommunicationCreate(type="System", subject="Status Update: Completed")
    assert CommunicationCreate(type="Call", subject="Call logged").body == ""


def test_expense_amount_must_be_positive():
    with pytest.raises(ValidationError):
        ExpenseCreate(title="Fuel", amount=0)
    assert ExpenseCreate(title="Fuel", amount=9.99).category.value == "Other Business Expenses"


def test_customer_update_needs_a_name():
    with pytest.raises(ValidationError):
        CustomerUpdate(name="", address="1 High St")
