"""Job service: the organization's jobs, settings, communications log and expenses.

One instance is built at startup and injected wherever jobs are read or
changed. Mutations are optimistic: the in-memory change is applied first,
then persisted; if the store rejects the write, the `optimistic` decorator
undoes exactly what that mutation changed and re-raises `PersistenceFailure`.
Other mutations running at the same time keep their changes.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

import pydantic
from pydantic import BaseModel

from app.db.store import Store
from app.errors import CustomerNotFound, ExpenseNotFound, JobNotFound, PersistenceFailure, ValidationError
from app.schemas.business_settings import BusinessSettings, BusinessSettingsUpdate
from app.schemas.communication import Communication, CommunicationCreate
from app.schemas.enums import JobStatus, PaymentStatus
from app.schemas.expense import Expense, ExpenseCreate
from app.schemas.job import CustomerUpdate, Job, JobCreate, JobUpdate, utcnow
from app.schemas.quote import QuoteRequest, QuoteResponse
from app.schemas.schedule import DayPlan, ScheduleCell, ScheduleView
from app.services import job_lifecycle, job_timer
from app.services.job_lifecycle import TransitionResult
from app.services.notifications import Notifier
from app.services.pricing import compute_quote
from app.services.schedule_index import build_view, jobs_on_date, lay_out_day, reorder_jobs

logger = logging.getLogger(__name__)

_TIMER_FIELDS = ("is_timer_running", "timer_start_time", "actual_duration_minutes")


class _Changes:
    """Undo log for one mutation.

    Holds a copy of every job or record the mutation edits, the items it
    added or removed, the list order it replaced and the settings it swapped.
    """

    def __init__(self):
        self.before: dict[str, tuple[BaseModel, BaseModel]] = {}
        self.added: list[tuple[list, BaseModel]] = []
        self.removed: list[tuple[list, int, BaseModel]] = []
        self.order: tuple[list, list[str]] | None = None
        self.settings: BusinessSettings | None = None

    def touch(self, obj: BaseModel) -> None:
        if obj.id not in self.before:
            self.before[obj.id] = (obj, obj.model_copy(deep=True))

    def add(self, items: list, obj: BaseModel, index: int | None = None) -> None:
        if index is None:
            items.append(obj)
        else:
            items.insert(index, obj)
        self.added.append((items, obj))

    def remove(self, items: list, index: int) -> BaseModel:
        obj = items.pop(index)
        self.removed.append((items, index, obj))
        return obj

    def revert(self, service: "JobService") -> None:
        # Live objects are restored in place; anything other mutations did is kept
        for live, saved in self.before.values():
            for name in type(live).model_fields:
                setattr(live, name, getattr(saved, name))
        for items, obj in self.added:
            items[:] = [o for o in items if o.id != obj.id]
        for items, index, obj in reversed(self.removed):
            items.insert(min(index, len(items)), obj)
        if self.order is not None:
            items, ids = self.order
            rank = {item_id: i for i, item_id in enumerate(ids)}
            items.sort(key=lambda o: rank.get(o.id, len(rank)))
        if self.settings is not None:
            service.settings = self.settings


_current: ContextVar[_Changes | None] = ContextVar("job_service_changes", default=None)


@dataclass
class JobStats:
    pending: int
    scheduled: int
    completed: int
    cancelled: int
    revenue: float
    outstanding: float
    total_expenses: float
    net_profit: float


def optimistic(method):
    """Run the mutation with its own undo log; undo it if persistence fails."""

    @functools.wraps(method)
    async def wrapper(self: "JobService", *args, **kwargs):
        changes = _Changes()
        token = _current.set(changes)
        try:
            return await method(self, *args, **kwargs)
        except PersistenceFailure:
            changes.revert(self)
            logger.warning("%s rolled back after persistence failure", method.__name__)
            raise
        finally:
            _current.reset(token)

    return wrapper


class JobService:
    def __init__(
        self,
        store: Store,
        organization_id: str,
        *,
        clock: Callable[[], datetime] = utcnow,
        notifier: Notifier | None = None,
    ):
        self.store = store
        self.organization_id = organization_id
        self._clock = clock
        self._notifier = notifier
        self._jobs: list[Job] = []
        self._communications: list[Communication] = []
        self._expenses: list[Expense] = []
        self.settings = BusinessSettings(organization_id=organization_id)
        self._settings_id: str | None = None

    # ── state helpers ────────────────────────────────────

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self.now().date()

    def _changes(self) -> _Changes:
        return _current.get() or _Changes()

    def _find(self, job_id: str) -> Job:
        for job in self._jobs:
            if job.id == job_id:
                return job
        raise JobNotFound(job_id)

    def _edit(self, job_id: str) -> Job:
        job = self._find(job_id)
        self._changes().touch(job)
        return job

    def _next_position(self) -> int:
        return max((j.route_position for j in self._jobs), default=-1) + 1

    def _notify(self, subject: str, body: str) -> None:
        if self._notifier is not None:
            self._notifier.notify(subject, body)

    async def _save_job(self, job: Job, *fields: str) -> None:
        await self.store.update("jobs", job.id, {f: getattr(job, f) for f in fields})

    async def _save_records(self, records: list[Communication]) -> None:
        changes = self._changes()
        for record in records:
            changes.add(self._communications, record, index=0)
        for record in records:
            await self.store.insert("communications", record.model_dump())

    async def _apply(self, result: TransitionResult, *fields: str) -> Job:
        job = result.job
        await self._save_job(job, "status", *fields)
        await self._save_records(result.records)
        logger.info(
            "Job %s: %s -> %s",
            job.id, result.old_status.value if result.old_status else "new", result.new_status.value,
        )
        return job

    # ── loading ──────────────────────────────────────────

    async def load(self) -> None:
        """Read the organization's jobs, log, expenses and settings from the store."""
        org = {"organization_id": self.organization_id}
        self._jobs = [Job.model_validate(r) for r in await self.store.get("jobs", org)]
        self._communications = [
            Communication.model_validate(r) for r in await self.store.get("communications", org)
        ]
        self._expenses = [Expense.model_validate(r) for r in await self.store.get("expenses", org)]
        rows = await self.store.get("business_settings", org)
        if rows:
            self._settings_id = rows[0]["id"]
            self.settings = BusinessSettings.model_validate(rows[0])
        else:
            saved = await self.store.insert("business_settings", self.settings.model_dump())
            self._settings_id = saved["id"]
        logger.info("Loaded %d jobs for organization %s", len(self._jobs), self.organization_id)

    # ── reads ────────────────────────────────────────────

    def list_jobs(self, status: JobStatus | None = None) -> list[Job]:
        return [j for j in self._jobs if status is None or j.status == status]

    def get_job(self, job_id: str) -> Job:
        return self._find(job_id)

    def communications(self, job_id: str | None = None, customer_id: str | None = None) -> list[Communication]:
        return [
            c for c in self._communications
            if (job_id is None or c.job_id == job_id) and (customer_id is None or c.customer_id == customer_id)
        ]

    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    def stats(self) -> JobStats:
        def count(status: JobStatus) -> int:
            return sum(1 for j in self._jobs if j.status == status)

        revenue = sum(j.price_quote for j in self._jobs if j.payment_status == PaymentStatus.PAID)
        total_expenses = sum(e.amount for e in self._expenses)
        return JobStats(
            pending=count(JobStatus.PENDING),
            scheduled=count(JobStatus.SCHEDULED),
            completed=count(JobStatus.COMPLETED),
            cancelled=count(JobStatus.CANCELLED),
            revenue=revenue,
            outstanding=sum(
                j.price_quote for j in self._jobs
                if j.status == JobStatus.COMPLETED and j.payment_status == PaymentStatus.UNPAID
            ),
            total_expenses=total_expenses,
            net_profit=revenue - total_expenses,
        )

    def quote(self, request: QuoteRequest) -> QuoteResponse:
        return compute_quote(request, self.settings)

    def schedule(self, view: ScheduleView, anchor: date) -> list[ScheduleCell]:
        return build_view(
            self._jobs, view, anchor,
            today=self.today(),
            working_days=self.settings.working_days,
        )

    def day_plan(self, day: date) -> DayPlan:
        jobs = jobs_on_date(self._jobs, day)
        return DayPlan(date=day, jobs=jobs, slots=lay_out_day(jobs, self.settings))

    def elapsed_minutes(self, job_id: str) -> float:
        return job_timer.elapsed_minutes(self._find(job_id), self.now())

    # ── creation and edits ───────────────────────────────

    @optimistic
    async def create_job(self, data: JobCreate) -> Job:
        result = job_lifecycle.new_job(self.organization_id, data, self.now())
        job = result.job
        job.route_position = self._next_position()
        self._changes().add(self._jobs, job)

        await self.store.insert("jobs", job.model_dump())
        await self._save_records(result.records)
        logger.info("Created job %s (%s) for %s", job.id, job.status.value, job.customer_name)

        if job.status == JobStatus.PENDING:
            self._notify("New Lead Received", f"{job.customer_name} requested a quote for {job.address}")
        return job

    @optimistic
    async def update_job(self, job_id: str, changes: JobUpdate) -> Job:
        job = self._edit(job_id)
        fields = changes.model_dump(exclude_unset=True)
        for key, value in fields.items():
            setattr(job, key, value)
        if "customer_name" in fields or "address" in fields:
            # the job now belongs to whichever customer the new name and address key to
            job.customer_id = f"{job.customer_name}-{job.address}"
            fields["customer_id"] = job.customer_id
        if fields:
            await self._save_job(job, *fields)
        return job

    @optimistic
    async def update_customer(self, customer_id: str, changes: CustomerUpdate) -> list[Job]:
        """Rename or re-address a customer on every one of their jobs.

        Their communications follow them to the new customer key. Contact
        fields left out of `changes` are kept as they are on each job.
        """
        jobs = [j for j in self._jobs if j.customer_id == customer_id]
        if not jobs:
            raise CustomerNotFound(customer_id)
        new_key = f"{changes.name}-{changes.address}"
        contact = changes.model_dump(include={"email", "phone", "zone"}, exclude_unset=True)

        undo = self._changes()
        for job in jobs:
            undo.touch(job)
            job.customer_name = changes.name
            job.address = changes.address
            job.customer_id = new_key
            for key, value in contact.items():
                setattr(job, key, value)

        records = []
        if new_key != customer_id:
            records = [c for c in self._communications if c.customer_id == customer_id]
            for record in records:
                undo.touch(record)
                record.customer_id = new_key

        fields = ("customer_id", "customer_name", "address", *contact)
        await asyncio.gather(*(self._save_job(j, *fields) for j in jobs))
        await asyncio.gather(*(
            self.store.update("communications", r.id, {"customer_id": new_key}) for r in records
        ))
        logger.info("Customer %s is now %s (%d jobs)", customer_id, new_key, len(jobs))
        return jobs

    @optimistic
    async def update_settings(self, changes: BusinessSettingsUpdate) -> BusinessSettings:
        fields = changes.model_dump(exclude_unset=True)
        try:
            updated = BusinessSettings.model_validate({**self.settings.model_dump(), **fields})
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise ValidationError(error["msg"], field=field) from e

        self._changes().settings = self.settings
        self.settings = updated
        if fields and self._settings_id is not None:
            await self.store.update(
                "business_settings", self._settings_id, {k: getattr(self.settings, k) for k in fields}
            )
        return self.settings

    # ── communications and expenses ──────────────────────

    @optimistic
    async def add_communication(self, data: CommunicationCreate) -> Communication:
        """Log a text, email or call against a job or directly against a customer."""
        customer_id = data.customer_id
        if data.job_id is not None:
            customer_id = self._find(data.job_id).customer_id
        if not customer_id:
            raise ValidationError("A job_id or customer_id is required", field="customer_id")

        record = Communication(
            organization_id=self.organization_id,
            customer_id=customer_id,
            job_id=data.job_id,
            type=data.type,
            subject=data.subject,
            body=data.body,
            date=self.now(),
        )
        await self._save_records([record])
        return record

    @optimistic
    async def add_expense(self, data: ExpenseCreate) -> Expense:
        expense = Expense(
            organization_id=self.organization_id,
            created_at=self.now(),
            **{**data.model_dump(), "date": data.date or self.today()},
        )
        self._changes().add(self._expenses, expense, index=0)
        await self.store.insert("expenses", expense.model_dump())
        logger.info("Recorded expense %s: %s %.2f", expense.id, expense.category.value, expense.amount)
        return expense

    @optimistic
    async def delete_expense(self, expense_id: str) -> None:
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                break
        else:
            raise ExpenseNotFound(expense_id)
        self._changes().remove(self._expenses, index)
        await self.store.delete("expenses", expense_id)

    # ── transitions ──────────────────────────────────────

    @optimistic
    async def accept(self, job_id: str, scheduled_date: date | None) -> Job:
        result = job_lifecycle.accept(self._edit(job_id), scheduled_date, self.now())
        return await self._apply(result, "scheduled_date")

    @optimistic
    async def reject(self, job_id: str) -> Job:
        result = job_lifecycle.reject(self._edit(job_id), self.now())
        return await self._apply(result)

    @optimistic
    async def cancel(self, job_id: str) -> Job:
        result = job_lifecycle.cancel(self._edit(job_id), self.now())
        return await self._apply(result)

    @optimistic
    async def complete(self, job_id: str) -> tuple[Job, Job | None]:
        """Complete a job; returns it with the auto-created next visit, if any."""
        result = job_lifecycle.complete(self._edit(job_id), self.settings, self.now())
        spawned = result.spawned
        if spawned is not None:
            spawned.route_position = self._next_position()
            self._changes().add(self._jobs, spawned)

        job = await self._apply(result, "completed_date", "payment_status", *_TIMER_FIELDS)
        if spawned is not None:
            await self.store.insert("jobs", spawned.model_dump())
            self._notify(
                "Recurring Job Created",
                f"Next visit for {job.customer_name} scheduled for {spawned.scheduled_date.isoformat()}",
            )
        return job, spawned

    @optimistic
    async def set_payment_status(self, job_id: str, status: PaymentStatus | None = None) -> Job:
        """Set the payment status of a completed job; `None` toggles it."""
        job = self._edit(job_id)
        now = self.now()
        if status is None:
            record = job_lifecycle.toggle_payment(job, now)
        else:
            record = job_lifecycle.set_payment_status(job, status, now)
        await self._save_job(job, "payment_status")
        await self._save_records([record])
        return job

    async def toggle_payment(self, job_id: str) -> Job:
        return await self.set_payment_status(job_id)

    # ── timer ────────────────────────────────────────────

    @optimistic
    async def start_timer(self, job_id: str) -> Job:
        job = job_timer.start_timer(self._edit(job_id), self.now())
        await self._save_job(job, *_TIMER_FIELDS)
        return job

    @optimistic
    async def stop_timer(self, job_id: str) -> Job:
        job = self._edit(job_id)
        job_timer.stop_timer(job, self.now())
        await self._save_job(job, *_TIMER_FIELDS)
        return job

    @optimistic
    async def toggle_timer(self, job_id: str) -> Job:
        job = job_timer.toggle_timer(self._edit(job_id), self.now())
        await self._save_job(job, *_TIMER_FIELDS)
        return job

    # ── schedule ─────────────────────────────────────────

    @optimistic
    async def reorder(self, ordered_ids: list[str]) -> list[Job]:
        """Apply a route order (manual drag or AI suggestion) to the job list."""
        undo = self._changes()
        undo.order = (self._jobs, [j.id for j in self._jobs])
        self._jobs[:] = reorder_jobs(self._jobs, ordered_ids)
        moved = []
        for position, job in enumerate(self._jobs):
            if job.route_position != position:
                undo.touch(job)
                job.route_position = position
                moved.append(job)
        await asyncio.gather(*(self._save_job(j, "route_position") for j in moved))
        return self._jobs

    @optimistic
    async def rain_delay(self, new_date: date, today: date | None = None) -> list[Job]:
        """Move all of today's scheduled jobs to `new_date` and flag them."""
        today = today or self.today()
        undo = self._changes()
        for job in job_lifecycle.due_for_rain_delay(self._jobs, today):
            undo.touch(job)
        affected = job_lifecycle.rain_delay(self._jobs, today, new_date)
        await asyncio.gather(*(
            self._save_job(j, "scheduled_date", "is_rain_delayed", "notes") for j in affected
        ))
        logger.info("Rain delay: moved %d jobs from %s to %s", len(affected), today, new_date)
        return affected
