from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_job_service
from app.schemas import Expense, ExpenseCreate
from app.services.job_service import JobService

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("", response_model=list[Expense])
async def list_expenses(service: JobService = Depends(get_job_service)):
    return service.expenses()


@router.post("", response_model=Expense, status_code=201)
async def add_expense(body: ExpenseCreate, service: JobService = Depends(get_job_service)):
    return await service.add_expense(body)


@router.delete("/{expense_id}")
async def delete_expense(expense_id: str, service: JobService = Depends(get_job_service)):
    await service.delete_expense(expense_id)
    return {"ok": True, "id": expense_id}
