from fastapi import APIRouter, Depends, status

from app.api.v1.deps import get_ledger_service
from app.core.auth import get_current_member_id
from app.schemas.expense import (
    DeletedExpense,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    ExpenseWithBalances,
)
from app.schemas.ledger import BalanceResponse
from app.services.ledger_service import LedgerService

router = APIRouter()


@router.post("/", response_model=ExpenseWithBalances, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Create an equally split expense"""
    expense, balances = await service.create_expense(
        member_id,
        expense_in.group_id,
        expense_in.payer_id,
        expense_in.total_cents,
        expense_in.member_ids,
        description=expense_in.description,
        category=expense_in.category
    )
    return ExpenseWithBalances(
        expense=ExpenseResponse.model_validate(expense),
        balances=[BalanceResponse.model_validate(b) for b in balances]
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: str,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Get an expense by ID"""
    expense = await service.get_expense(member_id, expense_id)
    return ExpenseResponse.model_validate(expense)


@router.patch("/{expense_id}", response_model=ExpenseWithBalances)
async def update_expense(
    expense_id: str,
    expense_in: ExpenseUpdate,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Update an expense (payer only)"""
    expense, balances = await service.update_expense(
        member_id,
        expense_id,
        description=expense_in.description,
        total_cents=expense_in.total_cents,
        member_ids=expense_in.member_ids,
        category=expense_in.category
    )
    return ExpenseWithBalances(
        expense=ExpenseResponse.model_validate(expense),
        balances=[BalanceResponse.model_validate(b) for b in balances]
    )


@router.delete("/{expense_id}", response_model=DeletedExpense)
async def delete_expense(
    expense_id: str,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Delete an expense (payer only)"""
    expense, balances = await service.delete_expense(member_id, expense_id)
    return DeletedExpense(
        deleted_expense=ExpenseResponse.model_validate(expense),
        balances=[BalanceResponse.model_validate(b) for b in balances]
    )
