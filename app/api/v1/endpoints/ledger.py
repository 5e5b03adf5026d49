from typing import List
from fastapi import APIRouter, Depends

from app.api.v1.deps import get_ledger_service
from app.core.auth import get_current_member_id
from app.schemas.expense import ExpenseResponse
from app.schemas.ledger import BalanceResponse, RecalculationResponse, TransferResponse
from app.services.ledger_service import LedgerService

router = APIRouter()


@router.get("/{group_id}/expenses", response_model=List[ExpenseResponse])
async def list_group_expenses(
    group_id: str,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """List a group's expenses, newest first"""
    expenses = await service.list_expenses(member_id, group_id)
    return [ExpenseResponse.model_validate(e) for e in expenses]


@router.get("/{group_id}/balances", response_model=List[BalanceResponse])
async def get_group_balances(
    group_id: str,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Net balance of every member"""
    balances = await service.get_balances(member_id, group_id)
    return [BalanceResponse.model_validate(b) for b in balances]


@router.get("/{group_id}/settlement-plan", response_model=List[TransferResponse])
async def get_settlement_plan(
    group_id: str,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Simplified set of payments that settles the group"""
    transfers = await service.get_settlement_plan(member_id, group_id)
    return [TransferResponse.model_validate(t) for t in transfers]


@router.post("/{group_id}/recalculate", response_model=RecalculationResponse)
async def recalculate_group_balances(
    group_id: str,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Rebuild balances from the full expense and settlement history"""
    result = await service.recalculate_balances(member_id, group_id)
    return RecalculationResponse(
        old_balances=[BalanceResponse.model_validate(b) for b in result["old_balances"]],
        new_balances=[BalanceResponse.model_validate(b) for b in result["new_balances"]],
        changed=result["changed"]
    )
