from typing import List
from fastapi import APIRouter, Depends

from app.api.v1.deps import get_ledger_service
from app.core.auth import get_current_member_id
from app.schemas.ledger import BalanceResponse
from app.schemas.settlement import SettlementCreate, SettlementResponse, SettlementWithBalances
from app.services.ledger_service import LedgerService

router = APIRouter()


@router.post("/{group_id}/settlements", response_model=SettlementWithBalances)
async def record_settlement(
    group_id: str,
    settlement_in: SettlementCreate,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Record a payment between two members"""
    balances, settlement = await service.record_settlement(
        member_id,
        group_id,
        settlement_in.from_member_id,
        settlement_in.to_member_id,
        settlement_in.amount_cents,
        method=settlement_in.method,
        notes=settlement_in.notes
    )
    return SettlementWithBalances(
        settlement=SettlementResponse.model_validate(settlement),
        balances=[BalanceResponse.model_validate(b) for b in balances]
    )


@router.get("/{group_id}/settlements", response_model=List[SettlementResponse])
async def get_settlement_history(
    group_id: str,
    member_id: str = Depends(get_current_member_id),
    service: LedgerService = Depends(get_ledger_service)
):
    """Settlement history, newest first"""
    settlements = await service.get_settlement_history(member_id, group_id)
    return [SettlementResponse.model_validate(s) for s in settlements]
