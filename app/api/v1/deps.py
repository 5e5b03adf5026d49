from fastapi import Depends

from app.db.mongo import get_db
from app.services.ledger_service import LedgerService


def get_ledger_service(db = Depends(get_db)) -> LedgerService:
    return LedgerService(db)
