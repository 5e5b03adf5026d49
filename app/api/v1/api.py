from fastapi import APIRouter
from app.api.v1.endpoints import expenses, ledger, settlements

api_router = APIRouter()

api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(ledger.router, prefix="/groups", tags=["ledger"])
api_router.include_router(settlements.router, prefix="/groups", tags=["settlements"])
