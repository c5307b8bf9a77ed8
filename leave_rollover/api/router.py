from fastapi import APIRouter

from leave_rollover.api.balances import employee_balance_router
from leave_rollover.api.rollover import admin_rollover_router

api_router = APIRouter()
api_router.include_router(admin_rollover_router)
api_router.include_router(employee_balance_router)
