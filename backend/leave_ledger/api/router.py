from fastapi import APIRouter

from leave_ledger.api.employees import employees_router
from leave_ledger.api.holidays import holidays_router
from leave_ledger.api.maintenance import maintenance_router
from leave_ledger.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(employees_router)
api_router.include_router(requests_router)
api_router.include_router(holidays_router)
api_router.include_router(maintenance_router)
