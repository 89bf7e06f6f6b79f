"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from greenpages.app.api.v1.endpoints import finance

router = APIRouter()

# Finance endpoints (agent debts, settlements, ledgers)
router.include_router(finance.router)
