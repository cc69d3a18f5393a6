# api/v1/router.py
from fastapi import APIRouter

from . import contracts, intelligence, logs

api_router = APIRouter()

api_router.include_router(logs.router, prefix="/logs", tags=["Logs"])
api_router.include_router(intelligence.router, prefix="/intelligence", tags=["Intelligence"])
api_router.include_router(contracts.router, prefix="/contracts", tags=["Contracts"])
