from fastapi import APIRouter

from vacation_engine.api.audit import audit_router
from vacation_engine.api.balances import balances_router
from vacation_engine.api.medical_leaves import medical_leaves_router, teams_router
from vacation_engine.api.people import people_router
from vacation_engine.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(requests_router)
api_router.include_router(people_router)
api_router.include_router(balances_router)
api_router.include_router(medical_leaves_router)
api_router.include_router(teams_router)
api_router.include_router(audit_router)
