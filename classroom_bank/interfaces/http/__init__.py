from fastapi import APIRouter

from classroom_bank.interfaces.http.routers import accounts, lessons, messages, time_travel


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(accounts.router, tags=["ledger"])
    router.include_router(time_travel.router, tags=["time travel"])
    router.include_router(messages.router, tags=["messages"])
    router.include_router(lessons.router, tags=["lesson management"])
    return router


__all__ = [
    "create_api_router",
]
