"""
Dependencies resolving the core components created at startup.
They live on app.state, never as module globals.
"""

from fastapi import Request

from payments.services.payment_cache import PaymentCache
from payments.services.payment_recorder import PaymentRecorder
from payments.services.payment_store import PaymentStore


async def get_recorder(request: Request) -> PaymentRecorder:
    return request.app.state.recorder


async def get_store(request: Request) -> PaymentStore:
    return request.app.state.store


async def get_cache(request: Request) -> PaymentCache:
    return request.app.state.cache
