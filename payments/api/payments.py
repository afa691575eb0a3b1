"""
Payment API Router.

- POST /payment: record a payment exactly once per distinct payload
- GET /all-data: diagnostic dump of cache and database
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from payments.api.deps import get_cache, get_recorder, get_store
from payments.exceptions import InvalidPayload, StorageFailure
from payments.schemas.payment import (
    AllDataResponse,
    ErrorResponse,
    PaymentPayload,
    PaymentResponse,
)
from payments.services.payment_cache import PaymentCache
from payments.services.payment_recorder import PaymentRecorder
from payments.services.payment_store import PaymentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])


@router.post(
    "/payment",
    response_model=PaymentResponse,
    responses={
        201: {"model": PaymentResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_payment(
    request: Request,
    recorder: PaymentRecorder = Depends(get_recorder),
):
    """
    Record a payment idempotently.
    
    Returns 201 when the payload is seen for the first time and 200
    with the original record for every repeat.
    """
    try:
        body = await request.json()
    except ValueError:
        raise InvalidPayload()
    
    if not isinstance(body, dict):
        raise InvalidPayload()
    
    outcome = await recorder.record(PaymentPayload.model_validate(body))
    
    response = PaymentResponse(
        uuid=outcome.fingerprint,
        data=outcome.record,
        message=outcome.status.message,
    )
    return JSONResponse(
        status_code=201 if outcome.status.created else 200,
        content=response.model_dump(by_alias=True),
    )


@router.get(
    "/all-data",
    response_model=AllDataResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_all_data(
    cache: PaymentCache = Depends(get_cache),
    store: PaymentStore = Depends(get_store),
):
    """Fetch all data (for testing)."""
    try:
        database = await store.list_all()
    except StorageFailure as e:
        logger.error(f"Error fetching data: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch data"},
        )
    
    response = AllDataResponse(cache=cache.snapshot(), database=database)
    return JSONResponse(content=response.model_dump(by_alias=True))
