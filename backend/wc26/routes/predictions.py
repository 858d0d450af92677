"""
Prediction API Routes
Submission, owner lookups and standalone canonical hashing.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, ConfigDict, Field

from wc26.errors import PredictionError
from wc26.routes.dependencies import get_current_user_id, get_prediction_service
from wc26.routes.errors import to_http_exception
from wc26.services.canonical_hash import canonical_hash, shorten_hash, verify_hash
from wc26.services.prediction_payload import PredictionPayload
from wc26.services.prediction_service import PredictionService

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class PredictionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prediction_id: str
    user_id: str
    group_standings: Dict[str, List[str]]
    third_place_teams: List[str]
    round_of_32: Optional[List[Dict[str, Any]]] = None
    round_of_16: Optional[List[Dict[str, Any]]] = None
    quarter_finals: Optional[List[Dict[str, Any]]] = None
    semi_finals: Optional[List[Dict[str, Any]]] = None
    final: Optional[Dict[str, Any]] = None
    third_place: Optional[Dict[str, Any]] = None
    champion: Optional[str] = None
    runner_up: Optional[str] = None
    canonical_hash: str
    is_paid: bool
    image_url: Optional[str] = None
    token_id: Optional[int] = None
    created_at: datetime


class PredictionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prediction_id: str
    champion: Optional[str] = None
    runner_up: Optional[str] = None
    is_paid: bool
    image_url: Optional[str] = None
    created_at: datetime


class HashResponse(BaseModel):
    canonical_hash: str
    short_hash: str


class VerifyHashRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prediction: PredictionPayload
    expected_hash: str = Field(alias="expectedHash")


class VerifyHashResponse(BaseModel):
    valid: bool


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/predictions", response_model=PredictionResponse, status_code=201)
def create_prediction(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    service: PredictionService = Depends(get_prediction_service),
):
    """
    Submit a bracket prediction.

    The body is parsed by the service so malformed payloads get the same
    400 error shape as invalid groups or brackets. 409: this exact bracket
    already exists.
    """
    try:
        return service.submit(user_id, payload)
    except PredictionError as e:
        raise to_http_exception(e)


@router.get("/predictions", response_model=List[PredictionSummary])
def list_predictions(
    user_id: str = Depends(get_current_user_id),
    service: PredictionService = Depends(get_prediction_service),
):
    """Caller's predictions, newest first."""
    return service.list_user_predictions(user_id)


@router.get("/predictions/{prediction_id}", response_model=PredictionResponse)
def get_prediction(
    prediction_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PredictionService = Depends(get_prediction_service),
):
    try:
        return service.get_prediction(prediction_id, user_id)
    except PredictionError as e:
        raise to_http_exception(e)


@router.post("/predictions/hash", response_model=HashResponse)
def compute_prediction_hash(payload: PredictionPayload):
    """Canonical hash of a payload without validating or storing it."""
    try:
        digest = canonical_hash(payload)
    except PredictionError as e:
        raise to_http_exception(e)
    return HashResponse(canonical_hash=digest, short_hash=shorten_hash(digest))


@router.post("/predictions/verify-hash", response_model=VerifyHashResponse)
def verify_prediction_hash(request: VerifyHashRequest):
    return VerifyHashResponse(valid=verify_hash(request.prediction, request.expected_hash))
