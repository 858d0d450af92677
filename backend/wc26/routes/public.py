"""
Public read-only API endpoints.

No auth required. Only unlocked (paid) predictions are visible.
"""

from fastapi import APIRouter, Depends

from wc26.errors import PredictionError
from wc26.routes.dependencies import get_prediction_service
from wc26.routes.errors import to_http_exception
from wc26.routes.predictions import PredictionResponse
from wc26.services.prediction_service import PredictionService

router = APIRouter()


@router.get("/public/predictions/{prediction_id}", response_model=PredictionResponse)
def get_public_prediction(prediction_id: str, service: PredictionService = Depends(get_prediction_service)):
    try:
        return service.get_public_prediction(prediction_id)
    except PredictionError as e:
        raise to_http_exception(e)
