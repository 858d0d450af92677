"""
Shared route dependencies.

Authentication is handled upstream; the authenticated caller's opaque id is
forwarded in the X-User-Id header.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlmodel import Session

from wc26.database import get_session
from wc26.services.prediction_service import PredictionService, SqlPredictionStore


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()


def get_prediction_service(session: Session = Depends(get_session)) -> PredictionService:
    return PredictionService(SqlPredictionStore(session))
