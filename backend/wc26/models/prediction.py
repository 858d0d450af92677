from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Prediction(SQLModel, table=True):
    __table_args__ = (
        # Global, not per user: nobody may claim a bracket that already exists
        SAUniqueConstraint("canonical_hash", name="uq_prediction_canonical_hash"),
        SAUniqueConstraint("prediction_id", name="uq_prediction_public_id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    prediction_id: str  # Public id: WC26-XXXX-XXXX-XXXX
    user_id: str = Field(index=True)  # Opaque id supplied by auth

    group_standings: Dict[str, List[str]] = Field(sa_column=Column(JSON, nullable=False))
    third_place_teams: List[str] = Field(sa_column=Column(JSON, nullable=False))
    round_of_32: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    round_of_16: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    quarter_finals: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    semi_finals: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    final: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    third_place: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    champion: Optional[str] = Field(default=None)
    runner_up: Optional[str] = Field(default=None)

    canonical_hash: str  # 0x-prefixed keccak256, on-chain commitment

    # Payment unlock (written by the payment collaborator only)
    is_paid: bool = Field(default=False)
    paid_at: Optional[datetime] = Field(default=None)
    image_url: Optional[str] = Field(default=None)
    token_id: Optional[int] = Field(default=None)  # NFT token once minted

    created_at: datetime = Field(default_factory=_utcnow)
