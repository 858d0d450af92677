"""
Prediction submission.

submit() runs, in order, failing fast:
1. payload shape and group data (12 groups x 4 teams, 8 traceable wildcards)
2. bracket generation + round validation, when any knockout round is present
3. champion / runner-up derivation from the Final
4. canonical hash
5. global duplicate lookup by hash (any user)
6. insert, unpaid

The store's unique constraint on canonical_hash is the real guard against two
concurrent submissions of the same bracket; the lookup in step 5 exists to give
the better error message. A constraint violation on insert is reported with the
same duplicate errors when the hash row exists; otherwise the public prediction id
collided and the insert is retried with a fresh one.
"""

import logging
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from wc26.errors import (
    DuplicateClaimedPrediction,
    DuplicateOwnPrediction,
    DuplicatePredictionError,
    InvalidBracketInput,
    InvalidGroupData,
    PredictionNotFound,
)
from wc26.models.prediction import Prediction
from wc26.services.bracket_generator import generate_round_of_32, wildcard_groups
from wc26.services.canonical_hash import canonical_hash
from wc26.services.prediction_payload import BracketMatch, PredictionPayload, TeamId
from wc26.services.round_validator import validate_bracket
from wc26.utils.helpers import generate_prediction_id
from wc26.utils.seeding_table import GROUP_LETTERS, TEAMS_PER_GROUP, WILDCARD_COUNT

logger = logging.getLogger(__name__)

PREDICTION_ID_ATTEMPTS = 3


# ============================================================================
# Persistence boundary
# ============================================================================


class PredictionStore(Protocol):
    def get_by_hash(self, canonical_hash: str) -> Optional[Prediction]:
        ...

    def get_by_prediction_id(self, prediction_id: str) -> Optional[Prediction]:
        ...

    def insert(self, prediction: Prediction) -> Prediction:
        """Persist; raises IntegrityError when canonical_hash already exists."""
        ...

    def list_for_user(self, user_id: str) -> List[Prediction]:
        ...


class SqlPredictionStore:
    """PredictionStore backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_hash(self, canonical_hash: str) -> Optional[Prediction]:
        return self.session.exec(select(Prediction).where(Prediction.canonical_hash == canonical_hash)).first()

    def get_by_prediction_id(self, prediction_id: str) -> Optional[Prediction]:
        return self.session.exec(select(Prediction).where(Prediction.prediction_id == prediction_id)).first()

    def insert(self, prediction: Prediction) -> Prediction:
        try:
            self.session.add(prediction)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        self.session.refresh(prediction)
        return prediction

    def list_for_user(self, user_id: str) -> List[Prediction]:
        query = (
            select(Prediction)
            .where(Prediction.user_id == user_id)
            .order_by(Prediction.created_at.desc(), Prediction.id.desc())
        )
        return list(self.session.exec(query).all())


# ============================================================================
# Payload checks
# ============================================================================


def parse_payload(payload: Union[PredictionPayload, Mapping[str, Any]]) -> PredictionPayload:
    if isinstance(payload, PredictionPayload):
        return payload
    try:
        return PredictionPayload.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidBracketInput(f"Invalid prediction payload at {location}: {first['msg']}") from e


def validate_group_data(standings: Mapping[str, Sequence[TeamId]], wildcards: Sequence[TeamId]) -> None:
    """
    Require exactly groups A-L, each with 4 distinct team ids, and 8 distinct
    wildcard teams that each finished third in some group.

    Raises:
        InvalidGroupData
    """
    unexpected = sorted(set(standings) - set(GROUP_LETTERS))
    if unexpected:
        raise InvalidGroupData(f"Unknown group(s): {', '.join(unexpected)}", groups=unexpected)

    for group in GROUP_LETTERS:
        teams = standings.get(group)
        if not teams or len(teams) != TEAMS_PER_GROUP:
            raise InvalidGroupData(f"Invalid group standings for group {group}", group=group)
        if any(not team for team in teams) or len(set(teams)) != TEAMS_PER_GROUP:
            raise InvalidGroupData(f"Group {group} must rank {TEAMS_PER_GROUP} distinct teams", group=group)

    if not wildcards or len(wildcards) != WILDCARD_COUNT:
        raise InvalidGroupData(f"Must select exactly {WILDCARD_COUNT} third place teams")
    if len(set(wildcards)) != WILDCARD_COUNT:
        raise InvalidGroupData("Third place teams must be distinct")

    origin = wildcard_groups(standings, wildcards)
    for team in wildcards:
        if team not in origin:
            raise InvalidGroupData(f"{team} did not finish third in any group", team=team)


def _dump_round(matches: Optional[List[BracketMatch]]) -> Optional[List[dict]]:
    if matches is None:
        return None
    return [m.model_dump(by_alias=True) for m in matches]


def _dump_match(match: Optional[BracketMatch]) -> Optional[dict]:
    return match.model_dump(by_alias=True) if match is not None else None


def record_payload(prediction: Prediction) -> PredictionPayload:
    """Rebuild the hashed payload from a stored prediction (for independent re-hashing)."""
    return PredictionPayload(
        group_standings=prediction.group_standings,
        third_place_teams=prediction.third_place_teams,
        round_of_32=prediction.round_of_32,
        round_of_16=prediction.round_of_16,
        quarter_finals=prediction.quarter_finals,
        semi_finals=prediction.semi_finals,
        final=prediction.final,
        third_place=prediction.third_place,
        champion=prediction.champion,
        runner_up=prediction.runner_up,
    )


# ============================================================================
# Service
# ============================================================================


class PredictionService:
    def __init__(self, store: PredictionStore):
        self.store = store

    def submit(self, user_id: str, payload: Union[PredictionPayload, Mapping[str, Any]]) -> Prediction:
        """
        Validate, hash and persist a prediction for ``user_id``.

        Raises:
            InvalidGroupData, InvalidBracketInput, WrongMatchCount,
            BracketValidationError subclasses (PairingMismatch, ...),
            DuplicateOwnPrediction, DuplicateClaimedPrediction,
            IntegrityError (public id still colliding after retries),
            HashGenerationError
        """
        data = parse_payload(payload)
        validate_group_data(data.group_standings, data.third_place_teams)

        if data.has_bracket():
            expected_r32 = generate_round_of_32(data.group_standings, data.third_place_teams)
            validate_bracket(data, expected_r32)

        data = data.with_results()
        digest = canonical_hash(data)

        existing = self.store.get_by_hash(digest)
        if existing is not None:
            raise self._duplicate_error(user_id, existing, digest)

        fields = dict(
            user_id=user_id,
            group_standings=data.group_standings,
            third_place_teams=data.third_place_teams,
            round_of_32=_dump_round(data.round_of_32),
            round_of_16=_dump_round(data.round_of_16),
            quarter_finals=_dump_round(data.quarter_finals),
            semi_finals=_dump_round(data.semi_finals),
            final=_dump_match(data.final),
            third_place=_dump_match(data.third_place),
            champion=data.champion,
            runner_up=data.runner_up,
            canonical_hash=digest,
            is_paid=False,
        )

        for attempt in range(1, PREDICTION_ID_ATTEMPTS + 1):
            prediction = Prediction(prediction_id=generate_prediction_id(), **fields)
            try:
                prediction = self.store.insert(prediction)
                break
            except IntegrityError:
                # Either a concurrent submission of the same bracket won, or the public id is taken
                existing = self.store.get_by_hash(digest)
                if existing is not None:
                    raise self._duplicate_error(user_id, existing, digest)
                if attempt == PREDICTION_ID_ATTEMPTS:
                    raise
                logger.warning(f"Prediction id {prediction.prediction_id} already in use, retrying")

        logger.info(f"Prediction created: {prediction.prediction_id} by user {user_id}")
        return prediction

    def _duplicate_error(self, user_id: str, existing: Prediction, digest: str) -> DuplicatePredictionError:
        if existing.user_id == user_id:
            logger.info(f"User {user_id} resubmitted prediction {existing.prediction_id}")
            return DuplicateOwnPrediction(digest, existing.prediction_id)
        logger.info(f"User {user_id} submitted a bracket already claimed ({digest})")
        return DuplicateClaimedPrediction(digest)

    def get_prediction(self, prediction_id: str, user_id: str) -> Prediction:
        prediction = self.store.get_by_prediction_id(prediction_id)
        if prediction is None or prediction.user_id != user_id:
            raise PredictionNotFound("Prediction not found")
        return prediction

    def list_user_predictions(self, user_id: str) -> List[Prediction]:
        return self.store.list_for_user(user_id)

    def get_public_prediction(self, prediction_id: str) -> Prediction:
        prediction = self.store.get_by_prediction_id(prediction_id)
        if prediction is None or not prediction.is_paid:
            raise PredictionNotFound("Prediction not found or not unlocked")
        return prediction
