"""
Prediction error taxonomy.

Services raise these; routes translate them into HTTP responses using
``status_code`` and ``to_detail()``.

- Input-shape errors (400): structurally wrong payloads.
- Bracket consistency errors (400): the bracket contradicts tournament progression.
- Uniqueness errors (409): the exact bracket has already been submitted.
- Internal errors (500): never shown verbatim to the client.
"""

from typing import Any, Dict, Optional, Sequence


class PredictionError(Exception):
    """Base class for every error raised by the prediction core."""

    status_code: int = 400
    code: str = "PREDICTION_ERROR"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_detail(self) -> Dict[str, Any]:
        detail: Dict[str, Any] = {"code": self.code, "message": self.message}
        detail.update({k: v for k, v in self.context.items() if v is not None})
        return detail


# ============================================================================
# Input shape
# ============================================================================


class InvalidGroupData(PredictionError):
    code = "INVALID_GROUP_DATA"


class InvalidBracketInput(PredictionError):
    code = "INVALID_BRACKET_INPUT"


class WrongMatchCount(PredictionError):
    code = "WRONG_MATCH_COUNT"

    def __init__(self, stage_name: str, expected: int, actual: int):
        super().__init__(
            f"{stage_name} must have exactly {expected} matches, got {actual}",
            round=stage_name,
            expected_count=expected,
            actual_count=actual,
        )


# ============================================================================
# Bracket consistency
# ============================================================================


class BracketValidationError(PredictionError):
    code = "BRACKET_INCONSISTENT"

    def __init__(self, message: str, stage_name: str, match_index: Optional[int] = None, **context: Any):
        super().__init__(message, round=stage_name, match_index=match_index, **context)
        self.stage_name = stage_name
        self.match_index = match_index


class PairingMismatch(BracketValidationError):
    code = "PAIRING_MISMATCH"

    def __init__(
        self,
        stage_name: str,
        match_index: int,
        expected: Sequence[Optional[str]],
        actual: Sequence[Optional[str]],
        message: Optional[str] = None,
    ):
        expected_1, expected_2 = (team or "TBD" for team in expected)
        super().__init__(
            message or f"Invalid {stage_name} match {match_index + 1}: expected {expected_1} vs {expected_2}",
            stage_name,
            match_index,
            expected=list(expected),
            actual=list(actual),
        )


class IncompleteMatch(BracketValidationError):
    code = "INCOMPLETE_MATCH"


class DuplicateTeamInMatch(BracketValidationError):
    code = "DUPLICATE_TEAM_IN_MATCH"


class DuplicateMatchInRound(BracketValidationError):
    code = "DUPLICATE_MATCH_IN_ROUND"


class InvalidWinner(BracketValidationError):
    code = "INVALID_WINNER"


# ============================================================================
# Uniqueness
# ============================================================================


class DuplicatePredictionError(PredictionError):
    status_code = 409
    code = "DUPLICATE_PREDICTION"

    def __init__(self, message: str, canonical_hash: str, prediction_id: Optional[str] = None):
        super().__init__(message, canonical_hash=canonical_hash, prediction_id=prediction_id)
        self.canonical_hash = canonical_hash
        self.prediction_id = prediction_id


class DuplicateOwnPrediction(DuplicatePredictionError):
    code = "DUPLICATE_OWN_PREDICTION"

    def __init__(self, canonical_hash: str, prediction_id: Optional[str] = None):
        super().__init__("You already made this exact bracket", canonical_hash, prediction_id)


class DuplicateClaimedPrediction(DuplicatePredictionError):
    code = "DUPLICATE_CLAIMED_PREDICTION"

    def __init__(self, canonical_hash: str):
        # The other owner's public id is not disclosed.
        super().__init__("Someone else already claimed this exact bracket", canonical_hash)


# ============================================================================
# Lookup / internal
# ============================================================================


class PredictionNotFound(PredictionError):
    status_code = 404
    code = "PREDICTION_NOT_FOUND"


class HashGenerationError(PredictionError):
    status_code = 500
    code = "HASH_GENERATION_FAILED"
