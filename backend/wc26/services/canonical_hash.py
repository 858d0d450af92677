"""
Canonical prediction hashing.

The digest is the on-chain commitment for a prediction and the database
uniqueness key, so the byte stream fed to the hash must never change:

1. Deep sort: mapping keys sorted (recursively); sequences keep their order.
2. Serialize: minified JSON, no whitespace, non-ASCII kept as UTF-8,
   integral floats written as integers (JavaScript number formatting).
3. Digest: Keccak-256 of the UTF-8 bytes, hex encoded with a 0x prefix
   (same as Solidity keccak256 / ethers.keccak256).

Absent optional prediction fields and explicit nulls hash identically: the
payload is normalised through PredictionPayload, which always emits every
top-level key with null for anything not submitted. Champion and runner-up
are always taken from the Final before hashing, so a payload hashes the same
with or without them.
"""

import json
import logging
import math
from typing import Any, Mapping, Union

from Crypto.Hash import keccak
from pydantic import BaseModel, ValidationError

from wc26.errors import HashGenerationError, PredictionError
from wc26.services.prediction_payload import PredictionPayload

logger = logging.getLogger(__name__)

HASH_PREFIX = "0x"


def deep_sort(value: Any) -> Any:
    """Recursively rebuild mappings with sorted keys. Lists keep element order."""
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return {key: deep_sort(value[key]) for key in sorted(value.keys())}
    if isinstance(value, (list, tuple)):
        return [deep_sort(item) for item in value]
    return value


def _normalise_numbers(value: Any) -> Any:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise HashGenerationError(f"Cannot hash non-finite number: {value}")
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, dict):
        return {k: _normalise_numbers(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalise_numbers(v) for v in value]
    return value


def canonical_json(value: Any) -> str:
    """Deep-sorted, whitespace-free JSON text for ``value``."""
    try:
        sorted_value = _normalise_numbers(deep_sort(value))
        return json.dumps(sorted_value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except HashGenerationError:
        raise
    except (TypeError, ValueError) as e:
        raise HashGenerationError(f"Failed to generate prediction hash: {e}") from e


def keccak256_hex(data: bytes) -> str:
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return HASH_PREFIX + digest.hexdigest()


def hash_canonical(value: Any) -> str:
    """Keccak-256 of the canonical JSON of an arbitrary JSON-like value."""
    canonical = canonical_json(value)
    preview = canonical if len(canonical) <= 100 else canonical[:100] + "..."
    logger.debug(f"Generating hash for prediction data: {preview}")
    return keccak256_hex(canonical.encode("utf-8"))


def normalise_prediction(prediction: Union[PredictionPayload, Mapping[str, Any]]) -> PredictionPayload:
    """Parsed payload with champion / runner-up derived from the Final."""
    if not isinstance(prediction, PredictionPayload):
        try:
            prediction = PredictionPayload.model_validate(prediction)
        except ValidationError as e:
            raise HashGenerationError(f"Prediction is not hashable: {e.error_count()} invalid field(s)") from e
    return prediction.with_results()


def canonical_hash(prediction: Union[PredictionPayload, Mapping[str, Any]]) -> str:
    """
    Canonical digest of a full prediction.

    Raises:
        InvalidBracketInput: champion / runnerUp contradict the Final
        HashGenerationError: the prediction cannot be normalised or serialized
    """
    payload = normalise_prediction(prediction)
    digest = hash_canonical(payload.model_dump(by_alias=True))
    logger.info(f"Generated prediction hash: {digest}")
    return digest


def verify_hash(prediction: Union[PredictionPayload, Mapping[str, Any]], expected: str) -> bool:
    """True when ``prediction`` hashes to ``expected``. Hashing failures count as a mismatch."""
    try:
        computed = canonical_hash(prediction)
    except PredictionError as e:
        logger.error(f"Error verifying prediction hash: {e}")
        return False

    matches = computed == (expected or "").lower()
    if not matches:
        logger.warning(f"Hash mismatch - Expected: {expected}, Got: {computed}")
    return matches


def shorten_hash(full_hash: str) -> str:
    """First 12 characters for display (0x1234567890...)."""
    if not full_hash or len(full_hash) < 12:
        return full_hash
    return full_hash[:12] + "..."


def format_transaction_hash(tx_hash: str) -> str:
    """First 10 + last 8 characters for display (0x12345678...9abcdef0)."""
    if not tx_hash or len(tx_hash) < 20:
        return tx_hash
    return f"{tx_hash[:10]}...{tx_hash[-8:]}"
