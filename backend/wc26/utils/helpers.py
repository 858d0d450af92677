"""Small helpers shared by services and routes."""

import secrets

PREDICTION_ID_PREFIX = "WC26"


def generate_prediction_id() -> str:
    """
    Public prediction identifier, e.g. ``WC26-3F9A-0B1C-77DE``.

    12 upper-case hex characters from a CSPRNG, split in groups of four.
    """
    hex_part = secrets.token_hex(6).upper()
    return f"{PREDICTION_ID_PREFIX}-{hex_part[0:4]}-{hex_part[4:8]}-{hex_part[8:12]}"
