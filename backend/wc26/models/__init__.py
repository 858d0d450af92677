from wc26.models.prediction import Prediction

__all__ = [
    "Prediction",
]
