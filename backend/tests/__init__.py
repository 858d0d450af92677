# Force SQLModel table registration at test discovery time
from wc26.models.prediction import Prediction  # noqa: F401
