from wellness.client.base import ApiError, unwrap
from wellness.client.client import WellnessClient

__all__ = ["ApiError", "WellnessClient", "unwrap"]
