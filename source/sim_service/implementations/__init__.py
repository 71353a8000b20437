from .runner import PipelineRunner
from .store import RedisStore

__all__ = [
    "PipelineRunner",
    "RedisStore",
]
