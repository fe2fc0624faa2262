from .traits import Precision, SignalTrait
from .buffers import EngineBuffers, allocate_buffers
from .profile import EngineProfile, build_engine

__all__ = [
    "Precision",
    "SignalTrait",
    "EngineBuffers",
    "allocate_buffers",
    "EngineProfile",
    "build_engine",
]
