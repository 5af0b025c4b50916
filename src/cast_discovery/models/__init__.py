"""
Pydantic models for cast discovery.
"""
from .common import BasePydanticModel, FrozenPydanticModel
from .device import DeviceRecord

__all__ = [
    "BasePydanticModel",
    "DeviceRecord",
    "FrozenPydanticModel",
]
