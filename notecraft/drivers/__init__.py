"""
Iteration drivers, one per note transform.
"""
from typing import Dict, Type

from notecraft.drivers.base import DriverResult, Phase, TransformDriver
from notecraft.drivers.punctuate import PunctuateDriver
from notecraft.drivers.split import SplitDriver
from notecraft.drivers.summarize import SummarizeDriver
from notecraft.drivers.cosmetic import CosmeticDriver

DRIVERS: Dict[str, Type[TransformDriver]] = {
    "punctuate": PunctuateDriver,
    "split": SplitDriver,
    "summarize": SummarizeDriver,
    "cosmetic": CosmeticDriver,
}


def get_driver_class(feature: str) -> Type[TransformDriver]:
    try:
        return DRIVERS[feature]
    except KeyError:
        raise ValueError(f"Unknown feature: {feature}. Choose from: {', '.join(DRIVERS)}")


__all__ = [
    "DriverResult",
    "Phase",
    "TransformDriver",
    "PunctuateDriver",
    "SplitDriver",
    "SummarizeDriver",
    "CosmeticDriver",
    "DRIVERS",
    "get_driver_class",
]
