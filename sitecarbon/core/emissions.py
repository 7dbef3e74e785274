"""
Sustainable Web Design (v3) per-byte emissions model, the "swd" model
of the Green Web Foundation's co2.js.

Energy per transferred gigabyte is split into four system segments and
each segment's energy is multiplied by a grid carbon intensity.
"""
import math
from typing import Any

KWH_PER_GB = 0.81
GLOBAL_GRID_INTENSITY = 494  # gCO2e/kWh
RENEWABLES_GRID_INTENSITY = 50  # gCO2e/kWh

DATA_CENTER_SHARE = 0.15
NETWORK_SHARE = 0.14
CONSUMER_DEVICE_SHARE = 0.52
PRODUCTION_SHARE = 0.19


def _as_bytes(value: Any) -> float:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(n) or math.isinf(n) or n < 0:
        return 0.0
    return n


def per_byte(byte_count: Any, green: bool = False) -> float:
    """Grams of CO2e for transferring byte_count bytes."""
    energy = _as_bytes(byte_count) / 1e9 * KWH_PER_GB
    data_center_intensity = RENEWABLES_GRID_INTENSITY if green else GLOBAL_GRID_INTENSITY
    return (
        energy * DATA_CENTER_SHARE * data_center_intensity
        + energy * NETWORK_SHARE * GLOBAL_GRID_INTENSITY
        + energy * CONSUMER_DEVICE_SHARE * GLOBAL_GRID_INTENSITY
        + energy * PRODUCTION_SHARE * GLOBAL_GRID_INTENSITY
    )


def estimate_emissions(byte_count: Any, green: bool = False) -> float:
    return round(per_byte(byte_count, green), 3)
