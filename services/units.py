"""Imperial to metric conversions for Ecowitt readings."""

from __future__ import annotations

HECTOPASCALS_PER_INCH_HG = 33.8639


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32) * 5 / 9


def inches_hg_to_hectopascals(inches_hg: float) -> float:
    return inches_hg * HECTOPASCALS_PER_INCH_HG
