"""
주파수 마스크 생성기

반환되는 함수는 모두 (radius, width, height) → multiplier 형태이며
radius ndarray에 대해 벡터화되어 동작.
"""

import math

import numpy as np

from ...errors import ValidationError


def _check_radius(value: float, name: str) -> float:
    if not (math.isfinite(value) and value >= 0):
        raise ValidationError(f"{name}는 0 이상의 유한값이어야 합니다: {value}")
    return float(value)


def create_low_pass_filter(cutoff_radius: float):
    """radius <= cutoff → 1, 그 외 0"""
    cutoff = _check_radius(cutoff_radius, "cutoff_radius")

    def low_pass(radius, width=None, height=None):
        return np.where(np.asarray(radius) <= cutoff, 1.0, 0.0)
    return low_pass


def create_high_pass_filter(cutoff_radius: float):
    """radius >= cutoff → 1, 그 외 0 (cutoff 위치는 low/high 모두 통과)"""
    cutoff = _check_radius(cutoff_radius, "cutoff_radius")

    def high_pass(radius, width=None, height=None):
        return np.where(np.asarray(radius) >= cutoff, 1.0, 0.0)
    return high_pass


def create_band_pass_filter(low_cutoff: float, high_cutoff: float):
    """low <= radius <= high → 1"""
    low = _check_radius(low_cutoff, "low_cutoff")
    high = _check_radius(high_cutoff, "high_cutoff")
    if low > high:
        raise ValidationError(f"low_cutoff({low})가 high_cutoff({high})보다 큽니다")

    def band_pass(radius, width=None, height=None):
        r = np.asarray(radius)
        return np.where((r >= low) & (r <= high), 1.0, 0.0)
    return band_pass


def create_gaussian_frequency_filter(sigma: float):
    """exp(-radius² / 2σ²)"""
    if not (math.isfinite(sigma) and sigma > 0):
        raise ValidationError(f"sigma는 양의 유한값이어야 합니다: {sigma}")

    def gaussian(radius, width=None, height=None):
        r = np.asarray(radius, dtype=np.float64)
        return np.exp(-(r * r) / (2 * sigma * sigma))
    return gaussian
