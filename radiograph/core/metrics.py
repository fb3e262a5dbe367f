"""
CT/X-Ray 이미지 품질 지표

SNR, CNR, 투과율(%), 감쇠계수.

빈 입력/0 나눗셈은 예외 없이 정의된 값을 반환:
    - 빈 ROI → 0
    - stdDev == 0 → inf (DegenerateResultWarning)
    - I0 == 0 → 0
"""

import math
import logging
import warnings
from typing import Optional

import numpy as np

from ..errors import ValidationError, DegenerateResultWarning
from ..models.reports import QualityMetrics, QualityIndex
from .statistics import ArrayLike, calculate_mean, calculate_std_dev, calculate_min

_logger = logging.getLogger(__name__)

# (SNR 하한, 등급, 점수), 위에서부터 먼저 만족하는 구간
_QUALITY_GRADES = (
    (20.0, 'Excellent', 5),
    (10.0, 'Good', 4),
    (5.0, 'Fair', 3),
    (2.0, 'Acceptable', 2),
    (1.0, 'Poor', 1),
)


def _size(data: Optional[ArrayLike]) -> int:
    if data is None:
        return 0
    return int(np.asarray(data).size)


def _warn_infinite(metric: str):
    message = f"{metric}: 표준편차가 0 → inf"
    _logger.warning(message)
    warnings.warn(message, DegenerateResultWarning, stacklevel=3)


def calculate_snr(roi_data: ArrayLike) -> float:
    """SNR = mean / stdDev"""
    if _size(roi_data) == 0:
        return 0.0

    mean = calculate_mean(roi_data)
    std_dev = calculate_std_dev(roi_data, mean)
    if std_dev == 0:
        _warn_infinite("SNR")
        return math.inf
    return mean / std_dev


def calculate_cnr(roi_a: ArrayLike, roi_b: ArrayLike) -> float:
    """CNR = |mean_a - mean_b| / stdDev_b (b = 배경)"""
    if _size(roi_a) == 0 or _size(roi_b) == 0:
        return 0.0

    mean_a = calculate_mean(roi_a)
    mean_b = calculate_mean(roi_b)
    std_b = calculate_std_dev(roi_b, mean_b)
    if std_b == 0:
        _warn_infinite("CNR")
        return math.inf
    return abs(mean_a - mean_b) / std_b


def calculate_transmission(intensity: float, reference_intensity: float) -> float:
    """Transmission% = I / I0 * 100"""
    if reference_intensity == 0:
        return 0.0
    return intensity / reference_intensity * 100


def calculate_roi_transmission(roi_data: ArrayLike, reference_data: ArrayLike) -> float:
    """ROI 평균 투과율 (reference ROI 평균을 I0로 사용)"""
    if _size(roi_data) == 0 or _size(reference_data) == 0:
        return 0.0
    return calculate_transmission(calculate_mean(roi_data),
                                  calculate_mean(reference_data))


def calculate_min_transmission(roi_data: ArrayLike, reference_intensity: float) -> float:
    """ROI 최소 강도 기준 투과율"""
    if _size(roi_data) == 0 or reference_intensity == 0:
        return 0.0
    return calculate_transmission(calculate_min(roi_data), reference_intensity)


def calculate_attenuation(intensity: float, reference_intensity: float,
                          thickness: float = 1.0) -> float:
    """
    감쇠계수 μ = -ln(I / I0) / thickness

    I 또는 I0가 0이면 0.

    Raises:
        ValidationError: thickness <= 0
    """
    if not (math.isfinite(thickness) and thickness > 0):
        raise ValidationError(f"thickness는 양수여야 합니다: {thickness}")
    if reference_intensity == 0 or intensity == 0:
        return 0.0
    return -math.log(intensity / reference_intensity) / thickness


def calculate_all_metrics(roi_data: ArrayLike,
                          background_data: Optional[ArrayLike] = None,
                          reference_data: Optional[ArrayLike] = None,
                          reference_intensity: Optional[float] = None,
                          thickness: float = 1.0) -> QualityMetrics:
    """
    품질 지표 일괄 계산

    - CNR: background_data가 있을 때만
    - Transmission: reference_data 우선, 없으면 reference_intensity
    - min_transmission: reference_intensity가 있을 때만
    - Attenuation: I0 = reference_intensity, 없으면 reference_data 평균
    """
    metrics = QualityMetrics()
    if _size(roi_data) == 0:
        return metrics

    mean_i = calculate_mean(roi_data)
    metrics.snr = calculate_snr(roi_data)

    if _size(background_data) > 0:
        metrics.cnr = calculate_cnr(roi_data, background_data)

    if _size(reference_data) > 0:
        metrics.transmission = calculate_roi_transmission(roi_data, reference_data)
    elif reference_intensity is not None:
        metrics.transmission = calculate_transmission(mean_i, reference_intensity)

    if reference_intensity is not None:
        metrics.min_transmission = calculate_min_transmission(roi_data, reference_intensity)
        metrics.attenuation = calculate_attenuation(mean_i, reference_intensity, thickness)
    elif _size(reference_data) > 0:
        metrics.attenuation = calculate_attenuation(
            mean_i, calculate_mean(reference_data), thickness)

    return metrics


def calculate_quality_index(roi_data: ArrayLike) -> QualityIndex:
    """SNR 구간별 간이 품질 등급 (Excellent 5 ~ Poor 0)"""
    if _size(roi_data) == 0:
        return QualityIndex(snr=0.0, quality='N/A', score=0)

    snr = calculate_snr(roi_data)
    for lower, quality, score in _QUALITY_GRADES:
        if snr > lower:
            return QualityIndex(snr=snr, quality=quality, score=score)
    return QualityIndex(snr=snr, quality='Poor', score=0)
