"""
샘플 시퀀스 통계 모듈

8-bit / 16-bit 샘플 모두 지원. 빈 입력은 예외가 아닌 정상 edge case로
취급하여 0을 반환 (mean/min/max/median/std).
"""

import math
from typing import Optional, Sequence, Union

import numpy as np

from ..errors import ValidationError
from ..models.buffer import PixelBuffer, js_round
from ..models.reports import StatSummary, HistogramFold

ArrayLike = Union[Sequence[float], np.ndarray]


def _as_array(data: Optional[ArrayLike]) -> np.ndarray:
    if data is None:
        return np.empty(0, dtype=np.float64)
    return np.asarray(data, dtype=np.float64).ravel()


def calculate_mean(data: ArrayLike) -> float:
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def calculate_min(data: ArrayLike) -> float:
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    return float(arr.min())


def calculate_max(data: ArrayLike) -> float:
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    return float(arr.max())


def calculate_std_dev(data: ArrayLike, mean: Optional[float] = None) -> float:
    """
    모집단 표준편차

    Args:
        data: 샘플
        mean: 미리 계산된 평균 (재계산 방지용, None이면 내부 계산)
    """
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    avg = calculate_mean(arr) if mean is None else float(mean)
    return float(math.sqrt(np.mean((arr - avg) ** 2)))


def calculate_median(data: ArrayLike) -> float:
    """중앙값 (짝수 길이면 가운데 두 값의 평균)"""
    arr = _as_array(data)
    if arr.size == 0:
        return 0.0
    sorted_arr = np.sort(arr)
    mid = sorted_arr.size // 2
    if sorted_arr.size % 2 == 0:
        return float((sorted_arr[mid - 1] + sorted_arr[mid]) / 2)
    return float(sorted_arr[mid])


def calculate_percentile(data: ArrayLike, percentile: float) -> float:
    """
    Nearest-rank 백분위수

    index = ceil(p/100 * n) - 1, [0, n-1] 범위로 클램프.
    보간하지 않으므로 np.percentile과 결과가 다를 수 있음.

    Raises:
        ValidationError: percentile이 [0, 100] 범위 밖
    """
    if not 0 <= percentile <= 100:
        raise ValidationError(f"percentile은 0~100 범위여야 합니다: {percentile}")

    arr = _as_array(data)
    if arr.size == 0:
        return 0.0

    sorted_arr = np.sort(arr)
    index = math.ceil(percentile / 100 * sorted_arr.size) - 1
    index = min(max(0, index), sorted_arr.size - 1)
    return float(sorted_arr[index])


def calculate_histogram(data: ArrayLike, bins: int = 256,
                        max_value: float = 255) -> np.ndarray:
    """
    히스토그램 계산

    bin = floor(v / max_value * (bins - 1)). max_value를 넘는 값(또는 음수)은
    양 끝 bin으로 클램프하여 범위 밖 인덱스가 생기지 않도록 함.

    Returns:
        길이 bins의 int64 카운트 배열
    """
    if bins < 1:
        raise ValidationError(f"bins는 1 이상이어야 합니다: {bins}")
    if not max_value > 0:
        raise ValidationError(f"max_value는 양수여야 합니다: {max_value}")

    arr = _as_array(data)
    if arr.size == 0:
        return np.zeros(bins, dtype=np.int64)

    idx = np.floor(arr / max_value * (bins - 1))
    idx = np.clip(np.nan_to_num(idx, nan=0.0), 0, bins - 1).astype(np.int64)
    return np.bincount(idx, minlength=bins).astype(np.int64)


def calculate_statistics(data: ArrayLike) -> StatSummary:
    """mean / median / min / max / std / variance / count 일괄 계산"""
    arr = _as_array(data)
    if arr.size == 0:
        return StatSummary()

    mean = calculate_mean(arr)
    std_dev = calculate_std_dev(arr, mean)
    return StatSummary(
        mean=mean,
        median=calculate_median(arr),
        min=calculate_min(arr),
        max=calculate_max(arr),
        std_dev=std_dev,
        variance=std_dev * std_dev,
        count=int(arr.size),
    )


def normalize_data(data: ArrayLike, min_value: Optional[float] = None,
                   max_value: Optional[float] = None) -> np.ndarray:
    """[0, 1] 정규화. 범위가 0이면 전부 0."""
    arr = _as_array(data)
    if arr.size == 0:
        return arr

    lo = calculate_min(arr) if min_value is None else float(min_value)
    hi = calculate_max(arr) if max_value is None else float(max_value)
    span = hi - lo
    if span == 0:
        return np.zeros_like(arr)
    return (arr - lo) / span


def compute_histogram_fold(buffer: PixelBuffer) -> HistogramFold:
    """
    R/G/B/Gray 256-bin 히스토그램 (%)

    gray는 휘도 가중치 0.299R + 0.587G + 0.114B 를 반올림한 값.
    """
    px = buffer.pixels
    total = buffer.width * buffer.height

    r = px[:, :, 0].ravel()
    g = px[:, :, 1].ravel()
    b = px[:, :, 2].ravel()
    luma = js_round(0.299 * r + 0.587 * g + 0.114 * b)
    gray = np.clip(luma, 0, 255).astype(np.int64)

    def _percent(values):
        counts = np.bincount(values, minlength=256)[:256]
        return counts.astype(np.float64) / total * 100

    return HistogramFold(
        red=_percent(r),
        green=_percent(g),
        blue=_percent(b),
        gray=_percent(gray),
    )
