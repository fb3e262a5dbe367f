"""
톤(intensity) 변환 모듈

Gamma, 히스토그램 정규화/평활화, 반전(단순/로그), Window/Level,
밝기/대비/이진화, LUT 적용, 다중 노출 HDR 합성.

모든 채널 기록은 to_uint8 포화 캐스트를 거침.
"""

import math
import logging
import warnings
from typing import Sequence

import numpy as np

from ..errors import ValidationError, DegenerateResultWarning
from ..models.buffer import PixelBuffer, to_uint8, js_round

_logger = logging.getLogger(__name__)

# -log(ratio + ε) 정규화 상수 (수치 호환을 위해 변경 금지)
_LOG_EPSILON = 0.001
_LOG_NORMALIZER = 7.0


def _warn_degenerate(message: str):
    _logger.warning(message)
    warnings.warn(message, DegenerateResultWarning, stacklevel=3)


def gamma_correction(buffer: PixelBuffer, gamma: float, c: float = 1.0) -> PixelBuffer:
    """
    Gamma 보정: out = c * (v / 255)^γ * 255

    γ < 1 이면 밝아지고 γ > 1 이면 어두워짐.
    """
    if not (math.isfinite(gamma) and gamma > 0):
        raise ValidationError(f"gamma는 양의 유한값이어야 합니다: {gamma}")
    if not math.isfinite(c):
        raise ValidationError(f"c는 유한값이어야 합니다: {c}")

    normalized = buffer.rgb / 255.0
    return buffer.with_rgb(c * np.power(normalized, gamma) * 255.0)


def normalize_histogram(buffer: PixelBuffer, min_out: float = 0,
                        max_out: float = 255) -> PixelBuffer:
    """
    채널별 min-max 선형 스트레칭

    각 채널의 실제 최소/최대를 [min_out, max_out]으로 매핑.
    상수 채널(max == min)은 전부 min_out.
    """
    if not (0 <= min_out <= max_out <= 255):
        raise ValidationError(
            f"출력 범위는 0 <= min_out <= max_out <= 255 이어야 합니다: "
            f"({min_out}, {max_out})")

    rgb = buffer.rgb
    out = np.empty_like(rgb)

    for c, name in enumerate(('R', 'G', 'B')):
        plane = rgb[:, :, c]
        lo = plane.min()
        hi = plane.max()
        if hi == lo:
            _warn_degenerate(f"normalize_histogram: {name} 채널이 상수({lo:.0f}) → min_out")
            out[:, :, c] = min_out
        else:
            out[:, :, c] = (plane - lo) / (hi - lo) * (max_out - min_out) + min_out

    return buffer.with_rgb(out)


def equalize_histogram(buffer: PixelBuffer) -> PixelBuffer:
    """
    회색조 히스토그램 평활화

    1. gray = round((R+G+B)/3), 256-bin 히스토그램
    2. CDF 및 첫 번째 0이 아닌 값 cdf_min
    3. lut[i] = round((cdf[i] - cdf_min) / (N - cdf_min) * 255)
    4. 결과는 RGB 동일 (흑백), alpha 유지
    """
    gray = np.clip(js_round(buffer.channel('gray')), 0, 255).astype(np.int64)
    total = buffer.width * buffer.height

    histogram = np.bincount(gray.ravel(), minlength=256)
    cdf = np.cumsum(histogram)
    cdf_min = int(cdf[cdf > 0][0])

    if total == cdf_min:
        _warn_degenerate("equalize_histogram: 단일 밝기 이미지 → 전부 0")
        return buffer.with_rgb(np.zeros(buffer.shape))

    lut = js_round((cdf - cdf_min) / (total - cdf_min) * 255)
    return buffer.with_rgb(lut[gray])


def invert_logarithmic(buffer: PixelBuffer, max_intensity: float = 255) -> PixelBuffer:
    """
    로그 반전 (투과 → 감쇠 표시)

    out = -ln(v / I0 + 0.001) / 7 * 255
    +0.001은 log(0) 방지, /7은 경험적 정규화 상수.
    """
    if not (math.isfinite(max_intensity) and max_intensity > 0):
        raise ValidationError(f"max_intensity는 양수여야 합니다: {max_intensity}")

    ratio = buffer.rgb / max_intensity
    inverted = -np.log(ratio + _LOG_EPSILON)
    return buffer.with_rgb(inverted / _LOG_NORMALIZER * 255)


def invert_simple(buffer: PixelBuffer) -> PixelBuffer:
    """255 - v (alpha 유지)"""
    return buffer.with_rgb(255 - buffer.pixels[:, :, :3])


def window_level(buffer: PixelBuffer, center: float, width: float) -> PixelBuffer:
    """
    Window/Level

    gray = (R+G+B)/3, min = center - width/2, max = center + width/2
    gray <= min → 0, gray >= max → 255, 그 외 선형 매핑.
    """
    if not (math.isfinite(width) and width > 0):
        raise ValidationError(f"window width는 양수여야 합니다: {width}")
    if not math.isfinite(center):
        raise ValidationError(f"window center는 유한값이어야 합니다: {center}")

    window_min = center - width / 2
    window_max = center + width / 2

    gray = buffer.channel('gray')
    adjusted = np.where(
        gray <= window_min, 0.0,
        np.where(gray >= window_max, 255.0, (gray - window_min) / width * 255))
    return buffer.with_rgb(adjusted)


def build_window_lut(min_level: float, max_level: float, bit_depth: int = 8) -> np.ndarray:
    """
    Window/Level LUT 생성

    Args:
        min_level, max_level: 입력 강도 창
        bit_depth: 8 또는 16 (LUT 길이 256 / 65536)

    Returns:
        float64 LUT, 값 범위 [0, 255]
    """
    if bit_depth not in (8, 16):
        raise ValidationError(f"bit_depth는 8 또는 16이어야 합니다: {bit_depth}")
    if not max_level > min_level:
        raise ValidationError(
            f"max_level은 min_level보다 커야 합니다: ({min_level}, {max_level})")

    max_value = 65535 if bit_depth == 16 else 255
    levels = np.arange(max_value + 1, dtype=np.float64)
    span = max_level - min_level
    return np.where(
        levels <= min_level, 0.0,
        np.where(levels >= max_level, 255.0,
                 js_round((levels - min_level) / span * 255)))


def apply_lut(buffer: PixelBuffer, lut) -> PixelBuffer:
    """RGB 채널 각각에 LUT 적용 (alpha 유지)"""
    lut = np.asarray(lut, dtype=np.float64).ravel()
    if lut.size < 256:
        raise ValidationError(f"LUT 길이는 256 이상이어야 합니다: {lut.size}")
    return buffer.with_rgb(lut[buffer.pixels[:, :, :3]])


def adjust_brightness(buffer: PixelBuffer, value: float) -> PixelBuffer:
    """밝기 조정 (value: -100 ~ 100 → ±128)"""
    if not -100 <= value <= 100:
        raise ValidationError(f"brightness는 -100~100 범위여야 합니다: {value}")
    delta = value / 100 * 128
    return buffer.with_rgb(buffer.rgb + delta)


def adjust_contrast(buffer: PixelBuffer, value: float) -> PixelBuffer:
    """
    대비 조정 (value: -100 ~ 100)

    factor = 259 (v + 255) / (255 (259 - v)), out = factor (x - 128) + 128
    """
    if not -100 <= value <= 100:
        raise ValidationError(f"contrast는 -100~100 범위여야 합니다: {value}")
    factor = (259 * (value + 255)) / (255 * (259 - value))
    return buffer.with_rgb(factor * (buffer.rgb - 128) + 128)


def to_grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """BT.601 휘도 회색조 (0.299R + 0.587G + 0.114B)"""
    rgb = buffer.rgb
    luma = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
    return buffer.with_rgb(js_round(luma))


def threshold(buffer: PixelBuffer, level: float = 128) -> PixelBuffer:
    """휘도 > level 이면 255, 아니면 0"""
    gray = to_grayscale(buffer).pixels[:, :, 0]
    return buffer.with_rgb(np.where(gray > level, 255, 0))


def create_hdr(buffers: Sequence[PixelBuffer],
               exposure_times: Sequence[float]) -> PixelBuffer:
    """
    다중 노출 HDR 합성

    픽셀별 가중치 w = 1 - |gray - 128| / 128 (중간 회색에 가까울수록 큼),
    노출시간으로 나눈 값을 가중 평균 후 첫 번째 노출시간으로 재스케일.
    가중치 합이 0인 픽셀은 (0, 0, 0, 0).
    """
    if len(buffers) == 0:
        raise ValidationError("HDR 합성에는 최소 1장의 이미지가 필요합니다")
    if len(buffers) != len(exposure_times):
        raise ValidationError(
            f"이미지 수와 노출시간 수 불일치: {len(buffers)} != {len(exposure_times)}")
    if any(not (t > 0) for t in exposure_times):
        raise ValidationError(f"노출시간은 양수여야 합니다: {list(exposure_times)}")

    shape = buffers[0].shape
    for buf in buffers[1:]:
        if buf.shape != shape:
            raise ValidationError(f"이미지 크기 불일치: {buf.shape} != {shape}")

    acc = np.zeros(shape + (3,), dtype=np.float64)
    weight = np.zeros(shape, dtype=np.float64)

    for buf, exposure in zip(buffers, exposure_times):
        rgb = buf.rgb
        gray = rgb.sum(axis=2) / 3
        w = 1 - np.abs(gray - 128) / 128
        acc += rgb / exposure * w[:, :, None]
        weight += w

    out = np.zeros(shape + (4,), dtype=np.uint8)
    valid = weight > 0
    merged = acc[valid] / weight[valid][:, None] * exposure_times[0]
    out[valid, :3] = to_uint8(np.minimum(255, merged))
    out[valid, 3] = 255
    return PixelBuffer(out)
