"""
공간 필터 모듈

컨볼루션 기반 블러/샤프닝, 메디안, 분산, Sobel/Laplacian 에지 검출.

경계 정책:
    clamp-to-edge (경계 픽셀 반복). zero-padding / wrap 아님.
    경계 픽셀 값에 직접 영향을 주므로 반드시 유지해야 함.

채널 규칙:
    - convolve / median / unsharp: RGB 독립 처리, alpha 그대로 복사
    - sobel / laplacian / variance: 회색조 결과를 RGB에 동일하게 기록
"""

import math
import logging
import time
from typing import Optional

import numpy as np

from ...errors import ValidationError
from ...models.buffer import PixelBuffer, to_uint8, js_round
from ...utils.progress import run_in_bands, ProgressCallback
from .kernels import (
    SOBEL_X,
    SOBEL_Y,
    LAPLACIAN,
    validate_kernel,
    validate_kernel_size,
    gaussian_kernel,
    mean_kernel,
)
from .filters_numba import convolve_band, median_band, std_band

_logger = logging.getLogger(__name__)


def _pad_edge(plane: np.ndarray, radius: int) -> np.ndarray:
    """clamp-to-edge 패딩 (2D / 3D 공용)"""
    pad = [(radius, radius), (radius, radius)] + [(0, 0)] * (plane.ndim - 2)
    return np.ascontiguousarray(np.pad(plane, pad, mode='edge'))


def convolve(buffer: PixelBuffer, kernel,
             cancel_event=None,
             progress_callback: ProgressCallback = None,
             band_rows: Optional[int] = None) -> PixelBuffer:
    """
    일반 2D 컨볼루션

    out[y, x] = Σ kernel[ky, kx] * in[clamp(y+ky-r), clamp(x+kx-r)]
    RGB 채널별 계산 후 [0, 255] 포화 캐스트, alpha 복사.
    """
    k = validate_kernel(kernel)
    radius = k.shape[0] // 2

    t_start = time.perf_counter()
    padded = _pad_edge(buffer.rgb, radius)
    out = np.empty((buffer.height, buffer.width, 3), dtype=np.float64)

    run_in_bands(lambda y0, y1: convolve_band(padded, k, out, y0, y1),
                 buffer.height, band_rows, cancel_event, progress_callback,
                 operation="convolve")

    _logger.debug(f"convolve {k.shape[0]}x{k.shape[0]} on "
                  f"{buffer.width}x{buffer.height}: "
                  f"{time.perf_counter() - t_start:.3f}s")
    return buffer.with_rgb(out)


def gaussian_filter(buffer: PixelBuffer, sigma: float = 1.0,
                    cancel_event=None,
                    progress_callback: ProgressCallback = None,
                    band_rows: Optional[int] = None) -> PixelBuffer:
    """Gaussian 블러 (커널 크기 ceil(3σ)*2+1, 정규화)"""
    kernel = gaussian_kernel(sigma)
    return convolve(buffer, kernel, cancel_event, progress_callback, band_rows)


def mean_filter(buffer: PixelBuffer, kernel_size: int = 3,
                cancel_event=None,
                progress_callback: ProgressCallback = None,
                band_rows: Optional[int] = None) -> PixelBuffer:
    """박스 블러"""
    kernel = mean_kernel(kernel_size)
    return convolve(buffer, kernel, cancel_event, progress_callback, band_rows)


def median_filter(buffer: PixelBuffer, kernel_size: int = 3,
                  cancel_event=None,
                  progress_callback: ProgressCallback = None,
                  band_rows: Optional[int] = None) -> PixelBuffer:
    """
    채널별 메디안 필터 (컨볼루션 아님)

    kernel_size² 이웃을 clamp-to-edge로 수집 후 정렬.
    """
    kernel_size = validate_kernel_size(kernel_size)
    radius = kernel_size // 2

    padded = _pad_edge(buffer.rgb, radius)
    out = np.empty((buffer.height, buffer.width, 3), dtype=np.float64)

    run_in_bands(lambda y0, y1: median_band(padded, kernel_size, out, y0, y1),
                 buffer.height, band_rows, cancel_event, progress_callback,
                 operation="median_filter")
    return buffer.with_rgb(out)


def variance_filter(buffer: PixelBuffer, kernel_size: int = 3,
                    cancel_event=None,
                    progress_callback: ProgressCallback = None,
                    band_rows: Optional[int] = None) -> PixelBuffer:
    """
    로컬 분산 필터

    이웃의 (R+G+B)/3 분산을 구해 sqrt(variance)를 RGB에 기록.
    alpha는 255 고정.
    """
    kernel_size = validate_kernel_size(kernel_size)
    radius = kernel_size // 2

    padded = _pad_edge(buffer.channel('gray'), radius)
    out = np.empty((buffer.height, buffer.width), dtype=np.float64)

    run_in_bands(lambda y0, y1: std_band(padded, kernel_size, out, y0, y1),
                 buffer.height, band_rows, cancel_event, progress_callback,
                 operation="variance_filter")
    return buffer.with_rgb(out, alpha=255)


def unsharp_mask(buffer: PixelBuffer, amount: float = 1.0, sigma: float = 1.0,
                 cancel_event=None,
                 progress_callback: ProgressCallback = None,
                 band_rows: Optional[int] = None) -> PixelBuffer:
    """
    Unsharp masking (샤프닝)

    out = orig + amount * (orig - gaussian(orig, σ)), 채널별 [0, 255] 클램프.
    블러 결과는 8-bit로 양자화된 버퍼를 사용.
    """
    if not math.isfinite(amount):
        raise ValidationError(f"amount는 유한값이어야 합니다: {amount}")

    blurred = gaussian_filter(buffer, sigma, cancel_event,
                              progress_callback, band_rows)
    orig = buffer.rgb
    sharpened = orig + amount * (orig - blurred.rgb)
    return buffer.with_rgb(sharpened)


# ===== 에지 검출 =====

def _rounded_gray(buffer: PixelBuffer) -> np.ndarray:
    """정수로 반올림한 (R+G+B)/3 회색조"""
    return js_round(buffer.channel('gray'))


def _correlate_interior(gray: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """3x3 커널을 내부 픽셀(1..h-2, 1..w-2)에만 적용"""
    h, w = gray.shape
    acc = np.zeros((h - 2, w - 2), dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            wt = kernel[ky, kx]
            if wt != 0:
                acc += wt * gray[ky:ky + h - 2, kx:kx + w - 2]
    return acc


def _edge_output(buffer: PixelBuffer, interior: Optional[np.ndarray]) -> PixelBuffer:
    """
    에지 결과 버퍼 구성

    첫/마지막 행·열은 계산하지 않으므로 RGBA 모두 0 (투명 검정).
    내부는 값을 RGB에 기록하고 alpha 255.
    """
    out = np.zeros((buffer.height, buffer.width, 4), dtype=np.uint8)
    if interior is not None:
        values = to_uint8(interior)
        out[1:-1, 1:-1, 0] = values
        out[1:-1, 1:-1, 1] = values
        out[1:-1, 1:-1, 2] = values
        out[1:-1, 1:-1, 3] = 255
    return PixelBuffer(out)


def sobel_edge_detection(buffer: PixelBuffer) -> PixelBuffer:
    """Sobel gradient magnitude sqrt(gx² + gy²)"""
    if buffer.height < 3 or buffer.width < 3:
        return _edge_output(buffer, None)

    gray = _rounded_gray(buffer)
    gx = _correlate_interior(gray, SOBEL_X)
    gy = _correlate_interior(gray, SOBEL_Y)
    return _edge_output(buffer, np.sqrt(gx * gx + gy * gy))


def laplacian_edge_detection(buffer: PixelBuffer) -> PixelBuffer:
    """4-이웃 Laplacian 절댓값"""
    if buffer.height < 3 or buffer.width < 3:
        return _edge_output(buffer, None)

    gray = _rounded_gray(buffer)
    return _edge_output(buffer, np.abs(_correlate_interior(gray, LAPLACIAN)))
