"""
FFT (주파수 영역) 변환 모듈

1D/2D FFT 및 역변환, 주파수 마스크 적용, 스펙트럼 시각화용 shift.

2D 변환은 분리형:
    fft_2d  : 행 방향 1D FFT → 열 방향 1D FFT
    ifft_2d : 열 방향 역변환 → 행 방향 역변환 → 실수부
두 단계 모두 복소수 전체를 유지하므로 fft_2d → ifft_2d 는 원본을 복원.
입력 길이는 2의 거듭제곱이 아니어도 됨 (scipy.fft).
"""

import logging
import time
import warnings
from typing import Callable, Optional, Sequence, Union

import numpy as np
from scipy import fft as sp_fft

from ...errors import ValidationError, DegenerateResultWarning
from ...models.buffer import PixelBuffer, to_uint8, validate_channel
from ...models.reports import FFTResult
from ...utils.progress import check_cancelled

_logger = logging.getLogger(__name__)

FilterFunction = Callable[[np.ndarray, int, int], Union[np.ndarray, float]]

# scipy.fft workers (-1 = 전체 코어)
_FFT_WORKERS = -1


def fft_1d(data: Sequence[float]) -> FFTResult:
    """1D 복소 DFT"""
    arr = np.asarray(data, dtype=np.float64).ravel()
    if arr.size == 0:
        raise ValidationError("빈 신호는 FFT 할 수 없습니다")
    return FFTResult.from_complex(sp_fft.fft(arr, workers=_FFT_WORKERS))


def ifft_1d(real: Sequence[float], imaginary: Sequence[float]) -> np.ndarray:
    """1D 역 DFT (1/n 정규화), 실수부만 반환"""
    re = np.asarray(real, dtype=np.float64).ravel()
    im = np.asarray(imaginary, dtype=np.float64).ravel()
    if re.size == 0:
        raise ValidationError("빈 스펙트럼은 역변환 할 수 없습니다")
    if re.shape != im.shape:
        raise ValidationError(f"real/imaginary 길이 불일치: {re.size} != {im.size}")
    return sp_fft.ifft(re + 1j * im, workers=_FFT_WORKERS).real


def fft_2d(buffer: PixelBuffer, channel: str = 'gray',
           cancel_event=None) -> FFTResult:
    """
    2D FFT

    Args:
        buffer: 입력 버퍼
        channel: 'gray' ((R+G+B)/3) | 'r' | 'g' | 'b'
        cancel_event: 행/열 패스 사이에서 확인하는 취소 이벤트

    Returns:
        shape (height, width) 의 FFTResult
    """
    validate_channel(channel)
    t_start = time.perf_counter()

    plane = buffer.channel(channel)

    check_cancelled(cancel_event, "fft_2d")
    row_pass = sp_fft.fft(plane, axis=1, workers=_FFT_WORKERS)

    check_cancelled(cancel_event, "fft_2d")
    spectrum = sp_fft.fft(row_pass, axis=0, workers=_FFT_WORKERS)

    _logger.debug(f"fft_2d({channel}) {buffer.width}x{buffer.height}: "
                  f"{time.perf_counter() - t_start:.3f}s")
    return FFTResult.from_complex(spectrum)


def ifft_2d(fft_data: FFTResult, cancel_event=None) -> np.ndarray:
    """
    2D 역 FFT

    Returns:
        (height, width) float64 실수 평면 (클램프하지 않음)
    """
    if fft_data.real.ndim != 2:
        raise ValidationError(f"2D FFT 결과가 아닙니다: shape {fft_data.real.shape}")

    spectrum = fft_data.complex

    check_cancelled(cancel_event, "ifft_2d")
    col_pass = sp_fft.ifft(spectrum, axis=0, workers=_FFT_WORKERS)

    check_cancelled(cancel_event, "ifft_2d")
    return sp_fft.ifft(col_pass, axis=1, workers=_FFT_WORKERS).real


def radial_distance(width: int, height: int) -> np.ndarray:
    """(width/2, height/2) 기준 각 (x, y)의 유클리드 거리"""
    ys = np.arange(height, dtype=np.float64) - height / 2
    xs = np.arange(width, dtype=np.float64) - width / 2
    return np.sqrt(xs[None, :] ** 2 + ys[:, None] ** 2)


def _evaluate_filter(filter_fn: FilterFunction, radius: np.ndarray,
                     width: int, height: int) -> np.ndarray:
    # 배열 단위 호출을 먼저 시도하고, 스칼라 전용 함수면 픽셀별로 평가
    try:
        values = np.asarray(filter_fn(radius, width, height), dtype=np.float64)
        return np.broadcast_to(values, radius.shape)
    except (ValueError, TypeError) as e:
        _logger.debug(f"filter_fn 배열 평가 실패 ({e}) → 픽셀별 평가")

    per_pixel = np.vectorize(filter_fn, otypes=[np.float64])
    return per_pixel(radius, width, height)


def apply_frequency_filter(fft_data: FFTResult,
                           filter_fn: FilterFunction) -> FFTResult:
    """
    주파수 마스크 적용

    각 (x, y)에서 real/imaginary에 filter_fn(radius, width, height)를 곱함.
    radius는 배열 중심 (w/2, h/2)으로부터의 거리.
    filter_fn이 radius ndarray에 대해 같은 shape(또는 스칼라)을 반환하지 못하면
    (r <= cutoff 같은 스칼라 분기) 각 픽셀마다 개별 호출.

    주의: 중심 기준 거리이므로 DC가 배열 중앙에 오도록 fft_shift 한
    스펙트럼에 적용해야 일반적인 low/high-pass 의미가 됨.
    """
    if fft_data.real.ndim != 2:
        raise ValidationError(f"2D FFT 결과가 아닙니다: shape {fft_data.real.shape}")

    height, width = fft_data.real.shape
    radius = radial_distance(width, height)
    multiplier = _evaluate_filter(filter_fn, radius, width, height)

    return FFTResult(real=fft_data.real * multiplier,
                     imaginary=fft_data.imaginary * multiplier)


def fft_shift(data: np.ndarray) -> np.ndarray:
    """
    사분면 교환 (DC 성분을 중앙으로)

    new_x = (x + w//2) % w, new_y = (y + h//2) % h
    """
    data = np.asarray(data)
    if data.ndim != 2:
        raise ValidationError(f"2D 배열이 필요합니다: shape {data.shape}")
    h, w = data.shape
    return np.roll(data, (h // 2, w // 2), axis=(0, 1))


def ifft_shift(data: np.ndarray) -> np.ndarray:
    """fft_shift 역연산 (홀수 크기에서도 정확히 복원)"""
    data = np.asarray(data)
    if data.ndim != 2:
        raise ValidationError(f"2D 배열이 필요합니다: shape {data.shape}")
    h, w = data.shape
    return np.roll(data, (-(h // 2), -(w // 2)), axis=(0, 1))


def shift_result(fft_data: FFTResult, inverse: bool = False) -> FFTResult:
    """FFTResult 전체(real/imaginary)에 shift 적용"""
    func = ifft_shift if inverse else fft_shift
    return FFTResult(real=func(fft_data.real), imaginary=func(fft_data.imaginary))


def fft_to_image(magnitude: np.ndarray) -> PixelBuffer:
    """
    스펙트럼 시각화

    log(1 + m) 압축 후 최대값 기준 [0, 255] 선형 정규화, 회색조 RGBA.
    모든 값이 0이면 검정 이미지.
    """
    magnitude = np.asarray(magnitude, dtype=np.float64)
    if magnitude.ndim != 2 or magnitude.size == 0:
        raise ValidationError(f"2D magnitude 배열이 필요합니다: shape {magnitude.shape}")

    log_mag = np.log1p(magnitude)
    peak = log_mag.max()

    if peak > 0:
        normalized = log_mag / peak * 255
    else:
        message = "fft_to_image: magnitude가 모두 0 → 검정 이미지"
        _logger.warning(message)
        warnings.warn(message, DegenerateResultWarning, stacklevel=2)
        normalized = np.zeros_like(log_mag)

    h, w = magnitude.shape
    out = np.empty((h, w, 4), dtype=np.uint8)
    gray = to_uint8(normalized)
    out[:, :, 0] = gray
    out[:, :, 1] = gray
    out[:, :, 2] = gray
    out[:, :, 3] = 255
    return PixelBuffer(out)


def filter_image_frequency(buffer: PixelBuffer, filter_fn: FilterFunction,
                           channel: str = 'gray', centered: bool = True,
                           cancel_event=None) -> PixelBuffer:
    """
    주파수 영역 필터링 파이프라인

    fft_2d → (centered면 fft_shift) → 마스크 → (ifft_shift) → ifft_2d
    결과 실수 평면을 RGB에 동일하게 기록, alpha 유지.
    """
    spectrum = fft_2d(buffer, channel, cancel_event)
    if centered:
        spectrum = shift_result(spectrum)

    filtered = apply_frequency_filter(spectrum, filter_fn)
    if centered:
        filtered = shift_result(filtered, inverse=True)

    plane = ifft_2d(filtered, cancel_event)
    return buffer.with_rgb(plane)
