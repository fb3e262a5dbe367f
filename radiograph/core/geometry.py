"""
기하 변환 모듈

90° 단위 회전, 좌우/상하 반전, 픽셀 비닝, 크롭.
입력 버퍼는 변경하지 않고 항상 새 버퍼를 반환.

회전 좌표 매핑 (원본 (x, y), 크기 w x h):
    90°  → (h-1-y, x)      결과 크기 h x w  (시계 방향)
    180° → (w-1-x, h-1-y)  결과 크기 w x h
    270° → (y, w-1-x)      결과 크기 h x w  (반시계 방향)
"""

import logging
from typing import Optional

import numpy as np
import cv2

from ..errors import ValidationError, OutOfBoundsError
from ..models.buffer import PixelBuffer, to_uint8

_logger = logging.getLogger(__name__)

_ROTATE_CODES = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}

_FLIP_CODES = {
    'horizontal': 1,   # X 반전
    'vertical': 0,     # Y 반전
}


def rotate(buffer: PixelBuffer, angle: int) -> PixelBuffer:
    """
    90° 단위 회전

    angle은 360으로 나눈 나머지로 정규화 (-90 → 270, 360 → 0).
    0°는 복사본 반환, 90의 배수가 아니면 ValidationError.
    """
    if isinstance(angle, bool) or int(angle) != angle:
        raise ValidationError(f"회전 각도는 정수여야 합니다: {angle}")
    normalized = int(angle) % 360
    if normalized % 90 != 0:
        raise ValidationError(f"회전 각도는 90의 배수여야 합니다: {angle}")

    if normalized == 0:
        return buffer.copy()

    rotated = cv2.rotate(buffer.to_array(), _ROTATE_CODES[normalized])
    return PixelBuffer(rotated)


def mirror(buffer: PixelBuffer, direction: str = 'horizontal') -> PixelBuffer:
    """좌우('horizontal') 또는 상하('vertical') 반전"""
    if direction not in _FLIP_CODES:
        raise ValidationError(
            f"direction은 'horizontal' 또는 'vertical'이어야 합니다: {direction!r}")
    flipped = cv2.flip(buffer.to_array(), _FLIP_CODES[direction])
    return PixelBuffer(flipped)


def pixel_binning(buffer: PixelBuffer, bin_size: int = 2) -> PixelBuffer:
    """
    픽셀 비닝 (해상도 축소)

    결과 크기 floor(w / bin) x floor(h / bin), 각 픽셀은 bin x bin 블록의
    RGB 산술 평균. 나누어떨어지지 않는 가장자리 행/열은 버림. alpha는 255.
    """
    if isinstance(bin_size, bool) or int(bin_size) != bin_size or bin_size < 1:
        raise ValidationError(f"bin_size는 1 이상의 정수여야 합니다: {bin_size}")
    bin_size = int(bin_size)
    if bin_size > buffer.width or bin_size > buffer.height:
        raise ValidationError(
            f"bin_size({bin_size})가 이미지 크기({buffer.width}x{buffer.height})보다 큽니다")

    new_w = buffer.width // bin_size
    new_h = buffer.height // bin_size

    rgb = buffer.rgb[:new_h * bin_size, :new_w * bin_size]
    blocks = rgb.reshape(new_h, bin_size, new_w, bin_size, 3)
    means = blocks.mean(axis=(1, 3))

    out = np.empty((new_h, new_w, 4), dtype=np.uint8)
    out[:, :, :3] = to_uint8(means)
    out[:, :, 3] = 255

    _logger.debug(f"pixel_binning {bin_size}: {buffer.width}x{buffer.height} "
                  f"→ {new_w}x{new_h}")
    return PixelBuffer(out)


def crop(buffer: PixelBuffer, x: int, y: int, width: int,
         height: Optional[int] = None) -> PixelBuffer:
    """
    사각 영역 크롭 (좌표는 floor 후 버퍼 범위로 클리핑)

    Raises:
        ValidationError: width/height <= 0
        OutOfBoundsError: 크롭 영역이 버퍼와 겹치지 않음
    """
    if height is None:
        height = width
    x, y = int(np.floor(x)), int(np.floor(y))
    width, height = int(np.floor(width)), int(np.floor(height))
    if width <= 0 or height <= 0:
        raise ValidationError(f"크롭 크기는 양수여야 합니다: {width}x{height}")

    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(buffer.width, x + width), min(buffer.height, y + height)
    if x0 >= x1 or y0 >= y1:
        raise OutOfBoundsError(
            f"크롭 영역 ({x}, {y}, {width}, {height})이 "
            f"{buffer.width}x{buffer.height} 버퍼 밖에 있습니다")

    return PixelBuffer(buffer.pixels[y0:y1, x0:x1])
