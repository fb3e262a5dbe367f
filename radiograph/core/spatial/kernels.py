"""
컨볼루션 커널 생성

커널은 항상 size x size (size 홀수) float64 배열.
블러용은 합이 1이 되도록 정규화, 미분용(Sobel/Laplacian)은 비정규화.
"""

import math

import numpy as np

from ...errors import ValidationError

SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.float64)

SOBEL_Y = np.array([[-1, -2, -1],
                    [0, 0, 0],
                    [1, 2, 1]], dtype=np.float64)

LAPLACIAN = np.array([[0, 1, 0],
                      [1, -4, 1],
                      [0, 1, 0]], dtype=np.float64)


def validate_kernel_size(kernel_size: int) -> int:
    """kernel_size는 3 이상의 홀수 정수"""
    if isinstance(kernel_size, bool) or int(kernel_size) != kernel_size:
        raise ValidationError(f"kernel_size는 정수여야 합니다: {kernel_size}")
    kernel_size = int(kernel_size)
    if kernel_size < 3 or kernel_size % 2 == 0:
        raise ValidationError(f"kernel_size는 3 이상의 홀수여야 합니다: {kernel_size}")
    return kernel_size


def validate_sigma(sigma: float) -> float:
    if not (math.isfinite(sigma) and sigma > 0):
        raise ValidationError(f"sigma는 양의 유한값이어야 합니다: {sigma}")
    return float(sigma)


def validate_kernel(kernel) -> np.ndarray:
    """정사각 홀수 크기 커널 검증 후 float64 배열 반환"""
    k = np.asarray(kernel, dtype=np.float64)
    if k.ndim != 2 or k.shape[0] != k.shape[1]:
        raise ValidationError(f"커널은 정사각 행렬이어야 합니다: {k.shape}")
    if k.shape[0] % 2 == 0:
        raise ValidationError(f"커널 크기는 홀수여야 합니다: {k.shape[0]}")
    if not np.all(np.isfinite(k)):
        raise ValidationError("커널에 유한하지 않은 값이 있습니다")
    return np.ascontiguousarray(k)


def gaussian_kernel_size(sigma: float) -> int:
    """size = ceil(3σ) * 2 + 1 (항상 홀수)"""
    return int(math.ceil(sigma * 3)) * 2 + 1


def gaussian_kernel(sigma: float) -> np.ndarray:
    """
    정규화된 2D Gaussian 커널

    w(dx, dy) = exp(-(dx² + dy²) / (2σ²)), 합 = 1
    """
    sigma = validate_sigma(sigma)
    size = gaussian_kernel_size(sigma)
    center = size // 2

    offsets = np.arange(size, dtype=np.float64) - center
    dy, dx = np.meshgrid(offsets, offsets, indexing='ij')
    kernel = np.exp(-(dx * dx + dy * dy) / (2 * sigma * sigma))
    return kernel / kernel.sum()


def mean_kernel(kernel_size: int) -> np.ndarray:
    """균일 박스 커널 (가중치 1/size²)"""
    kernel_size = validate_kernel_size(kernel_size)
    return np.full((kernel_size, kernel_size),
                   1.0 / (kernel_size * kernel_size), dtype=np.float64)
