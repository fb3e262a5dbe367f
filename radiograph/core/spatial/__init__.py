"""공간 필터 모듈"""

from .kernels import (
    SOBEL_X,
    SOBEL_Y,
    LAPLACIAN,
    gaussian_kernel,
    gaussian_kernel_size,
    mean_kernel,
    validate_kernel,
    validate_kernel_size,
    validate_sigma,
)
from .filters import (
    convolve,
    gaussian_filter,
    mean_filter,
    median_filter,
    variance_filter,
    unsharp_mask,
    sobel_edge_detection,
    laplacian_edge_detection,
)
from .filters_numba import warmup_numba_filters

__all__ = [
    # Kernels
    'SOBEL_X',
    'SOBEL_Y',
    'LAPLACIAN',
    'gaussian_kernel',
    'gaussian_kernel_size',
    'mean_kernel',
    'validate_kernel',
    'validate_kernel_size',
    'validate_sigma',

    # Filters
    'convolve',
    'gaussian_filter',
    'mean_filter',
    'median_filter',
    'variance_filter',
    'unsharp_mask',
    'sobel_edge_detection',
    'laplacian_edge_detection',

    # Numba
    'warmup_numba_filters',
]
