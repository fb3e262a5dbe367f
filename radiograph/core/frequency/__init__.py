"""주파수 영역 모듈"""

from .fft import (
    fft_1d,
    ifft_1d,
    fft_2d,
    ifft_2d,
    radial_distance,
    apply_frequency_filter,
    fft_shift,
    ifft_shift,
    shift_result,
    fft_to_image,
    filter_image_frequency,
)
from .masks import (
    create_low_pass_filter,
    create_high_pass_filter,
    create_band_pass_filter,
    create_gaussian_frequency_filter,
)

__all__ = [
    # FFT
    'fft_1d',
    'ifft_1d',
    'fft_2d',
    'ifft_2d',
    'radial_distance',
    'apply_frequency_filter',
    'fft_shift',
    'ifft_shift',
    'shift_result',
    'fft_to_image',
    'filter_image_frequency',

    # Masks
    'create_low_pass_filter',
    'create_high_pass_filter',
    'create_band_pass_filter',
    'create_gaussian_frequency_filter',
]
