"""래스터 처리 핵심 모듈"""

from .statistics import (
    calculate_mean,
    calculate_min,
    calculate_max,
    calculate_std_dev,
    calculate_median,
    calculate_percentile,
    calculate_histogram,
    calculate_statistics,
    normalize_data,
    compute_histogram_fold,
)
from .spatial import (
    convolve,
    gaussian_filter,
    mean_filter,
    median_filter,
    variance_filter,
    unsharp_mask,
    sobel_edge_detection,
    laplacian_edge_detection,
    gaussian_kernel,
    warmup_numba_filters,
)
from .tone import (
    gamma_correction,
    normalize_histogram,
    equalize_histogram,
    invert_logarithmic,
    invert_simple,
    window_level,
    build_window_lut,
    apply_lut,
    adjust_brightness,
    adjust_contrast,
    to_grayscale,
    threshold,
    create_hdr,
)
from .geometry import rotate, mirror, pixel_binning, crop
from .frequency import (
    fft_1d,
    ifft_1d,
    fft_2d,
    ifft_2d,
    apply_frequency_filter,
    fft_shift,
    ifft_shift,
    shift_result,
    fft_to_image,
    filter_image_frequency,
    create_low_pass_filter,
    create_high_pass_filter,
    create_band_pass_filter,
    create_gaussian_frequency_filter,
)
from .metrics import (
    calculate_snr,
    calculate_cnr,
    calculate_transmission,
    calculate_roi_transmission,
    calculate_min_transmission,
    calculate_attenuation,
    calculate_all_metrics,
    calculate_quality_index,
)
from .roi import (
    extract_rectangle_roi,
    extract_circle_roi,
    extract_roi,
    calculate_roi_area,
    analyze_roi,
    analyze_roi_with_settings,
    compare_rois,
    create_roi_mask,
    extract_line_profile,
)
from .operations import (
    run_operation,
    run_pipeline,
    build_request,
    available_operations,
    OperationRunner,
    OperationHandle,
)

__all__ = [
    'calculate_mean',
    'calculate_min',
    'calculate_max',
    'calculate_std_dev',
    'calculate_median',
    'calculate_percentile',
    'calculate_histogram',
    'calculate_statistics',
    'normalize_data',
    'compute_histogram_fold',
    'convolve',
    'gaussian_filter',
    'mean_filter',
    'median_filter',
    'variance_filter',
    'unsharp_mask',
    'sobel_edge_detection',
    'laplacian_edge_detection',
    'gaussian_kernel',
    'warmup_numba_filters',
    'gamma_correction',
    'normalize_histogram',
    'equalize_histogram',
    'invert_logarithmic',
    'invert_simple',
    'window_level',
    'build_window_lut',
    'apply_lut',
    'adjust_brightness',
    'adjust_contrast',
    'to_grayscale',
    'threshold',
    'create_hdr',
    'rotate',
    'mirror',
    'pixel_binning',
    'crop',
    'fft_1d',
    'ifft_1d',
    'fft_2d',
    'ifft_2d',
    'apply_frequency_filter',
    'fft_shift',
    'ifft_shift',
    'shift_result',
    'fft_to_image',
    'filter_image_frequency',
    'create_low_pass_filter',
    'create_high_pass_filter',
    'create_band_pass_filter',
    'create_gaussian_frequency_filter',
    'calculate_snr',
    'calculate_cnr',
    'calculate_transmission',
    'calculate_roi_transmission',
    'calculate_min_transmission',
    'calculate_attenuation',
    'calculate_all_metrics',
    'calculate_quality_index',
    'extract_rectangle_roi',
    'extract_circle_roi',
    'extract_roi',
    'calculate_roi_area',
    'analyze_roi',
    'analyze_roi_with_settings',
    'compare_rois',
    'create_roi_mask',
    'extract_line_profile',
    'run_operation',
    'run_pipeline',
    'build_request',
    'available_operations',
    'OperationRunner',
    'OperationHandle',
]
