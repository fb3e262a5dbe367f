"""X-Ray/CT 래스터 처리 패키지"""

from .errors import (
    RadiographError,
    ValidationError,
    OutOfBoundsError,
    OperationCancelled,
    DegenerateResultWarning,
)
from .models import (
    PixelBuffer,
    RectangleROI,
    CircleROI,
    LineSegment,
    StatSummary,
    HistogramFold,
    FFTResult,
    QualityMetrics,
    QualityIndex,
    ROIAnalysisResult,
    ROIComparison,
    LineProfile,
    SettingsManager,
)
from .core import (
    calculate_statistics,
    compute_histogram_fold,
    gaussian_filter,
    median_filter,
    sobel_edge_detection,
    laplacian_edge_detection,
    window_level,
    equalize_histogram,
    invert_simple,
    rotate,
    mirror,
    pixel_binning,
    fft_2d,
    ifft_2d,
    filter_image_frequency,
    analyze_roi,
    analyze_roi_with_settings,
    extract_line_profile,
    run_operation,
    run_pipeline,
    OperationRunner,
)
from .utils import setup_logger

__version__ = "1.0.0"

__all__ = [
    # Errors
    'RadiographError',
    'ValidationError',
    'OutOfBoundsError',
    'OperationCancelled',
    'DegenerateResultWarning',

    # Models
    'PixelBuffer',
    'RectangleROI',
    'CircleROI',
    'LineSegment',
    'StatSummary',
    'HistogramFold',
    'FFTResult',
    'QualityMetrics',
    'QualityIndex',
    'ROIAnalysisResult',
    'ROIComparison',
    'LineProfile',
    'SettingsManager',

    # Statistics
    'calculate_statistics',
    'compute_histogram_fold',

    # Spatial
    'gaussian_filter',
    'median_filter',
    'sobel_edge_detection',
    'laplacian_edge_detection',

    # Tone
    'window_level',
    'equalize_histogram',
    'invert_simple',

    # Geometry
    'rotate',
    'mirror',
    'pixel_binning',

    # Frequency
    'fft_2d',
    'ifft_2d',
    'filter_image_frequency',

    # ROI
    'analyze_roi',
    'analyze_roi_with_settings',
    'extract_line_profile',

    # Operations
    'run_operation',
    'run_pipeline',
    'OperationRunner',

    # Logging
    'setup_logger',
]
