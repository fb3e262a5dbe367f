"""래스터 코어 데이터 모델"""

from .buffer import PixelBuffer, CHANNELS, to_uint8, js_round, validate_channel
from .regions import RectangleROI, CircleROI, LineSegment, Region
from .reports import (
    StatSummary,
    HistogramFold,
    FFTResult,
    QualityMetrics,
    QualityIndex,
    ROIAnalysisResult,
    ROIComparison,
    ProfilePoint,
    LineProfile,
)
from .settings import SettingsManager

__all__ = [
    'PixelBuffer', 'CHANNELS', 'to_uint8', 'js_round', 'validate_channel',
    'RectangleROI', 'CircleROI', 'LineSegment', 'Region',
    'StatSummary', 'HistogramFold', 'FFTResult', 'QualityMetrics',
    'QualityIndex', 'ROIAnalysisResult', 'ROIComparison', 'ProfilePoint',
    'LineProfile',
    'SettingsManager',
]
