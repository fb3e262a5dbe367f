"""유틸리티 모듈"""

from .logger import setup_logger, set_log_level, resolve_level, logger
from .progress import check_cancelled, run_in_bands, DEFAULT_BAND_ROWS, ProgressCallback

__all__ = [
    'setup_logger',
    'set_log_level',
    'resolve_level',
    'logger',
    'check_cancelled',
    'run_in_bands',
    'DEFAULT_BAND_ROWS',
    'ProgressCallback',
]
