"""취소/진행률 헬퍼"""

from typing import Callable, Optional

from ..errors import OperationCancelled

DEFAULT_BAND_ROWS = 32

# (완료 수, 전체 수)
ProgressCallback = Optional[Callable[[int, int], None]]


def check_cancelled(cancel_event, operation: str = "operation"):
    """cancel_event(threading.Event 호환)가 set 이면 OperationCancelled"""
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled(f"{operation} 취소됨")


def run_in_bands(band_func: Callable[[int, int], None],
                 total_rows: int,
                 band_rows: Optional[int] = None,
                 cancel_event=None,
                 progress_callback: ProgressCallback = None,
                 operation: str = "operation"):
    """
    [0, total_rows)를 band_rows 단위로 나누어 band_func(y0, y1) 호출

    밴드 시작 전마다 취소 여부를 확인하고, 밴드 종료 후 진행률 콜백
    (완료 행, 전체 행)을 호출.
    """
    if band_rows is None or band_rows < 1:
        band_rows = DEFAULT_BAND_ROWS

    for y0 in range(0, total_rows, band_rows):
        check_cancelled(cancel_event, operation)
        y1 = min(y0 + band_rows, total_rows)
        band_func(y0, y1)
        if progress_callback:
            progress_callback(y1, total_rows)
