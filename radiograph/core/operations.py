"""
연산 디스패치 및 비동기 실행

각 연산은 frozen dataclass 요청 타입으로 표현하고, 요청 타입별 핸들러를
레지스트리에 등록해 run_operation()에서 타입으로 디스패치.

OperationRunner는 ThreadPoolExecutor로 연산을 백그라운드 실행하며
OperationHandle(future + cancel event)을 반환.
numba 커널과 scipy.fft는 GIL을 해제하므로 스레드 풀로 병렬 실행 가능.

사용 예:
    runner = OperationRunner()
    handle = runner.submit(buffer, GaussianRequest(sigma=2.0))
    ...
    handle.cancel()          # 다음 row band 경계에서 OperationCancelled
    result = handle.result()
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, fields
from typing import Callable, ClassVar, Dict, List, Optional, Sequence, Tuple, Type

from ..errors import ValidationError
from ..models.buffer import PixelBuffer
from ..models.settings import SettingsManager
from ..utils.logger import set_log_level
from ..utils.progress import check_cancelled, ProgressCallback
from . import geometry, tone
from .frequency import (
    filter_image_frequency,
    create_low_pass_filter,
    create_high_pass_filter,
    create_band_pass_filter,
    create_gaussian_frequency_filter,
)
from .spatial import filters

_logger = logging.getLogger(__name__)


# ===== 요청 타입 =====

@dataclass(frozen=True)
class OperationRequest:
    """연산 요청 베이스 (operation_id / name은 클래스 속성)"""
    operation_id: ClassVar[str] = ''
    name: ClassVar[str] = ''
    # 요청 필드 → SettingsManager 키
    settings_keys: ClassVar[Dict[str, str]] = {}

    def params(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# 공간 필터

@dataclass(frozen=True)
class GaussianRequest(OperationRequest):
    operation_id: ClassVar[str] = 'gaussian'
    name: ClassVar[str] = 'Gaussian Blur'
    settings_keys: ClassVar[Dict[str, str]] = {'sigma': 'gaussian_sigma'}
    sigma: float = 1.0


@dataclass(frozen=True)
class MeanRequest(OperationRequest):
    operation_id: ClassVar[str] = 'mean'
    name: ClassVar[str] = 'Mean Filter'
    settings_keys: ClassVar[Dict[str, str]] = {'kernel_size': 'mean_kernel_size'}
    kernel_size: int = 3


@dataclass(frozen=True)
class MedianRequest(OperationRequest):
    operation_id: ClassVar[str] = 'median'
    name: ClassVar[str] = 'Median Filter'
    settings_keys: ClassVar[Dict[str, str]] = {'kernel_size': 'median_kernel_size'}
    kernel_size: int = 3


@dataclass(frozen=True)
class VarianceRequest(OperationRequest):
    operation_id: ClassVar[str] = 'variance'
    name: ClassVar[str] = 'Local Variance'
    settings_keys: ClassVar[Dict[str, str]] = {'kernel_size': 'variance_kernel_size'}
    kernel_size: int = 3


@dataclass(frozen=True)
class UnsharpRequest(OperationRequest):
    operation_id: ClassVar[str] = 'unsharp'
    name: ClassVar[str] = 'Unsharp Mask'
    settings_keys: ClassVar[Dict[str, str]] = {'amount': 'unsharp_amount',
                                               'sigma': 'unsharp_sigma'}
    amount: float = 1.0
    sigma: float = 1.0


@dataclass(frozen=True)
class ConvolveRequest(OperationRequest):
    operation_id: ClassVar[str] = 'convolve'
    name: ClassVar[str] = 'Custom Convolution'
    kernel: Tuple[Tuple[float, ...], ...] = ((0.0, 0.0, 0.0),
                                             (0.0, 1.0, 0.0),
                                             (0.0, 0.0, 0.0))


@dataclass(frozen=True)
class SobelRequest(OperationRequest):
    operation_id: ClassVar[str] = 'sobel'
    name: ClassVar[str] = 'Sobel Edge'


@dataclass(frozen=True)
class LaplacianRequest(OperationRequest):
    operation_id: ClassVar[str] = 'laplacian'
    name: ClassVar[str] = 'Laplacian Edge'


# 톤 변환

@dataclass(frozen=True)
class GammaRequest(OperationRequest):
    operation_id: ClassVar[str] = 'gamma'
    name: ClassVar[str] = 'Gamma Correction'
    settings_keys: ClassVar[Dict[str, str]] = {'gamma': 'gamma', 'c': 'gamma_constant'}
    gamma: float = 1.0
    c: float = 1.0


@dataclass(frozen=True)
class NormalizeRequest(OperationRequest):
    operation_id: ClassVar[str] = 'normalize'
    name: ClassVar[str] = 'Histogram Normalize'
    min_out: float = 0
    max_out: float = 255


@dataclass(frozen=True)
class EqualizeRequest(OperationRequest):
    operation_id: ClassVar[str] = 'equalize'
    name: ClassVar[str] = 'Histogram Equalize'


@dataclass(frozen=True)
class InvertRequest(OperationRequest):
    operation_id: ClassVar[str] = 'invert'
    name: ClassVar[str] = 'Invert'


@dataclass(frozen=True)
class LogInvertRequest(OperationRequest):
    operation_id: ClassVar[str] = 'log_invert'
    name: ClassVar[str] = 'Logarithmic Invert'
    settings_keys: ClassVar[Dict[str, str]] = {'max_intensity': 'log_max_intensity'}
    max_intensity: float = 255


@dataclass(frozen=True)
class WindowLevelRequest(OperationRequest):
    operation_id: ClassVar[str] = 'window_level'
    name: ClassVar[str] = 'Window / Level'
    settings_keys: ClassVar[Dict[str, str]] = {'center': 'window_center',
                                               'width': 'window_width'}
    center: float = 128.0
    width: float = 256.0


@dataclass(frozen=True)
class BrightnessRequest(OperationRequest):
    operation_id: ClassVar[str] = 'brightness'
    name: ClassVar[str] = 'Brightness'
    value: float = 0


@dataclass(frozen=True)
class ContrastRequest(OperationRequest):
    operation_id: ClassVar[str] = 'contrast'
    name: ClassVar[str] = 'Contrast'
    value: float = 0


@dataclass(frozen=True)
class ThresholdRequest(OperationRequest):
    operation_id: ClassVar[str] = 'threshold'
    name: ClassVar[str] = 'Threshold'
    level: float = 128


@dataclass(frozen=True)
class GrayscaleRequest(OperationRequest):
    operation_id: ClassVar[str] = 'grayscale'
    name: ClassVar[str] = 'Grayscale'


# 기하 변환

@dataclass(frozen=True)
class RotateRequest(OperationRequest):
    operation_id: ClassVar[str] = 'rotate'
    name: ClassVar[str] = 'Rotate'
    angle: int = 90


@dataclass(frozen=True)
class MirrorRequest(OperationRequest):
    operation_id: ClassVar[str] = 'mirror'
    name: ClassVar[str] = 'Mirror'
    direction: str = 'horizontal'


@dataclass(frozen=True)
class BinningRequest(OperationRequest):
    operation_id: ClassVar[str] = 'binning'
    name: ClassVar[str] = 'Pixel Binning'
    settings_keys: ClassVar[Dict[str, str]] = {'bin_size': 'bin_size'}
    bin_size: int = 2


@dataclass(frozen=True)
class CropRequest(OperationRequest):
    operation_id: ClassVar[str] = 'crop'
    name: ClassVar[str] = 'Crop'
    x: int = 0
    y: int = 0
    width: int = 1
    height: Optional[int] = None


# 주파수 영역

FREQUENCY_FILTER_TYPES = ('low_pass', 'high_pass', 'band_pass', 'gaussian')


@dataclass(frozen=True)
class FrequencyFilterRequest(OperationRequest):
    """
    주파수 영역 필터

    filter_type:
        'low_pass' / 'high_pass': cutoff 반경
        'band_pass': [cutoff, high_cutoff]
        'gaussian': cutoff를 σ로 사용
    """
    operation_id: ClassVar[str] = 'frequency_filter'
    name: ClassVar[str] = 'Frequency Filter'
    settings_keys: ClassVar[Dict[str, str]] = {'channel': 'fft_channel'}
    filter_type: str = 'low_pass'
    cutoff: float = 30.0
    high_cutoff: Optional[float] = None
    channel: str = 'gray'
    centered: bool = True

    def build_filter(self):
        if self.filter_type == 'low_pass':
            return create_low_pass_filter(self.cutoff)
        if self.filter_type == 'high_pass':
            return create_high_pass_filter(self.cutoff)
        if self.filter_type == 'band_pass':
            if self.high_cutoff is None:
                raise ValidationError("band_pass 필터에는 high_cutoff가 필요합니다")
            return create_band_pass_filter(self.cutoff, self.high_cutoff)
        if self.filter_type == 'gaussian':
            return create_gaussian_frequency_filter(self.cutoff)
        raise ValidationError(
            f"알 수 없는 filter_type: {self.filter_type!r} "
            f"(가능: {', '.join(FREQUENCY_FILTER_TYPES)})")


# ===== 핸들러 레지스트리 =====

# handler(buffer, request, cancel_event, progress_callback, band_rows) -> PixelBuffer
Handler = Callable[..., PixelBuffer]

_HANDLERS: Dict[Type[OperationRequest], Handler] = {}


def _register(request_type: Type[OperationRequest]):
    def decorator(func: Handler) -> Handler:
        _HANDLERS[request_type] = func
        return func
    return decorator


def _banded(func, *args):
    """band 단위 취소/진행률을 지원하는 필터 연산용 핸들러 생성"""
    def handler(buffer, request, cancel_event, progress_callback, band_rows):
        values = [getattr(request, name) for name in args]
        return func(buffer, *values, cancel_event=cancel_event,
                    progress_callback=progress_callback, band_rows=band_rows)
    return handler


def _simple(func, *args):
    """취소 지점이 없는 단일 패스 연산용 핸들러 생성"""
    def handler(buffer, request, cancel_event, progress_callback, band_rows):
        return func(buffer, *[getattr(request, name) for name in args])
    return handler


_HANDLERS.update({
    GaussianRequest: _banded(filters.gaussian_filter, 'sigma'),
    MeanRequest: _banded(filters.mean_filter, 'kernel_size'),
    MedianRequest: _banded(filters.median_filter, 'kernel_size'),
    VarianceRequest: _banded(filters.variance_filter, 'kernel_size'),
    UnsharpRequest: _banded(filters.unsharp_mask, 'amount', 'sigma'),
    ConvolveRequest: _banded(filters.convolve, 'kernel'),
    SobelRequest: _simple(filters.sobel_edge_detection),
    LaplacianRequest: _simple(filters.laplacian_edge_detection),

    GammaRequest: _simple(tone.gamma_correction, 'gamma', 'c'),
    NormalizeRequest: _simple(tone.normalize_histogram, 'min_out', 'max_out'),
    EqualizeRequest: _simple(tone.equalize_histogram),
    InvertRequest: _simple(tone.invert_simple),
    LogInvertRequest: _simple(tone.invert_logarithmic, 'max_intensity'),
    WindowLevelRequest: _simple(tone.window_level, 'center', 'width'),
    BrightnessRequest: _simple(tone.adjust_brightness, 'value'),
    ContrastRequest: _simple(tone.adjust_contrast, 'value'),
    ThresholdRequest: _simple(tone.threshold, 'level'),
    GrayscaleRequest: _simple(tone.to_grayscale),

    RotateRequest: _simple(geometry.rotate, 'angle'),
    MirrorRequest: _simple(geometry.mirror, 'direction'),
    BinningRequest: _simple(geometry.pixel_binning, 'bin_size'),
    CropRequest: _simple(geometry.crop, 'x', 'y', 'width', 'height'),
})


@_register(FrequencyFilterRequest)
def _run_frequency_filter(buffer, request, cancel_event, progress_callback, band_rows):
    return filter_image_frequency(buffer, request.build_filter(),
                                  channel=request.channel,
                                  centered=request.centered,
                                  cancel_event=cancel_event)


def available_operations() -> List[Dict]:
    """
    등록된 연산 목록

    Returns:
        [{'id', 'name', 'params': {필드: 기본값}}, ...]
    """
    operations = []
    for request_type in _HANDLERS:
        operations.append({
            'id': request_type.operation_id,
            'name': request_type.name,
            'params': request_type().params(),
        })
    return operations


def request_type_for(operation_id: str) -> Type[OperationRequest]:
    for request_type in _HANDLERS:
        if request_type.operation_id == operation_id:
            return request_type
    raise ValidationError(f"알 수 없는 연산: {operation_id!r}")


def build_request(operation_id: str,
                  settings: Optional[SettingsManager] = None,
                  **overrides) -> OperationRequest:
    """
    settings 기본값 + overrides로 요청 생성

    Raises:
        ValidationError: 알 수 없는 연산 또는 파라미터
    """
    request_type = request_type_for(operation_id)
    valid = {f.name for f in fields(request_type)}

    unknown = set(overrides) - valid
    if unknown:
        raise ValidationError(
            f"{operation_id}: 알 수 없는 파라미터 {sorted(unknown)}")

    params = {}
    if settings is not None:
        for field_name, key in request_type.settings_keys.items():
            value = settings.get(key)
            if value is not None:
                params[field_name] = value
    params.update(overrides)
    return request_type(**params)


# ===== 실행 =====

def run_operation(buffer: PixelBuffer, request: OperationRequest,
                  cancel_event: Optional[threading.Event] = None,
                  progress_callback: ProgressCallback = None,
                  band_rows: Optional[int] = None) -> PixelBuffer:
    """
    요청 타입에 맞는 연산 실행

    Raises:
        ValidationError: 등록되지 않은 요청 타입 또는 잘못된 파라미터
        OperationCancelled: cancel_event가 설정됨
    """
    handler = _HANDLERS.get(type(request))
    if handler is None:
        raise ValidationError(f"지원하지 않는 요청 타입: {type(request).__name__}")

    check_cancelled(cancel_event, request.operation_id)
    t_start = time.perf_counter()

    result = handler(buffer, request, cancel_event, progress_callback, band_rows)

    check_cancelled(cancel_event, request.operation_id)
    _logger.debug(f"{request.operation_id} {request.params()}: "
                  f"{buffer.width}x{buffer.height} → {result.width}x{result.height}, "
                  f"{time.perf_counter() - t_start:.3f}s")
    return result


def run_pipeline(buffer: PixelBuffer, requests: Sequence[OperationRequest],
                 cancel_event: Optional[threading.Event] = None,
                 progress_callback: ProgressCallback = None,
                 band_rows: Optional[int] = None) -> PixelBuffer:
    """
    연산을 순서대로 적용 (각 단계 출력이 다음 단계 입력)

    progress_callback은 단계 단위로 (완료 단계 수, 전체 단계 수) 호출.
    """
    total = len(requests)
    current = buffer
    for i, request in enumerate(requests):
        current = run_operation(current, request, cancel_event, None, band_rows)
        if progress_callback:
            progress_callback(i + 1, total)
    return current


@dataclass
class OperationHandle:
    """백그라운드 연산 핸들"""
    future: Future
    cancel_event: threading.Event = field(default_factory=threading.Event)
    description: str = ''

    def cancel(self):
        """취소 요청 (실행 전이면 즉시, 실행 중이면 다음 취소 지점에서 중단)"""
        self.cancel_event.set()
        self.future.cancel()

    def done(self) -> bool:
        return self.future.done()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def result(self, timeout: Optional[float] = None) -> PixelBuffer:
        """
        결과 대기

        Raises:
            OperationCancelled: 실행 중 취소됨
            concurrent.futures.CancelledError: 시작 전에 취소됨
            concurrent.futures.TimeoutError: timeout 초과
        """
        return self.future.result(timeout)


class OperationRunner:
    """
    ThreadPoolExecutor 기반 연산 실행기

    각 submit은 독립된 cancel event를 가지며 입력 버퍼는 불변이므로
    같은 버퍼에 대한 여러 연산을 동시에 실행해도 안전.
    """

    def __init__(self, settings: Optional[SettingsManager] = None,
                 n_workers: Optional[int] = None):
        """
        Args:
            settings: band_rows / n_workers 기본값 출처
            n_workers: 워커 스레드 수 (None이면 settings, 그것도 없으면 executor 기본값)
        """
        self.settings = settings
        runtime = settings.get_runtime_params() if settings is not None else {}

        self.band_rows = runtime.get('band_rows')
        self.n_workers = n_workers if n_workers is not None else runtime.get('n_workers')
        if runtime.get('log_level'):
            set_log_level(runtime['log_level'])

        self._executor = ThreadPoolExecutor(max_workers=self.n_workers,
                                            thread_name_prefix='radiograph')
        _logger.debug(f"OperationRunner: n_workers={self.n_workers}, "
                      f"band_rows={self.band_rows}")

    def submit(self, buffer: PixelBuffer, request: OperationRequest,
               progress_callback: ProgressCallback = None) -> OperationHandle:
        """단일 연산 제출"""
        _logger.info(f"연산 제출: {request.operation_id} {request.params()}")
        cancel_event = threading.Event()
        future = self._executor.submit(
            run_operation, buffer, request, cancel_event,
            progress_callback, self.band_rows)
        return OperationHandle(future=future, cancel_event=cancel_event,
                               description=request.operation_id)

    def submit_pipeline(self, buffer: PixelBuffer,
                        requests: Sequence[OperationRequest],
                        progress_callback: ProgressCallback = None) -> OperationHandle:
        """연산 파이프라인 제출"""
        requests = list(requests)
        _logger.info(f"파이프라인 제출: {len(requests)}단계")
        cancel_event = threading.Event()
        future = self._executor.submit(
            run_pipeline, buffer, requests, cancel_event,
            progress_callback, self.band_rows)
        return OperationHandle(
            future=future, cancel_event=cancel_event,
            description=' → '.join(r.operation_id for r in requests))

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False
