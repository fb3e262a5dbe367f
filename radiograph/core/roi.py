"""
ROI (Region of Interest) 분석 모듈

사각형/원형 ROI 픽셀 추출, ROI 통계, 품질 지표, line profile.

샘플 순서:
    - 사각형: row-major
    - 원형: bounding box 내 row-major, 중심 거리 <= radius 인 픽셀만
경계 처리:
    버퍼와 일부만 겹치는 ROI는 겹치는 부분만 샘플 (clipping).
    전혀 겹치지 않으면 OutOfBoundsError.
"""

import math
import logging
from typing import Optional

import numpy as np

from ..errors import ValidationError, OutOfBoundsError
from ..models.buffer import PixelBuffer, js_round, validate_channel
from ..models.regions import RectangleROI, CircleROI, LineSegment, Region
from ..models.settings import SettingsManager
from ..models.reports import (
    ROIAnalysisResult,
    ROIComparison,
    ProfilePoint,
    LineProfile,
)
from .statistics import calculate_statistics
from .metrics import calculate_all_metrics

_logger = logging.getLogger(__name__)


def _sample_plane(pixels: np.ndarray, channel: str) -> np.ndarray:
    """RGBA 슬라이스에서 채널 평면 추출 (gray는 정수 반올림)"""
    if channel == 'gray':
        return js_round(pixels[..., :3].astype(np.float64).sum(axis=-1) / 3)
    index = {'r': 0, 'g': 1, 'b': 2, 'alpha': 3}[channel]
    return pixels[..., index].astype(np.float64)


def _clip_rectangle(roi: RectangleROI, width: int, height: int):
    """[floor(x), floor(x + w)) 를 (width, height)로 클리핑, 겹침이 없으면 None"""
    x0 = max(0, int(math.floor(roi.x)))
    y0 = max(0, int(math.floor(roi.y)))
    x1 = min(width, int(math.floor(roi.x + roi.width)))
    y1 = min(height, int(math.floor(roi.y + roi.height)))
    if x0 >= x1 or y0 >= y1:
        return None
    return x0, y0, x1, y1


def _rectangle_window(buffer: PixelBuffer, roi: RectangleROI):
    window = _clip_rectangle(roi, buffer.width, buffer.height)
    if window is None:
        raise OutOfBoundsError(
            f"사각형 ROI {roi.to_dict()}가 {buffer.width}x{buffer.height} 버퍼 밖에 있습니다")
    return window


def _circle_window(buffer: PixelBuffer, roi: CircleROI):
    # bounding box: [floor(c - r), ceil(c + r)) 를 버퍼로 클리핑
    x0 = max(0, int(math.floor(roi.center_x - roi.radius)))
    x1 = min(buffer.width, int(math.ceil(roi.center_x + roi.radius)))
    y0 = max(0, int(math.floor(roi.center_y - roi.radius)))
    y1 = min(buffer.height, int(math.ceil(roi.center_y + roi.radius)))
    if x0 >= x1 or y0 >= y1:
        raise OutOfBoundsError(
            f"원형 ROI {roi.to_dict()}가 {buffer.width}x{buffer.height} 버퍼 밖에 있습니다")
    return x0, y0, x1, y1


def _circle_mask(roi: CircleROI, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
    xs = np.arange(x0, x1, dtype=np.float64) - roi.center_x
    ys = np.arange(y0, y1, dtype=np.float64) - roi.center_y
    distance = np.sqrt(xs[None, :] ** 2 + ys[:, None] ** 2)
    return distance <= roi.radius


def extract_rectangle_roi(buffer: PixelBuffer, roi: RectangleROI,
                          channel: str = 'gray') -> np.ndarray:
    """사각형 ROI 샘플 (row-major, float64)"""
    validate_channel(channel, allow_alpha=True)
    x0, y0, x1, y1 = _rectangle_window(buffer, roi)
    return _sample_plane(buffer.pixels[y0:y1, x0:x1], channel).ravel()


def extract_circle_roi(buffer: PixelBuffer, roi: CircleROI,
                       channel: str = 'gray') -> np.ndarray:
    """원형 ROI 샘플 (bounding box row-major, 거리 <= radius)"""
    validate_channel(channel, allow_alpha=True)
    x0, y0, x1, y1 = _circle_window(buffer, roi)
    plane = _sample_plane(buffer.pixels[y0:y1, x0:x1], channel)
    return plane[_circle_mask(roi, x0, y0, x1, y1)]


def extract_roi(buffer: PixelBuffer, region: Region, channel: str = 'gray') -> np.ndarray:
    """영역 타입에 따라 추출 함수 선택"""
    if isinstance(region, RectangleROI):
        return extract_rectangle_roi(buffer, region, channel)
    if isinstance(region, CircleROI):
        return extract_circle_roi(buffer, region, channel)
    raise ValidationError(f"지원하지 않는 ROI 타입: {type(region).__name__}")


def calculate_roi_area(region: Region) -> float:
    """기하 면적 (w*h 또는 πr²), 실제 샘플 수와 다를 수 있음"""
    if isinstance(region, (RectangleROI, CircleROI)):
        return region.area
    raise ValidationError(f"지원하지 않는 ROI 타입: {type(region).__name__}")


def analyze_roi(buffer: PixelBuffer, region: Region,
                channel: str = 'gray',
                calculate_metrics: bool = True,
                background_roi: Optional[Region] = None,
                reference_roi: Optional[Region] = None,
                reference_intensity: Optional[float] = None,
                thickness: float = 1.0) -> ROIAnalysisResult:
    """
    ROI 종합 분석

    Args:
        buffer: 입력 버퍼
        region: RectangleROI 또는 CircleROI
        channel: 'gray' | 'r' | 'g' | 'b'
        calculate_metrics: 품질 지표(SNR/CNR/투과율/감쇠) 계산 여부
        background_roi: CNR 계산용 배경 ROI
        reference_roi: 투과율 I0용 기준 ROI
        reference_intensity: 고정 I0 값
        thickness: 감쇠계수 계산용 두께

    Returns:
        ROIAnalysisResult
    """
    validate_channel(channel)
    samples = extract_roi(buffer, region, channel)

    result = ROIAnalysisResult(
        region=region,
        channel=channel,
        area=calculate_roi_area(region),
        pixel_count=int(samples.size),
        statistics=calculate_statistics(samples),
        image_shape=buffer.shape,
    )

    if calculate_metrics:
        background = extract_roi(buffer, background_roi, channel) \
            if background_roi is not None else None
        reference = extract_roi(buffer, reference_roi, channel) \
            if reference_roi is not None else None

        result.metrics = calculate_all_metrics(
            samples,
            background_data=background,
            reference_data=reference,
            reference_intensity=reference_intensity,
            thickness=thickness,
        )

    _logger.debug(f"analyze_roi {region.shape} {channel}: "
                  f"{result.pixel_count}px, mean={result.statistics.mean:.2f}")
    return result


def analyze_roi_with_settings(buffer: PixelBuffer, region: Region,
                              settings: Optional[SettingsManager] = None,
                              **overrides) -> ROIAnalysisResult:
    """
    설정의 ROI 기본값(roi_channel, thickness)으로 analyze_roi 실행

    overrides에 준 인자가 설정값보다 우선.
    """
    settings = settings or SettingsManager()
    params = settings.get_roi_params()
    kwargs = {'channel': params['roi_channel'], 'thickness': params['thickness']}
    kwargs.update(overrides)
    return analyze_roi(buffer, region, **kwargs)


def compare_rois(first: ROIAnalysisResult, second: ROIAnalysisResult) -> ROIComparison:
    """
    두 ROI 분석 결과 비교 (second를 기준/배경으로 사용)

    Raises:
        ValidationError: 서로 다른 크기의 이미지에서 얻은 결과
    """
    if first.image_shape != second.image_shape:
        raise ValidationError(
            f"이미지 크기가 다른 ROI는 비교할 수 없습니다: "
            f"{first.image_shape} != {second.image_shape}")

    s1, s2 = first.statistics, second.statistics
    mean_diff = abs(s1.mean - s2.mean)

    return ROIComparison(
        mean_difference=mean_diff,
        mean_ratio=s1.mean / s2.mean if s2.mean != 0 else 0.0,
        contrast_ratio=mean_diff / s2.std_dev if s2.std_dev != 0 else math.inf,
        area_difference=abs(first.area - second.area),
        area_ratio=first.area / second.area,
    )


def create_roi_mask(width: int, height: int, region: Region) -> np.ndarray:
    """(height, width) uint8 마스크, ROI 내부 1"""
    if width < 1 or height < 1:
        raise ValidationError(f"잘못된 마스크 크기: {width}x{height}")

    mask = np.zeros((height, width), dtype=np.uint8)
    if isinstance(region, RectangleROI):
        window = _clip_rectangle(region, width, height)
        if window is not None:
            x0, y0, x1, y1 = window
            mask[y0:y1, x0:x1] = 1
    elif isinstance(region, CircleROI):
        mask[_circle_mask(region, 0, 0, width, height)] = 1
    else:
        raise ValidationError(f"지원하지 않는 ROI 타입: {type(region).__name__}")
    return mask


def extract_line_profile(buffer: PixelBuffer, line: LineSegment,
                         channel: str = 'gray') -> LineProfile:
    """
    선분을 따라 단위 간격으로 샘플링

    steps = ceil(length), i = 0..steps 에서 t = i / steps,
    좌표는 반올림. 버퍼 밖 샘플은 건너뜀. 길이 0이면 시작점 1개.
    """
    validate_channel(channel)
    dx = line.x2 - line.x1
    dy = line.y2 - line.y1
    steps = int(math.ceil(line.length))

    index = np.arange(steps + 1, dtype=np.float64)
    t = index / steps if steps > 0 else np.zeros(1)
    xs = js_round(line.x1 + dx * t).astype(np.int64)
    ys = js_round(line.y1 + dy * t).astype(np.int64)

    inside = (xs >= 0) & (xs < buffer.width) & (ys >= 0) & (ys < buffer.height)
    values = _sample_plane(buffer.pixels[ys[inside], xs[inside]], channel)

    points = [
        ProfilePoint(x=int(x), y=int(y), distance=int(d), value=float(v))
        for x, y, d, v in zip(xs[inside], ys[inside], index[inside], values)
    ]
    if len(points) < steps + 1:
        _logger.debug(f"line profile: {steps + 1 - len(points)}개 샘플이 버퍼 밖")
    return LineProfile(points=points, channel=channel)
