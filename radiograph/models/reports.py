"""
분석 결과 데이터 모델

통계 요약, 히스토그램, FFT 결과, ROI 분석 결과 등 엔진이 반환하는
값 타입. 모두 호출 단위로 생성되며 공유 상태가 없음.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple
import numpy as np

from .regions import Region


@dataclass
class StatSummary:
    """단일 샘플 시퀀스 통계"""
    mean: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    std_dev: float = 0.0
    variance: float = 0.0
    count: int = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            'mean': self.mean,
            'median': self.median,
            'min': self.min,
            'max': self.max,
            'std_dev': self.std_dev,
            'variance': self.variance,
            'count': self.count,
        }


@dataclass
class HistogramFold:
    """채널별 256-bin 히스토그램 (각 bin은 전체 픽셀 대비 %)"""
    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray
    gray: np.ndarray

    def channel(self, name: str) -> np.ndarray:
        return {'red': self.red, 'r': self.red,
                'green': self.green, 'g': self.green,
                'blue': self.blue, 'b': self.blue,
                'gray': self.gray}[name]


@dataclass
class FFTResult:
    """
    FFT 결과

    real / imaginary만 저장하고 magnitude, phase는 파생 속성으로 계산.
    → magnitude == hypot(re, im), phase == atan2(im, re) 항상 성립.
    1D 결과는 shape (n,), 2D 결과는 shape (height, width).
    """
    real: np.ndarray
    imaginary: np.ndarray

    @property
    def magnitude(self) -> np.ndarray:
        return np.hypot(self.real, self.imaginary)

    @property
    def phase(self) -> np.ndarray:
        return np.arctan2(self.imaginary, self.real)

    @property
    def width(self) -> int:
        return int(self.real.shape[-1])

    @property
    def height(self) -> int:
        return int(self.real.shape[0]) if self.real.ndim == 2 else 1

    @property
    def complex(self) -> np.ndarray:
        return self.real + 1j * self.imaginary

    @classmethod
    def from_complex(cls, values: np.ndarray) -> 'FFTResult':
        values = np.asarray(values)
        return cls(real=np.ascontiguousarray(values.real, dtype=np.float64),
                   imaginary=np.ascontiguousarray(values.imag, dtype=np.float64))


@dataclass
class QualityMetrics:
    """CT/X-Ray 이미지 품질 지표"""
    snr: float = 0.0
    cnr: float = 0.0
    transmission: float = 0.0
    min_transmission: float = 0.0
    attenuation: float = 0.0


@dataclass
class QualityIndex:
    """SNR 기반 간이 품질 등급"""
    snr: float
    quality: str
    score: int


@dataclass
class ROIAnalysisResult:
    """
    단일 ROI 분석 결과

    area는 기하 면적(w*h 또는 πr²), pixel_count는 실제 샘플된 픽셀 수.
    래스터화/경계 클리핑 때문에 서로 다를 수 있으며 둘 다 독립적인 의미를 가짐.
    """
    region: Region
    channel: str
    area: float
    pixel_count: int
    statistics: StatSummary
    metrics: Optional[QualityMetrics] = None
    image_shape: Tuple[int, int] = (0, 0)

    @property
    def shape(self) -> str:
        return self.region.shape

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            'shape': self.shape,
            'region': self.region.to_dict(),
            'channel': self.channel,
            'area': self.area,
            'pixel_count': self.pixel_count,
            'image_shape': self.image_shape,
        }


@dataclass
class ROIComparison:
    """두 ROI 분석 결과 비교"""
    mean_difference: float
    mean_ratio: float
    contrast_ratio: float
    area_difference: float
    area_ratio: float


@dataclass
class ProfilePoint:
    """Line profile 샘플"""
    x: int
    y: int
    distance: int
    value: float


@dataclass
class LineProfile:
    """Line profile 전체 결과"""
    points: list = field(default_factory=list)
    channel: str = 'gray'

    @property
    def values(self) -> np.ndarray:
        return np.array([p.value for p in self.points], dtype=np.float64)

    @property
    def distances(self) -> np.ndarray:
        return np.array([p.distance for p in self.points], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.points)
