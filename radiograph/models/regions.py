"""
ROI 영역 정의

Rectangle / Circle 두 형상을 지원하며, 각 형상은 자신의 기하 면적과
중심, bounding box를 알고 있음. 형상 문자열 대신 타입 자체로 분기.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Tuple, Union

from ..errors import ValidationError


@dataclass(frozen=True)
class RectangleROI:
    """
    사각형 ROI (픽셀 좌표, 좌상단 기준)

    좌표는 실수 허용. 샘플링/마스크에서는 [floor(x), floor(x + width)) 구간 사용.
    """
    x: float
    y: float
    width: float
    height: float

    shape = 'rectangle'

    def __post_init__(self):
        for name in ('x', 'y', 'width', 'height'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real) \
                    or not math.isfinite(value):
                raise ValidationError(f"사각형 ROI {name}는 유한한 실수여야 합니다: {value!r}")
        if self.width <= 0 or self.height <= 0:
            raise ValidationError(
                f"면적이 0인 사각형 ROI: {self.width}x{self.height}")

    @property
    def area(self) -> float:
        return float(self.width * self.height)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y)"""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}


@dataclass(frozen=True)
class CircleROI:
    """원형 ROI"""
    center_x: float
    center_y: float
    radius: float

    shape = 'circle'

    def __post_init__(self):
        if not self.radius > 0:
            raise ValidationError(f"반지름은 양수여야 합니다: {self.radius}")

    @property
    def area(self) -> float:
        return math.pi * self.radius * self.radius

    @property
    def center(self) -> Tuple[float, float]:
        return (self.center_x, self.center_y)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        r = self.radius
        return (self.center_x - r, self.center_y - r,
                self.center_x + r, self.center_y + r)

    def to_dict(self) -> dict:
        return {'center_x': self.center_x, 'center_y': self.center_y,
                'radius': self.radius}


@dataclass(frozen=True)
class LineSegment:
    """Intensity profile 추출용 선분"""
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    def to_dict(self) -> dict:
        return {'x1': self.x1, 'y1': self.y1, 'x2': self.x2, 'y2': self.y2}


Region = Union[RectangleROI, CircleROI]
