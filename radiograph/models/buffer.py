"""
픽셀 버퍼 데이터 모델

RGBA 8-bit 인터리브 버퍼. 모든 엔진 함수의 입력/출력 공통 타입.

- 채널 순서 R, G, B, A / row-major / 좌상단 원점
- 내부 배열은 (height, width, 4) uint8, writeable=False
  → 불변 값 타입이므로 스레드 간 전달 시 동기화 불필요
- 크기가 바뀌는 연산(binning, 90/270 회전)은 항상 새 버퍼를 생성
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
import cv2

from ..errors import ValidationError

CHANNELS = ('gray', 'r', 'g', 'b')
_CHANNEL_INDEX = {'r': 0, 'g': 1, 'b': 2, 'alpha': 3}


def to_uint8(values) -> np.ndarray:
    """
    포화 캐스트 (Uint8ClampedArray 대입과 동일한 규칙)

    NaN → 0, +inf → 255, -inf → 0, 반올림은 round-half-to-even,
    이후 [0, 255] 클램프.
    """
    arr = np.asarray(values, dtype=np.float64)
    arr = np.nan_to_num(arr, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.rint(arr), 0, 255).astype(np.uint8)


def js_round(values) -> np.ndarray:
    """Math.round 호환 반올림 (0.5는 항상 올림)"""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def validate_channel(channel: str, allow_alpha: bool = False) -> str:
    allowed = CHANNELS + ('alpha',) if allow_alpha else CHANNELS
    if channel not in allowed:
        raise ValidationError(f"지원하지 않는 채널: {channel!r} (허용: {allowed})")
    return channel


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """RGBA 픽셀 버퍼 (불변)"""
    pixels: np.ndarray

    def __post_init__(self):
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise ValidationError("pixels는 numpy 배열이어야 합니다")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValidationError(
                f"pixels shape은 (height, width, 4)이어야 합니다: {pixels.shape}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValidationError(f"빈 버퍼는 허용되지 않습니다: {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValidationError(f"pixels dtype은 uint8이어야 합니다: {pixels.dtype}")

        # 호출자 배열과 aliasing 되지 않도록 복사 후 잠금
        frozen = np.array(pixels, dtype=np.uint8, copy=True, order='C')
        frozen.flags.writeable = False
        object.__setattr__(self, 'pixels', frozen)

    # ── 생성자 ──

    @classmethod
    def from_rgba(cls, array: np.ndarray) -> 'PixelBuffer':
        """(H, W, 4) 배열에서 생성 (uint8 범위를 벗어나면 포화 캐스트)"""
        array = np.asarray(array)
        if array.dtype != np.uint8:
            array = to_uint8(array)
        return cls(array)

    @classmethod
    def from_samples(cls, width: int, height: int,
                     samples: Union[bytes, bytearray, Sequence[int], np.ndarray]
                     ) -> 'PixelBuffer':
        """캔버스 ImageData 형태의 평탄 배열(width*height*4)에서 생성"""
        if width < 1 or height < 1:
            raise ValidationError(f"잘못된 버퍼 크기: {width}x{height}")

        if isinstance(samples, (bytes, bytearray)):
            flat = np.frombuffer(bytes(samples), dtype=np.uint8)
        else:
            flat = np.asarray(samples)
            if flat.dtype != np.uint8:
                flat = to_uint8(flat)

        expected = width * height * 4
        if flat.size != expected:
            raise ValidationError(
                f"samples 길이 불일치: {flat.size} != {width}*{height}*4 ({expected})")
        return cls(flat.reshape(height, width, 4))

    @classmethod
    def from_bgr(cls, image: np.ndarray) -> 'PixelBuffer':
        """OpenCV 이미지(BGR / BGRA / 그레이스케일)에서 생성"""
        image = np.asarray(image)
        if image.dtype != np.uint8:
            image = to_uint8(image)

        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.ndim == 3 and image.shape[2] == 3:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        elif image.ndim == 3 and image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            raise ValidationError(f"지원하지 않는 이미지 shape: {image.shape}")
        return cls(rgba)

    @classmethod
    def blank(cls, width: int, height: int,
              color: Sequence[int] = (0, 0, 0, 255)) -> 'PixelBuffer':
        if width < 1 or height < 1:
            raise ValidationError(f"잘못된 버퍼 크기: {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = to_uint8(color)
        return cls(pixels)

    # ── 속성 ──

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def shape(self) -> tuple:
        """(height, width)"""
        return (self.height, self.width)

    @property
    def samples(self) -> np.ndarray:
        """평탄화된 R,G,B,A 샘플 (읽기 전용 view)"""
        return self.pixels.reshape(-1)

    @property
    def rgb(self) -> np.ndarray:
        """RGB 평면 float64 복사본 (H, W, 3)"""
        return self.pixels[:, :, :3].astype(np.float64)

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def channel(self, name: str = 'gray') -> np.ndarray:
        """
        채널 평면 추출 (float64)

        gray는 (R + G + B) / 3 (반올림 없음). 반올림된 정수 회색이 필요한
        곳(ROI, Sobel)은 호출부에서 js_round 적용.
        """
        validate_channel(name, allow_alpha=True)
        if name == 'gray':
            return self.pixels[:, :, :3].astype(np.float64).sum(axis=2) / 3.0
        return self.pixels[:, :, _CHANNEL_INDEX[name]].astype(np.float64)

    def to_bgr(self) -> np.ndarray:
        """OpenCV BGRA 배열로 변환 (쓰기 가능 복사본)"""
        return cv2.cvtColor(self.to_array(), cv2.COLOR_RGBA2BGRA)

    def to_array(self) -> np.ndarray:
        """쓰기 가능한 (H, W, 4) 복사본"""
        return np.array(self.pixels, copy=True)

    # ── 파생 버퍼 ──

    def with_rgb(self, rgb, alpha: Optional[np.ndarray] = None) -> 'PixelBuffer':
        """
        RGB 값을 교체한 새 버퍼

        Args:
            rgb: (H, W, 3) 또는 (H, W) 배열. 2D면 세 채널에 동일하게 기록
            alpha: None이면 원본 alpha 유지, 스칼라/배열이면 해당 값 사용
        """
        rgb = np.asarray(rgb)
        if rgb.ndim == 2:
            rgb = np.repeat(rgb[:, :, None], 3, axis=2)
        if rgb.shape[:2] != self.shape:
            raise ValidationError(f"RGB shape 불일치: {rgb.shape[:2]} != {self.shape}")

        out = np.empty((self.height, self.width, 4), dtype=np.uint8)
        out[:, :, :3] = rgb if rgb.dtype == np.uint8 else to_uint8(rgb)
        if alpha is None:
            out[:, :, 3] = self.pixels[:, :, 3]
        else:
            out[:, :, 3] = to_uint8(alpha)
        return PixelBuffer(out)

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(self.pixels)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and \
            bool(np.array_equal(self.pixels, other.pixels))

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"
