"""기하 변환 테스트"""

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from radiograph.errors import ValidationError, OutOfBoundsError
from radiograph.models import PixelBuffer
from radiograph.core.geometry import rotate, mirror, pixel_binning, crop


def make_indexed(width: int = 5, height: int = 3) -> PixelBuffer:
    """픽셀마다 고유한 R 값 (y * width + x)"""
    px = np.zeros((height, width, 4), dtype=np.uint8)
    px[:, :, 0] = np.arange(width * height, dtype=np.uint8).reshape(height, width)
    px[:, :, 1] = 7
    px[:, :, 3] = 255
    return PixelBuffer(px)


def test_rotate_coordinate_mapping():
    buf = make_indexed()
    w, h = buf.width, buf.height

    r90 = rotate(buf, 90)
    r180 = rotate(buf, 180)
    r270 = rotate(buf, 270)
    assert (r90.width, r90.height) == (h, w)
    assert (r180.width, r180.height) == (w, h)
    assert (r270.width, r270.height) == (h, w)

    for y in range(h):
        for x in range(w):
            v = buf.pixels[y, x, 0]
            assert r90.pixels[x, h - 1 - y, 0] == v
            assert r180.pixels[h - 1 - y, w - 1 - x, 0] == v
            assert r270.pixels[w - 1 - x, y, 0] == v


def test_rotate_four_times_is_identity():
    buf = make_indexed()
    for step in (90, 180, 270):
        out = buf
        for _ in range(4):
            out = rotate(out, step)
        assert out == buf, f"{step}° x 4 != 원본"


def test_rotate_angle_normalization():
    buf = make_indexed()
    assert rotate(buf, 0) == buf
    assert rotate(buf, 360) == buf
    assert rotate(buf, -90) == rotate(buf, 270)
    assert rotate(buf, 450) == rotate(buf, 90)

    with pytest.raises(ValidationError):
        rotate(buf, 45)
    with pytest.raises(ValidationError):
        rotate(buf, 90.5)


def test_mirror():
    buf = make_indexed()
    h_flip = mirror(buf, 'horizontal')
    v_flip = mirror(buf, 'vertical')

    assert np.array_equal(h_flip.pixels, buf.pixels[:, ::-1])
    assert np.array_equal(v_flip.pixels, buf.pixels[::-1])
    assert mirror(h_flip, 'horizontal') == buf
    assert mirror(v_flip, 'vertical') == buf

    with pytest.raises(ValidationError):
        mirror(buf, 'diagonal')


def test_binning_block_mean():
    """4x4 → 2x2, 각 픽셀은 2x2 블록 평균"""
    px = np.zeros((4, 4, 4), dtype=np.uint8)
    px[:, :, 0] = np.array([[0, 10, 100, 100],
                            [20, 30, 100, 100],
                            [1, 2, 50, 60],
                            [3, 4, 70, 80]], dtype=np.uint8)
    px[:, :, 3] = 9
    out = pixel_binning(PixelBuffer(px), 2)

    assert (out.width, out.height) == (2, 2)
    assert out.pixels[:, :, 0].tolist() == [[15, 100], [2, 65]]
    assert np.all(out.alpha == 255)


def test_binning_drops_remainder():
    buf = make_indexed(width=5, height=3)
    out = pixel_binning(buf, 2)
    assert (out.width, out.height) == (2, 1)
    # (0 + 1 + 5 + 6) / 4 = 3
    assert out.pixels[0, 0, 0] == 3

    assert pixel_binning(buf, 1).pixels[:, :, 0].tolist() == buf.pixels[:, :, 0].tolist()

    with pytest.raises(ValidationError):
        pixel_binning(buf, 0)
    with pytest.raises(ValidationError):
        pixel_binning(buf, 4)


def test_crop():
    buf = make_indexed()
    out = crop(buf, 1, 1, 3, 2)
    assert (out.width, out.height) == (3, 2)
    assert out.pixels[0, 0, 0] == buf.pixels[1, 1, 0]

    # 정사각 기본값 + 클리핑
    clipped = crop(buf, 3, -1, 4)
    assert (clipped.width, clipped.height) == (2, 3)

    with pytest.raises(OutOfBoundsError):
        crop(buf, 10, 10, 2)
    with pytest.raises(ValidationError):
        crop(buf, 0, 0, 0)


def test_input_not_modified():
    buf = make_indexed()
    before = buf.to_array()
    rotate(buf, 90)
    mirror(buf)
    pixel_binning(buf, 2)
    assert np.array_equal(buf.pixels, before)


if __name__ == "__main__":
    test_rotate_coordinate_mapping()
    test_rotate_four_times_is_identity()
    test_rotate_angle_normalization()
    test_mirror()
    test_binning_block_mean()
    test_binning_drops_remainder()
    test_crop()
    test_input_not_modified()
    print("✓ 모든 기하 변환 테스트 통과")
