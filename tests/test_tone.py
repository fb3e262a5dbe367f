"""톤 변환 테스트"""

import warnings

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from radiograph.errors import ValidationError, DegenerateResultWarning
from radiograph.models import PixelBuffer
from radiograph.core.tone import (
    gamma_correction,
    normalize_histogram,
    equalize_histogram,
    invert_logarithmic,
    invert_simple,
    window_level,
    build_window_lut,
    apply_lut,
    adjust_brightness,
    adjust_contrast,
    to_grayscale,
    threshold,
    create_hdr,
)


def make_ramp(width: int = 16, height: int = 4, alpha: int = 255) -> PixelBuffer:
    """0 ~ 255 회색 램프"""
    values = np.linspace(0, 255, width).round().astype(np.uint8)
    px = np.empty((height, width, 4), dtype=np.uint8)
    px[:, :, :3] = values[None, :, None]
    px[:, :, 3] = alpha
    return PixelBuffer(px)


def make_random(seed: int = 1) -> PixelBuffer:
    rng = np.random.default_rng(seed)
    return PixelBuffer(rng.integers(0, 256, size=(10, 12, 4), dtype=np.uint8))


def test_invert_twice_is_identity():
    buf = make_random()
    once = invert_simple(buf)
    assert np.array_equal(once.pixels[:, :, :3], 255 - buf.pixels[:, :, :3])
    assert np.array_equal(once.alpha, buf.alpha)
    assert invert_simple(once) == buf


def test_gamma():
    buf = make_ramp()
    assert gamma_correction(buf, 1.0) == buf

    brighter = gamma_correction(buf, 0.5)
    darker = gamma_correction(buf, 2.0)
    mid = buf.pixels[0, 8, 0]
    assert brighter.pixels[0, 8, 0] > mid > darker.pixels[0, 8, 0]
    # 0과 255는 고정점
    assert brighter.pixels[0, 0, 0] == 0 and brighter.pixels[0, -1, 0] == 255

    with pytest.raises(ValidationError):
        gamma_correction(buf, 0)
    with pytest.raises(ValidationError):
        gamma_correction(buf, -1)


def test_normalize_stays_in_range():
    rng = np.random.default_rng(3)
    px = rng.integers(60, 180, size=(8, 8, 4), dtype=np.uint8)
    out = normalize_histogram(PixelBuffer(px), 20, 200)

    rgb = out.pixels[:, :, :3]
    assert rgb.min() >= 20 and rgb.max() <= 200
    for c in range(3):
        assert out.pixels[:, :, c].min() == 20
        assert out.pixels[:, :, c].max() == 200

    with pytest.raises(ValidationError):
        normalize_histogram(PixelBuffer(px), 200, 20)
    with pytest.raises(ValidationError):
        normalize_histogram(PixelBuffer(px), 0, 300)


def test_normalize_constant_channel():
    buf = PixelBuffer.blank(4, 4, (90, 90, 90, 255))
    with pytest.warns(DegenerateResultWarning):
        out = normalize_histogram(buf, 10, 250)
    assert np.all(out.pixels[:, :, :3] == 10)


def test_equalize():
    out = equalize_histogram(make_ramp())
    gray = out.pixels[0, :, 0]
    assert gray[0] == 0
    assert gray[-1] == 255
    assert np.all(np.diff(gray.astype(int)) >= 0)
    assert np.array_equal(out.pixels[:, :, 0], out.pixels[:, :, 1])

    with pytest.warns(DegenerateResultWarning):
        flat = equalize_histogram(PixelBuffer.blank(3, 3, (40, 40, 40, 255)))
    assert np.all(flat.pixels[:, :, :3] == 0)


def test_invert_logarithmic():
    buf = make_ramp()
    out = invert_logarithmic(buf, 255)
    # v = 0 → -ln(0.001) / 7 * 255 ≈ 251.6
    assert out.pixels[0, 0, 0] == 252
    # v = I0 → -ln(1.001) / 7 * 255 ≈ -0.036 → 0
    assert out.pixels[0, -1, 0] == 0

    with pytest.raises(ValidationError):
        invert_logarithmic(buf, 0)


def test_window_level():
    buf = make_ramp(width=256)
    out = window_level(buf, center=128, width=100)
    gray = out.pixels[0, :, 0]

    assert np.all(gray[:79] == 0)         # <= 78
    assert np.all(gray[178:] == 255)      # >= 178
    assert gray[128] == 128               # (128 - 78) / 100 * 255 = 127.5 → 128

    with pytest.raises(ValidationError):
        window_level(buf, 128, 0)


def test_window_lut():
    lut = build_window_lut(50, 150)
    assert lut.shape == (256,)
    assert lut[50] == 0 and lut[150] == 255
    assert lut[100] == 128

    lut16 = build_window_lut(1000, 3000, bit_depth=16)
    assert lut16.shape == (65536,)

    with pytest.raises(ValidationError):
        build_window_lut(10, 10)
    with pytest.raises(ValidationError):
        build_window_lut(0, 255, bit_depth=12)

    buf = make_ramp(alpha=100)
    out = apply_lut(buf, lut)
    assert np.array_equal(out.pixels[:, :, 0], lut[buf.pixels[:, :, 0]].astype(np.uint8))
    assert np.all(out.alpha == 100)


def test_brightness_contrast():
    buf = PixelBuffer.blank(2, 2, (100, 150, 200, 77))

    bright = adjust_brightness(buf, 50)
    assert bright.pixels[0, 0, :3].tolist() == [164, 214, 255]
    assert bright.pixels[0, 0, 3] == 77

    assert adjust_contrast(buf, 0) == buf
    stronger = adjust_contrast(buf, 50)
    assert stronger.pixels[0, 0, 0] < 100 and stronger.pixels[0, 0, 2] > 200

    with pytest.raises(ValidationError):
        adjust_brightness(buf, 101)
    with pytest.raises(ValidationError):
        adjust_contrast(buf, -150)


def test_grayscale_and_threshold():
    buf = PixelBuffer.blank(2, 2, (255, 0, 0, 255))
    gray = to_grayscale(buf)
    assert gray.pixels[0, 0, :3].tolist() == [76, 76, 76]

    assert np.all(threshold(buf, 128).pixels[:, :, :3] == 0)
    assert np.all(threshold(buf, 50).pixels[:, :, :3] == 255)


def test_hdr():
    a = PixelBuffer.blank(3, 3, (100, 100, 100, 255))
    b = PixelBuffer.blank(3, 3, (200, 200, 200, 255))
    out = create_hdr([a, b], [1.0, 2.0])
    # 둘 다 노출 보정 후 100 → 결과 100
    assert np.all(out.pixels[:, :, :3] == 100)
    assert np.all(out.alpha == 255)

    # gray 0 → 가중치 0 → 투명 검정
    black = PixelBuffer.blank(2, 2, (0, 0, 0, 255))
    assert np.all(create_hdr([black], [1.0]).pixels == 0)

    with pytest.raises(ValidationError):
        create_hdr([a, b], [1.0])
    with pytest.raises(ValidationError):
        create_hdr([], [])


def test_no_warning_on_regular_input():
    with warnings.catch_warnings():
        warnings.simplefilter("error", DegenerateResultWarning)
        normalize_histogram(make_random())
        equalize_histogram(make_random())


if __name__ == "__main__":
    test_invert_twice_is_identity()
    test_gamma()
    test_normalize_stays_in_range()
    test_normalize_constant_channel()
    test_equalize()
    test_invert_logarithmic()
    test_window_level()
    test_window_lut()
    test_brightness_contrast()
    test_grayscale_and_threshold()
    test_hdr()
    test_no_warning_on_regular_input()
    print("✓ 모든 톤 변환 테스트 통과")
