"""FFT / 주파수 필터 테스트"""

import threading

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from radiograph.errors import ValidationError, OperationCancelled, DegenerateResultWarning
from radiograph.models import PixelBuffer
from radiograph.core.frequency import (
    fft_1d,
    ifft_1d,
    fft_2d,
    ifft_2d,
    radial_distance,
    apply_frequency_filter,
    fft_shift,
    ifft_shift,
    shift_result,
    fft_to_image,
    filter_image_frequency,
    create_low_pass_filter,
    create_high_pass_filter,
    create_band_pass_filter,
    create_gaussian_frequency_filter,
)


def make_gray(width: int = 8, height: int = 8, seed: int = 2) -> PixelBuffer:
    """R = G = B 인 랜덤 회색조 버퍼"""
    rng = np.random.default_rng(seed)
    gray = rng.integers(0, 256, size=(height, width), dtype=np.uint8)
    px = np.empty((height, width, 4), dtype=np.uint8)
    px[:, :, :3] = gray[:, :, None]
    px[:, :, 3] = 255
    return PixelBuffer(px)


def test_fft_1d_known_values():
    result = fft_1d([1, 2, 3, 4])
    assert np.allclose(result.real, [10, -2, -2, -2])
    assert np.allclose(result.imaginary, [0, 2, 0, -2])
    assert np.allclose(result.magnitude, np.hypot(result.real, result.imaginary))
    assert np.allclose(result.phase, np.arctan2(result.imaginary, result.real))

    restored = ifft_1d(result.real, result.imaginary)
    assert np.allclose(restored, [1, 2, 3, 4], atol=1e-9)


def test_fft_1d_non_power_of_two():
    data = np.arange(7, dtype=np.float64)
    result = fft_1d(data)
    assert result.real.shape == (7,)
    assert result.height == 1 and result.width == 7
    assert np.allclose(ifft_1d(result.real, result.imaginary), data)

    with pytest.raises(ValidationError):
        fft_1d([])
    with pytest.raises(ValidationError):
        ifft_1d([1, 2], [0])


def test_fft_2d_roundtrip():
    buf = make_gray(width=12, height=6)
    spectrum = fft_2d(buf)
    assert (spectrum.height, spectrum.width) == (6, 12)
    # DC = 합
    assert np.isclose(spectrum.real[0, 0], buf.channel('gray').sum())

    restored = ifft_2d(spectrum)
    assert np.allclose(restored, buf.channel('gray'), atol=1e-8)


def test_fft_2d_channel():
    px = np.zeros((4, 4, 4), dtype=np.uint8)
    px[:, :, 1] = 10
    spectrum = fft_2d(PixelBuffer(px), channel='g')
    assert np.isclose(spectrum.real[0, 0], 160)

    with pytest.raises(ValidationError):
        fft_2d(PixelBuffer(px), channel='alpha')


def test_shift_inverse_on_odd_size():
    data = np.arange(15, dtype=np.float64).reshape(3, 5)
    shifted = fft_shift(data)
    # DC(0, 0) → (h//2, w//2)
    assert shifted[1, 2] == data[0, 0]
    assert np.array_equal(ifft_shift(shifted), data)

    with pytest.raises(ValidationError):
        fft_shift(np.arange(4))


def test_radial_distance():
    r = radial_distance(4, 2)
    assert r.shape == (2, 4)
    assert r[1, 2] == 0
    assert np.isclose(r[0, 0], np.hypot(2, 1))


def test_frequency_masks():
    radius = np.array([0.0, 5.0, 10.0, 15.0])
    assert create_low_pass_filter(10)(radius).tolist() == [1, 1, 1, 0]
    assert create_high_pass_filter(10)(radius).tolist() == [0, 0, 1, 1]
    assert create_band_pass_filter(5, 10)(radius).tolist() == [0, 1, 1, 0]

    gaussian = create_gaussian_frequency_filter(5)(radius)
    assert gaussian[0] == 1.0
    assert np.isclose(gaussian[1], np.exp(-0.5))

    with pytest.raises(ValidationError):
        create_low_pass_filter(-1)
    with pytest.raises(ValidationError):
        create_band_pass_filter(10, 5)
    with pytest.raises(ValidationError):
        create_gaussian_frequency_filter(0)


def test_apply_filter_scales_both_parts():
    spectrum = fft_2d(make_gray())
    halved = apply_frequency_filter(spectrum, lambda r, w, h: 0.5)
    assert np.allclose(halved.real, spectrum.real * 0.5)
    assert np.allclose(halved.imaginary, spectrum.imaginary * 0.5)

    with pytest.raises(ValidationError):
        apply_frequency_filter(fft_1d([1, 2, 3]), lambda r, w, h: 1.0)


def test_apply_filter_scalar_function():
    """픽셀 단위 스칼라 함수도 벡터화 마스크와 같은 결과"""
    spectrum = fft_2d(make_gray())

    scalar = apply_frequency_filter(spectrum, lambda r, w, h: 1 if r <= 3 else 0)
    vectorized = apply_frequency_filter(spectrum, create_low_pass_filter(3))
    assert np.array_equal(scalar.real, vectorized.real)
    assert np.array_equal(scalar.imaginary, vectorized.imaginary)

    # 픽셀별 호출에도 width/height 전달
    by_width = apply_frequency_filter(spectrum, lambda r, w, h: 1.0 if r <= w / 4 else 0.0)
    expected = apply_frequency_filter(spectrum, create_low_pass_filter(2))
    assert np.array_equal(by_width.real, expected.real)


def test_filter_image_frequency():
    buf = make_gray()

    # 모든 주파수 통과 → 원본
    passthrough = filter_image_frequency(buf, create_high_pass_filter(0))
    assert passthrough == buf

    # DC만 통과 → 평균값 평탄 이미지
    dc_only = filter_image_frequency(buf, create_low_pass_filter(0))
    mean = buf.channel('gray').mean()
    values = dc_only.pixels[:, :, :3].astype(np.float64)
    assert np.all(np.abs(values - mean) <= 0.5 + 1e-9)
    assert np.all(dc_only.alpha == 255)


def test_shift_result_roundtrip():
    spectrum = fft_2d(make_gray(width=7, height=5))
    back = shift_result(shift_result(spectrum), inverse=True)
    assert np.array_equal(back.real, spectrum.real)
    assert np.array_equal(back.imaginary, spectrum.imaginary)


def test_fft_to_image():
    spectrum = fft_2d(make_gray())
    image = fft_to_image(shift_result(spectrum).magnitude)
    assert (image.width, image.height) == (8, 8)
    # DC 최대값이 중앙
    assert image.pixels[4, 4, 0] == 255

    with pytest.warns(DegenerateResultWarning):
        black = fft_to_image(np.zeros((3, 3)))
    assert np.all(black.pixels[:, :, :3] == 0)
    assert np.all(black.alpha == 255)


def test_fft_cancel():
    cancel_event = threading.Event()
    cancel_event.set()
    with pytest.raises(OperationCancelled):
        fft_2d(make_gray(), cancel_event=cancel_event)


if __name__ == "__main__":
    test_fft_1d_known_values()
    test_fft_1d_non_power_of_two()
    test_fft_2d_roundtrip()
    test_fft_2d_channel()
    test_shift_inverse_on_odd_size()
    test_radial_distance()
    test_frequency_masks()
    test_apply_filter_scales_both_parts()
    test_apply_filter_scalar_function()
    test_filter_image_frequency()
    test_shift_result_roundtrip()
    test_fft_to_image()
    test_fft_cancel()
    print("✓ 모든 FFT 테스트 통과")
