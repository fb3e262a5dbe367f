"""품질 지표 (SNR / CNR / 투과율 / 감쇠) 테스트"""

import math

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from radiograph.errors import ValidationError, DegenerateResultWarning
from radiograph.core.metrics import (
    calculate_snr,
    calculate_cnr,
    calculate_transmission,
    calculate_roi_transmission,
    calculate_min_transmission,
    calculate_attenuation,
    calculate_all_metrics,
    calculate_quality_index,
)


def test_snr():
    data = [10, 20, 30, 40, 50]
    assert math.isclose(calculate_snr(data), 30 / np.std(data))
    assert calculate_snr([]) == 0

    with pytest.warns(DegenerateResultWarning):
        assert calculate_snr([128] * 25) == math.inf


def test_cnr():
    roi = [100, 102, 98, 100]
    background = [40, 50, 60, 50]
    expected = abs(np.mean(roi) - np.mean(background)) / np.std(background)
    assert math.isclose(calculate_cnr(roi, background), expected)
    assert calculate_cnr([], background) == 0

    with pytest.warns(DegenerateResultWarning):
        assert calculate_cnr(roi, [5, 5, 5]) == math.inf


def test_transmission():
    assert calculate_transmission(50, 200) == 25
    assert calculate_transmission(50, 0) == 0
    assert calculate_roi_transmission([50, 50], [100, 100]) == 50
    assert calculate_roi_transmission([], [100]) == 0
    assert calculate_min_transmission([30, 60, 90], 120) == 25
    assert calculate_min_transmission([30], 0) == 0


def test_attenuation():
    assert math.isclose(calculate_attenuation(100, 200, 2.0), math.log(2) / 2)
    assert calculate_attenuation(0, 200) == 0
    assert calculate_attenuation(100, 0) == 0

    with pytest.raises(ValidationError):
        calculate_attenuation(100, 200, 0)
    with pytest.raises(ValidationError):
        calculate_attenuation(100, 200, -1)


def test_all_metrics_optional_inputs():
    roi = [90, 100, 110]

    only_snr = calculate_all_metrics(roi)
    assert only_snr.snr > 0
    assert only_snr.cnr == 0 and only_snr.transmission == 0 and only_snr.attenuation == 0

    with_ref = calculate_all_metrics(roi, reference_intensity=200)
    assert math.isclose(with_ref.transmission, 50)
    assert math.isclose(with_ref.min_transmission, 45)
    assert math.isclose(with_ref.attenuation, math.log(2))

    # reference ROI 평균이 I0 대체
    with_roi_ref = calculate_all_metrics(roi, reference_data=[200, 200], thickness=2.0)
    assert math.isclose(with_roi_ref.transmission, 50)
    assert with_roi_ref.min_transmission == 0
    assert math.isclose(with_roi_ref.attenuation, math.log(2) / 2)

    empty = calculate_all_metrics([])
    assert empty.snr == 0 and empty.cnr == 0


def test_quality_index():
    assert calculate_quality_index([]).quality == 'N/A'

    # SNR = 100 / 2 = 50
    excellent = calculate_quality_index([98, 102])
    assert excellent.quality == 'Excellent' and excellent.score == 5

    # SNR = 10 / 5 = 2 → 경계는 하위 등급
    poor = calculate_quality_index([5, 15])
    assert poor.quality == 'Poor' and poor.score == 1

    # SNR = 1 / 1 = 1
    worst = calculate_quality_index([0, 2])
    assert worst.quality == 'Poor' and worst.score == 0


if __name__ == "__main__":
    test_snr()
    test_cnr()
    test_transmission()
    test_attenuation()
    test_all_metrics_optional_inputs()
    test_quality_index()
    print("✓ 모든 품질 지표 테스트 통과")
