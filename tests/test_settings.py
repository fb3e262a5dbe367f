"""설정 관리 / 로거 테스트"""

import json
import logging

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from radiograph.models import SettingsManager
from radiograph.utils import setup_logger, set_log_level, resolve_level


def test_defaults(tmp_path):
    settings = SettingsManager(tmp_path / 'missing' / 'settings.json')
    assert settings.get('gaussian_sigma') == 1.0
    assert settings.get('band_rows') == 32
    assert settings.get('unknown', 'fallback') == 'fallback'

    assert set(settings.get_filter_params()) == {
        'gaussian_sigma', 'median_kernel_size', 'mean_kernel_size',
        'variance_kernel_size', 'unsharp_amount', 'unsharp_sigma'}
    assert settings.get_runtime_params()['n_workers'] is None


def test_save_and_load(tmp_path):
    path = tmp_path / 'nested' / 'settings.json'
    settings = SettingsManager(path)
    settings.update({'gamma': 0.8, 'roi_channel': 'r'})
    assert settings.save()

    saved = json.loads(path.read_text(encoding='utf-8'))
    assert saved['gamma'] == 0.8

    reloaded = SettingsManager(path)
    assert reloaded.get('gamma') == 0.8
    assert reloaded.get_roi_params()['roi_channel'] == 'r'
    # 저장되지 않은 키는 기본값
    assert reloaded.get('window_width') == 256.0


def test_corrupt_file_keeps_defaults(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('{not json', encoding='utf-8')

    settings = SettingsManager(path)
    assert not settings.load()
    assert settings.get('gamma') == 1.0


def test_reset(tmp_path):
    settings = SettingsManager(tmp_path / 'settings.json')
    settings.set('bin_size', 4)
    settings.reset()
    assert settings.get('bin_size') == 2
    assert SettingsManager.DEFAULT_SETTINGS['bin_size'] == 2


def test_setup_logger_idempotent():
    first = setup_logger('radiograph.test', level='DEBUG')
    second = setup_logger('radiograph.test', level='WARNING')

    assert first is second
    assert len(first.handlers) == 1
    assert first.level == logging.DEBUG

    fallback = setup_logger('radiograph.test_level', level='NOT_A_LEVEL')
    assert fallback.level == logging.INFO


def test_set_log_level():
    assert resolve_level('warning') == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR

    set_log_level('ERROR', name='radiograph.test_runtime')
    assert logging.getLogger('radiograph.test_runtime').level == logging.ERROR


if __name__ == "__main__":
    import tempfile

    with tempfile.TemporaryDirectory() as tmp:
        test_defaults(Path(tmp))
    with tempfile.TemporaryDirectory() as tmp:
        test_save_and_load(Path(tmp))
    with tempfile.TemporaryDirectory() as tmp:
        test_corrupt_file_keeps_defaults(Path(tmp))
    with tempfile.TemporaryDirectory() as tmp:
        test_reset(Path(tmp))
    test_setup_logger_idempotent()
    test_set_log_level()
    print("✓ 모든 설정 테스트 통과")
