"""설정 저장/불러오기 관리"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

_logger = logging.getLogger(__name__)


class SettingsManager:
    """처리 파라미터 기본값 및 런타임 설정 관리"""

    DEFAULT_SETTINGS = {
        # 공간 필터
        'gaussian_sigma': 1.0,
        'median_kernel_size': 3,
        'mean_kernel_size': 3,
        'variance_kernel_size': 3,
        'unsharp_amount': 1.0,
        'unsharp_sigma': 1.0,

        # 톤 변환
        'gamma': 1.0,
        'gamma_constant': 1.0,
        'window_center': 128.0,
        'window_width': 256.0,
        'log_max_intensity': 255.0,

        # 기하 변환
        'bin_size': 2,

        # ROI / FFT
        'roi_channel': 'gray',
        'fft_channel': 'gray',
        'thickness': 1.0,

        # 런타임
        'band_rows': 32,
        'n_workers': None,
        'log_level': 'INFO',
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        if config_path is None:
            # 사용자 홈 디렉토리에 설정 저장
            config_dir = Path.home() / '.radiograph'
            self.config_path = config_dir / 'settings.json'
        else:
            self.config_path = Path(config_path)

        self.settings = self.DEFAULT_SETTINGS.copy()
        self.load()

    def load(self) -> bool:
        """설정 파일 로드"""
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    saved = json.load(f)
                self.settings.update(saved)
                _logger.info(f"설정 로드: {self.config_path}")
                return True
        except (OSError, ValueError) as e:
            _logger.warning(f"설정 로드 실패: {e}")
        return False

    def save(self) -> bool:
        """설정 파일 저장"""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2, ensure_ascii=False)
            _logger.info(f"설정 저장: {self.config_path}")
            return True
        except (OSError, TypeError) as e:
            _logger.warning(f"설정 저장 실패: {e}")
            return False

    def get(self, key: str, default=None):
        """설정값 가져오기"""
        return self.settings.get(key, default)

    def set(self, key: str, value):
        """설정값 설정"""
        self.settings[key] = value

    def update(self, params: Dict[str, Any]):
        """여러 설정값 업데이트"""
        self.settings.update(params)

    def reset(self):
        self.settings = self.DEFAULT_SETTINGS.copy()

    def get_filter_params(self) -> Dict[str, Any]:
        """공간 필터 파라미터만 반환"""
        keys = ['gaussian_sigma', 'median_kernel_size', 'mean_kernel_size',
                'variance_kernel_size', 'unsharp_amount', 'unsharp_sigma']
        return {k: self.settings.get(k) for k in keys}

    def get_tone_params(self) -> Dict[str, Any]:
        """톤 변환 파라미터만 반환"""
        keys = ['gamma', 'gamma_constant', 'window_center', 'window_width',
                'log_max_intensity']
        return {k: self.settings.get(k) for k in keys}

    def get_roi_params(self) -> Dict[str, Any]:
        keys = ['roi_channel', 'fft_channel', 'thickness']
        return {k: self.settings.get(k) for k in keys}

    def get_runtime_params(self) -> Dict[str, Any]:
        keys = ['band_rows', 'n_workers', 'log_level']
        return {k: self.settings.get(k) for k in keys}
