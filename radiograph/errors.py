"""래스터 코어 예외/경고 타입"""


class RadiographError(Exception):
    """radiograph 패키지 공통 예외"""


class ValidationError(RadiographError, ValueError):
    """연산 진입 시 파라미터 검증 실패"""


class OutOfBoundsError(RadiographError, IndexError):
    """ROI/좌표가 버퍼 범위와 전혀 겹치지 않음"""


class OperationCancelled(RadiographError):
    """cancel_event에 의해 중단된 연산"""


class DegenerateResultWarning(UserWarning):
    """
    정의된 대체값(sentinel)을 반환한 경우의 경고

    예: stdDev == 0 인 SNR → inf, 상수 채널 normalize → min_out.
    치명적 오류가 아니므로 예외 대신 warnings.warn 으로만 알린다.
    """
