"""로깅 설정 모듈"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Union

LevelType = Union[int, str]

_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def resolve_level(level: LevelType) -> int:
    """'DEBUG' 같은 레벨 이름 또는 int → int (알 수 없는 이름은 INFO)"""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return int(level)


def setup_logger(name: str = "radiograph",
                 level: LevelType = logging.INFO,
                 log_file: bool = False) -> logging.Logger:
    """
    로거 설정

    이미 핸들러가 있는 로거는 그대로 반환.

    Args:
        name: 로거 이름
        level: 로깅 레벨 (int 또는 레벨 이름)
        log_file: logs/ 아래 날짜별 파일 출력 여부
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(resolve_level(level))
    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)

        file_handler = logging.FileHandler(
            log_dir / f"{name}_{datetime.now():%Y%m%d}.log",
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_log_level(level: LevelType, name: str = "radiograph"):
    """설정 파일의 log_level 등으로 런타임 레벨 변경"""
    logging.getLogger(name).setLevel(resolve_level(level))


# 전역 로거
logger = setup_logger()
