# app_config.py
# Python 3.x
# 상수, 명령행 인자, 로거 설정

import sys
import argparse
import logging
from pathlib import Path

HISTORY_KEY = 'calculatorHistory'
HISTORY_LIMIT = 50  # 보관할 최대 기록 수
PRECISION = 28  # Decimal 내부 정밀도(유효 자릿수)

DEFAULT_LOG_PATH = 'calculator.log'
DEFAULT_HISTORY_DIR = Path.home() / '.calculator'
STORAGE_CHOICES = ('settings', 'file', 'memory')


def setup_logger(log_path=DEFAULT_LOG_PATH, verbose=False):
    """콘솔과 파일(UTF-8)로 동시에 로그를 남기는 로거를 설정한다."""
    logger = logging.getLogger('calculator')
    if logger.handlers:
        return logger

    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 콘솔
    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(level)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    # 파일(UTF-8), 경로가 비어 있으면 생략
    if log_path:
        fh = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='계산 기록을 저장하는 사칙연산 계산기(PyQt5)'
    )
    parser.add_argument('--storage', choices=STORAGE_CHOICES, default='settings',
                        help='기록 저장소(기본값: settings = QSettings)')
    parser.add_argument('--history-dir', type=Path, default=DEFAULT_HISTORY_DIR,
                        help='--storage file 일 때 기록 파일을 둘 디렉터리(기본값: ~/.calculator)')
    parser.add_argument('--log', default=DEFAULT_LOG_PATH,
                        help='로그 파일 경로, 빈 문자열이면 파일 로그 없음(기본값: calculator.log)')
    parser.add_argument('--verbose', action='store_true',
                        help='디버그 로그 출력')
    return parser.parse_args(argv)
