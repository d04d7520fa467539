# controller.py
# Python 3.x
# 버튼 라벨/키 입력 → Calculator 엔진 호출, 엔진 상태 → 표시 문자열

import logging
from typing import Callable, List, Optional, Tuple

from calculator import Calculator, CalculatorError, DIGITS, OPERATORS

logger = logging.getLogger('calculator.ui')

EQUALS = '='
DELETE = 'DEL'
CLEAR = 'AC'

# 키 이름 → 버튼 라벨
KEY_TO_LABEL = {
    '+': '+',
    '-': '−',
    '*': '×',
    '/': '÷',
    '%': '%',
    'Enter': EQUALS,
    '=': EQUALS,
    'Backspace': DELETE,
    'Escape': CLEAR,
}

EMPTY_HISTORY_TEXT = 'No calculations yet'


class CalculatorController:
    """UI 이벤트를 엔진 호출로 옮기는 얇은 어댑터"""

    def __init__(self, engine: Calculator,
                 on_error: Optional[Callable[[str], None]] = None) -> None:
        self.engine = engine
        self.on_error = on_error

    def press(self, label: str) -> None:
        try:
            if label == CLEAR:
                self.engine.clear()
            elif label == DELETE:
                self.engine.delete_last_char()
            elif label == EQUALS:
                self.engine.compute()
            elif label in OPERATORS:
                self.engine.choose_operator(label)
            elif len(label) == 1 and label in DIGITS:
                self.engine.append_digit(label)
        except CalculatorError as e:
            logger.warning('[오류] %s', e)
            if self.on_error is not None:
                self.on_error(str(e))

    def press_key(self, key: str) -> None:
        if len(key) == 1 and key in DIGITS:
            self.press(key)
            return
        label = KEY_TO_LABEL.get(key)
        if label is not None:
            self.press(label)

    def replay(self, index: int) -> None:
        """기록 index번째(최신=0)의 결과를 현재 값으로 불러온다."""
        entries = self.engine.history.entries
        if 0 <= index < len(entries):
            self.engine.use_history_result(entries[index].result)

    def clear_history(self) -> None:
        self.engine.clear_history()

    def display(self) -> Tuple[str, str]:
        return self.engine.format_for_display()

    def history_rows(self) -> List[Tuple[str, str, str]]:
        return [(e.expression, f'= {e.result}', e.time_text)
                for e in self.engine.history.entries]
