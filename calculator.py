# calculator.py
# Python 3.x
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

import logging
from dataclasses import dataclass, replace
from decimal import (
    Decimal,
    localcontext,
    InvalidOperation,
    Overflow,
)
from typing import Optional, Tuple

from app_config import PRECISION
from history_store import HistoryStore, MemoryBlobStore

logger = logging.getLogger('calculator.engine')

ADD = '+'
SUBTRACT = '−'
MULTIPLY = '×'
DIVIDE = '÷'
MODULO = '%'
OPERATORS = (ADD, SUBTRACT, MULTIPLY, DIVIDE, MODULO)

# 키보드/ASCII 기호 → 표시 기호
_OPERATOR_ALIASES = {
    '+': ADD,
    '-': SUBTRACT,
    '−': SUBTRACT,
    '*': MULTIPLY,
    'x': MULTIPLY,
    '×': MULTIPLY,
    '/': DIVIDE,
    '÷': DIVIDE,
    '%': MODULO,
}

DIGITS = '0123456789.'


class CalculatorError(Exception):
    """계산기 오류의 기본 클래스"""


class DivisionByZeroError(CalculatorError):
    def __init__(self, message: str = 'Cannot divide by zero!') -> None:
        super().__init__(message)


@dataclass(frozen=True)
class EntryState:
    """입력 상태: 현재 피연산자, 이전 피연산자, 대기 연산자, 새 입력 플래그"""

    current_operand: str = '0'
    previous_operand: str = ''
    pending_operator: Optional[str] = None
    reset_on_next_digit: bool = False


@dataclass(frozen=True)
class Calculation:
    expression: str
    result: str


def normalize_operator(op: str) -> Optional[str]:
    return _OPERATOR_ALIASES.get(op)


# 상태 전이 함수: (state, event) -> new state

def append_digit(state: EntryState, d: str) -> EntryState:
    if len(d) != 1 or d not in DIGITS:
        return state
    if state.reset_on_next_digit:
        state = replace(state, current_operand='0', reset_on_next_digit=False)

    current = state.current_operand
    if d == '.' and '.' in current:
        return state
    if current == '0' and d != '.':
        return replace(state, current_operand=d)
    return replace(state, current_operand=current + d)


def delete_last_char(state: EntryState) -> EntryState:
    current = state.current_operand
    if current in ('0', ''):
        return state
    rest = current[:-1]
    # 부호만 남으면 0으로
    if rest in ('', '-'):
        rest = '0'
    return replace(state, current_operand=rest)


def choose_operator(state: EntryState, op: str) -> Tuple[EntryState, Optional[Calculation]]:
    """연산자 선택. 대기 중인 식이 있으면 먼저 계산(왼쪽부터, 우선순위 없음)"""
    symbol = normalize_operator(op)
    if symbol is None or state.current_operand == '':
        return state, None

    calculation = None
    if state.previous_operand != '':
        # DivisionByZeroError는 그대로 전파되어 상태가 바뀌지 않는다
        state, calculation = compute(state)

    new_state = replace(
        state,
        pending_operator=symbol,
        previous_operand=state.current_operand,
        current_operand='',
    )
    return new_state, calculation


def compute(state: EntryState) -> Tuple[EntryState, Optional[Calculation]]:
    """대기 연산 수행. 계산할 수 없으면 상태를 그대로 반환한다."""
    op = state.pending_operator
    if op is None:
        return state, None
    prev = _to_decimal(state.previous_operand)
    current = _to_decimal(state.current_operand)
    if prev is None or current is None:
        return state, None

    if op in (DIVIDE, MODULO) and current == 0:
        raise DivisionByZeroError()

    try:
        result = _apply_op(prev, current, op)
    except (InvalidOperation, Overflow) as e:
        logger.warning('계산 실패: %s %s %s (%r)',
                       state.previous_operand, op, state.current_operand, e)
        return state, None

    expression = f'{state.previous_operand} {op} {state.current_operand}'
    result_text = _format_decimal(result)
    logger.debug('계산: %s = %s', expression, result_text)

    new_state = EntryState(
        current_operand=result_text,
        previous_operand='',
        pending_operator=None,
        reset_on_next_digit=True,
    )
    return new_state, Calculation(expression, format_number(result_text))


def clear(state: Optional[EntryState] = None) -> EntryState:
    return EntryState()


def use_result(state: EntryState, text: str) -> EntryState:
    """기록의 결과 문자열을 현재 피연산자로 불러온다."""
    raw = parse_formatted(text)
    if _to_decimal(raw) is None:
        return state
    return replace(state, current_operand=raw, reset_on_next_digit=True)


# 표시 문자열

def format_number(text: str) -> str:
    """정수부에만 천 단위 구분 기호를 넣고 소수부는 그대로 붙인다."""
    integer_part, dot, fraction = str(text).partition('.')
    integer = _to_decimal(integer_part)
    integer_display = '' if integer is None else format(integer, ',f')
    if dot:
        return f'{integer_display}.{fraction}'
    return integer_display


def parse_formatted(text: str) -> str:
    return str(text).replace(',', '').strip()


def format_for_display(state: EntryState) -> Tuple[str, str]:
    current = format_number(state.current_operand)
    if state.pending_operator is None:
        return '', current
    return f'{format_number(state.previous_operand)} {state.pending_operator}', current


# 내부 유틸

def _to_decimal(s: str) -> Optional[Decimal]:
    if s in ('', '.', '-', '-.'):
        return None
    try:
        value = Decimal(s)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _apply_op(a: Decimal, b: Decimal, op: str) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = PRECISION
        if op == ADD:
            return a + b
        if op == SUBTRACT:
            return a - b
        if op == MULTIPLY:
            return a * b
        if op == DIVIDE:
            return a / b
        # Decimal 나머지: 부호는 피제수를 따른다
        return a % b


def _format_decimal(x: Decimal) -> str:
    # 지수 표기 없이 정규화
    s = format(x.normalize(), 'f')
    if '.' in s:
        s = s.rstrip('0').rstrip('.')
    if s in ('', '-', '-0'):
        s = '0'
    return s


class Calculator:
    """연산 엔진: 입력 상태와 계산 기록을 함께 관리"""

    def __init__(self, history: Optional[HistoryStore] = None) -> None:
        self.history = history if history is not None else HistoryStore(MemoryBlobStore())
        self.state = EntryState()

    def append_digit(self, d: str) -> None:
        self.state = append_digit(self.state, d)

    def delete_last_char(self) -> None:
        self.state = delete_last_char(self.state)

    def choose_operator(self, op: str) -> None:
        state, calculation = choose_operator(self.state, op)
        self._record(calculation)
        self.state = state

    def compute(self) -> Optional[Calculation]:
        state, calculation = compute(self.state)
        self._record(calculation)
        self.state = state
        return calculation

    def clear(self) -> None:
        self.state = clear()

    def use_history_result(self, text: str) -> None:
        self.state = use_result(self.state, text)

    def clear_history(self) -> None:
        self.history.clear()

    def format_for_display(self) -> Tuple[str, str]:
        return format_for_display(self.state)

    def _record(self, calculation: Optional[Calculation]) -> None:
        if calculation is None:
            return
        logger.info('%s = %s', calculation.expression, calculation.result)
        self.history.append(calculation.expression, calculation.result)
