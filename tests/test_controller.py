import pytest

from calculator import Calculator
from controller import CalculatorController
from history_store import HistoryStore, MemoryBlobStore


@pytest.fixture
def errors():
    return []


@pytest.fixture
def controller(errors):
    engine = Calculator(HistoryStore(MemoryBlobStore()))
    return CalculatorController(engine, on_error=errors.append)


def type_keys(controller, *keys):
    for k in keys:
        controller.press_key(k)


def test_buttons(controller):
    for label in ['1', '2', '+', '3', '=']:
        controller.press(label)
    assert controller.display() == ('', '15')


def test_display_while_operator_pending(controller):
    type_keys(controller, '1', '2', '3', '4', '*', '5')
    assert controller.display() == ('1,234 ×', '5')


@pytest.mark.parametrize('keys, expected', [
    (['9', '-', '4', 'Enter'], '5'),
    (['9', '*', '4', '='], '36'),
    (['9', '/', '4', 'Enter'], '2.25'),
    (['9', '%', '4', 'Enter'], '1'),
    (['9', '8', 'Backspace'], '9'),
    (['9', '+', '8', 'Escape'], '0'),
])
def test_keyboard(controller, keys, expected):
    type_keys(controller, *keys)
    assert controller.display()[1] == expected


def test_unknown_keys_are_ignored(controller):
    type_keys(controller, '4', 'a', 'Shift', '', '^', 'F1')
    assert controller.display() == ('', '4')


def test_division_by_zero_reports_error(controller, errors):
    type_keys(controller, '7', '/', '0', 'Enter')
    assert errors == ['Cannot divide by zero!']
    assert controller.display() == ('7 ÷', '0')
    assert controller.history_rows() == []


def test_history_rows(controller):
    type_keys(controller, '5', '+', '3', 'Enter')
    type_keys(controller, '1', '0', '0', '0', '*', '2', 'Enter')
    rows = controller.history_rows()
    assert [r[:2] for r in rows] == [('1000 × 2', '= 2,000'), ('5 + 3', '= 8')]
    assert len(rows[0][2]) == len('12:34:56')


def test_replay_history_result(controller):
    type_keys(controller, '1', '0', '0', '0', '*', '2', 'Enter')
    controller.press('AC')
    type_keys(controller, '1', '+')
    controller.replay(0)
    assert controller.display() == ('1 +', '2,000')
    type_keys(controller, 'Enter')
    assert controller.display()[1] == '2,001'


def test_replay_out_of_range_is_ignored(controller):
    controller.replay(3)
    assert controller.display() == ('', '0')


def test_clear_history(controller):
    type_keys(controller, '5', '+', '3', 'Enter')
    controller.clear_history()
    assert controller.history_rows() == []
