# calculator_window.py
# Python 3.x, PyQt5
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

from typing import Optional

from PyQt5.QtCore import Qt, QSettings
from PyQt5.QtGui import QFont, QKeyEvent
from PyQt5.QtWidgets import (
    QApplication,
    QWidget,
    QGridLayout,
    QHBoxLayout,
    QVBoxLayout,
    QPushButton,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
)
import sys

from app_config import parse_args, setup_logger
from calculator import Calculator
from controller import CalculatorController, EMPTY_HISTORY_TEXT
from history_store import FileBlobStore, HistoryStore, MemoryBlobStore

ORGANIZATION = 'calculator'
APPLICATION = 'calculator'

# Qt 특수 키 → 키 이름
_SPECIAL_KEYS = {
    Qt.Key_Return: 'Enter',
    Qt.Key_Enter: 'Enter',
    Qt.Key_Backspace: 'Backspace',
    Qt.Key_Escape: 'Escape',
}


class SettingsBlobStore:
    """QSettings 기반 저장소(브라우저 localStorage에 해당)"""

    def __init__(self, settings: Optional[QSettings] = None) -> None:
        self.settings = settings or QSettings(ORGANIZATION, APPLICATION)

    def get(self, key: str) -> Optional[str]:
        value = self.settings.value(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self.settings.setValue(key, value)
        self.settings.sync()

    def remove(self, key: str) -> None:
        self.settings.remove(key)
        self.settings.sync()


class CalculatorWindow(QWidget):
    """PyQt5 UI: 버튼/키보드 → CalculatorController 연결"""

    def __init__(self, engine: Calculator) -> None:
        super().__init__()
        self.controller = CalculatorController(engine, on_error=self.show_error)
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        self.setWindowTitle('Calculator')
        root = QHBoxLayout()
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(12)
        self.setLayout(root)

        left = QVBoxLayout()
        left.setSpacing(8)
        root.addLayout(left, 3)

        self.preview = QLabel()
        self.preview.setAlignment(Qt.AlignRight)
        left.addWidget(self.preview)

        self.display = QLineEdit()
        self.display.setReadOnly(True)
        self.display.setAlignment(Qt.AlignRight)
        self.display.setFocusPolicy(Qt.NoFocus)
        font = QFont(self.display.font())
        font.setPointSize(28)
        self.display.setFont(font)
        left.addWidget(self.display)

        grid = QGridLayout()
        grid.setSpacing(6)
        left.addLayout(grid)

        buttons = [
            ['AC', 'DEL', '%', '÷'],
            ['7',  '8',   '9', '×'],
            ['4',  '5',   '6', '−'],
            ['1',  '2',   '3', '+'],
            ['0',  '.',   '=', ],
        ]

        for r, row in enumerate(buttons):
            for c, label in enumerate(row):
                btn = QPushButton(label)
                btn.setMinimumHeight(56)
                btn.setCursor(Qt.PointingHandCursor)
                btn.setFocusPolicy(Qt.NoFocus)
                # clicked는 checked(bool) 인자를 내보내므로 첫 인자를 흡수하도록 작성
                btn.clicked.connect(lambda checked=False, ch=label: self.on_button(ch))

                if label == '0':
                    grid.addWidget(btn, r, 0, 1, 2)
                elif r == 4:
                    grid.addWidget(btn, r, 2 + (0 if label == '.' else 1))
                else:
                    grid.addWidget(btn, r, c)

        # 기록 패널
        right = QVBoxLayout()
        right.setSpacing(8)
        root.addLayout(right, 2)

        right.addWidget(QLabel('History'))
        self.history_list = QListWidget()
        self.history_list.setFocusPolicy(Qt.NoFocus)
        self.history_list.itemClicked.connect(self.on_history_clicked)
        right.addWidget(self.history_list)

        clear_btn = QPushButton('Clear history')
        clear_btn.setFocusPolicy(Qt.NoFocus)
        clear_btn.clicked.connect(lambda checked=False: self.on_clear_history())
        right.addWidget(clear_btn)

        self.resize(640, 520)

    def on_button(self, ch: str) -> None:
        self.controller.press(ch)
        self.refresh()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = _SPECIAL_KEYS.get(event.key(), event.text())
        if not key:
            super().keyPressEvent(event)
            return
        self.controller.press_key(key)
        self.refresh()

    def on_history_clicked(self, item: QListWidgetItem) -> None:
        index = item.data(Qt.UserRole)
        if index is None:
            return
        self.controller.replay(index)
        self.refresh()

    def on_clear_history(self) -> None:
        self.controller.clear_history()
        self.refresh()

    def show_error(self, message: str) -> None:
        QMessageBox.warning(self, 'Calculator', message)

    def refresh(self) -> None:
        preview, current = self.controller.display()
        self.preview.setText(preview)
        self.display.setText(current)

        self.history_list.clear()
        rows = self.controller.history_rows()
        if not rows:
            self.history_list.addItem(QListWidgetItem(EMPTY_HISTORY_TEXT))
            return
        for index, (expression, result, time_text) in enumerate(rows):
            item = QListWidgetItem(f'{expression}\n{result}\n{time_text}')
            item.setData(Qt.UserRole, index)
            self.history_list.addItem(item)


def build_blob_store(args):
    if args.storage == 'memory':
        return MemoryBlobStore()
    if args.storage == 'file':
        return FileBlobStore(args.history_dir)
    return SettingsBlobStore()


def main(argv=None) -> None:
    args = parse_args(argv)
    logger = setup_logger(args.log, args.verbose)
    logger.info('[시작] 저장소=%s', args.storage)

    app = QApplication(sys.argv[:1])
    engine = Calculator(HistoryStore(build_blob_store(args)))
    w = CalculatorWindow(engine)
    w.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
