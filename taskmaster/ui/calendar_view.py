from __future__ import annotations

from datetime import date

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from taskmaster.domain.calendar import WEEKDAY_LABELS, MonthGrid, shift_month
from taskmaster.services.task_service import TaskService

MAX_TITLES_PER_DAY = 4


class DayCellWidget(QFrame):
    def __init__(self, grid: MonthGrid, day: int | None, parent=None):
        super().__init__(parent)
        self.setObjectName("DayCell")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setProperty("blank", day is None)
        self.setMinimumHeight(96)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)
        layout.setSpacing(2)
        if day is None:
            return

        number = QLabel(str(day))
        number.setProperty("class", "day-number")
        number.setProperty("today", grid.is_today(day))
        layout.addWidget(number, 0, Qt.AlignLeft)

        tasks = grid.tasks_on(day)
        for task in tasks[:MAX_TITLES_PER_DAY]:
            chip = QLabel(task.title)
            chip.setProperty("class", "day-task")
            chip.setProperty("done", task.completed)
            chip.setToolTip(task.title)
            layout.addWidget(chip)
        if len(tasks) > MAX_TITLES_PER_DAY:
            more = QLabel(f"+{len(tasks) - MAX_TITLES_PER_DAY} more")
            more.setProperty("class", "task-meta")
            layout.addWidget(more)
        layout.addStretch()


class CalendarView(QWidget):
    def __init__(self, service: TaskService, parent=None):
        super().__init__(parent)
        self.service = service
        today = date.today()
        self.year = today.year
        self.month = today.month

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        header = QHBoxLayout()
        self.title_label = QLabel("")
        self.title_label.setProperty("class", "panel-title")

        prev_button = QPushButton("<")
        prev_button.setProperty("variant", "secondary")
        prev_button.clicked.connect(lambda: self.shift(-1))
        next_button = QPushButton(">")
        next_button.setProperty("variant", "secondary")
        next_button.clicked.connect(lambda: self.shift(1))

        header.addWidget(self.title_label)
        header.addStretch()
        header.addWidget(prev_button)
        header.addWidget(next_button)

        self.grid_layout = QGridLayout()
        self.grid_layout.setSpacing(2)

        layout.addLayout(header)
        layout.addLayout(self.grid_layout)
        layout.addStretch()

        self.refresh()

    def shift(self, delta: int) -> None:
        self.year, self.month = shift_month(self.year, self.month, delta)
        self.refresh()

    def refresh(self) -> None:
        self._clear_grid()
        grid = self.service.get_month(self.year, self.month)
        self.title_label.setText(grid.title)

        for column, label in enumerate(WEEKDAY_LABELS):
            heading = QLabel(label)
            heading.setProperty("class", "weekday")
            heading.setAlignment(Qt.AlignCenter)
            self.grid_layout.addWidget(heading, 0, column)

        for index, day in enumerate(grid.cells()):
            row, column = divmod(index, 7)
            self.grid_layout.addWidget(DayCellWidget(grid, day), row + 1, column)

    def _clear_grid(self) -> None:
        while self.grid_layout.count():
            item = self.grid_layout.takeAt(0)
            widget = item.widget()
            if widget:
                widget.deleteLater()
