from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from taskmaster.domain.entities import SubTask, Task
from taskmaster.domain.enums import Category, Priority
from taskmaster.domain.stats import subtask_progress

PRIORITY_COLORS = {
    Priority.LOW: "#10B981",
    Priority.MEDIUM: "#F59E0B",
    Priority.HIGH: "#F43F5E",
}

CATEGORY_COLORS = {
    Category.WORK: "#3B82F6",
    Category.PERSONAL: "#A855F7",
    Category.HEALTH: "#22C55E",
    Category.SHOPPING: "#F97316",
    Category.FINANCE: "#059669",
    Category.OTHER: "#6B7280",
}


def _badge(text: str, color: str) -> QLabel:
    label = QLabel(text)
    label.setProperty("class", "badge")
    label.setStyleSheet(f"background-color: {color};")
    label.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    return label


def _repolish(widget: QWidget) -> None:
    widget.style().unpolish(widget)
    widget.style().polish(widget)


class SubTaskItemWidget(QWidget):
    def __init__(self, task_id: str, sub_task: SubTask, on_toggle, parent=None):
        super().__init__(parent)
        self.task_id = task_id
        self.sub_task_id = sub_task.id
        self._on_toggle = on_toggle

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self.done_check = QCheckBox(sub_task.text)
        self.done_check.setChecked(sub_task.completed)
        self.done_check.setProperty("done", sub_task.completed)
        self.done_check.toggled.connect(self._handle_toggle)

        layout.addWidget(self.done_check, 1)

    def _handle_toggle(self, _checked: bool) -> None:
        self._on_toggle(self.task_id, self.sub_task_id)


class TaskCardWidget(QFrame):
    def __init__(
        self,
        task: Task,
        *,
        expanded: bool,
        breakdown_busy: bool,
        on_toggle,
        on_delete,
        on_breakdown,
        on_toggle_subtask,
        on_expand,
        parent=None,
    ):
        super().__init__(parent)
        self.task = task
        self._on_toggle = on_toggle
        self._on_delete = on_delete
        self._on_breakdown = on_breakdown
        self._on_expand = on_expand
        self._expanded = expanded

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setProperty("completed", task.completed)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(6)

        self.done_check = QCheckBox()
        self.done_check.setChecked(task.completed)
        self.done_check.toggled.connect(lambda _checked: self._on_toggle(task.id))

        title = QLabel(task.title)
        title.setProperty("class", "task-title")
        title.setProperty("done", task.completed)
        title.setWordWrap(True)
        title.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)

        header = QHBoxLayout()
        header.setSpacing(8)
        header.addWidget(self.done_check, 0, Qt.AlignTop)
        header.addWidget(title, 1)

        if not task.sub_tasks and not task.completed:
            self.breakdown_button = QPushButton("Thinking..." if breakdown_busy else "AI breakdown")
            self.breakdown_button.setProperty("variant", "ghost")
            self.breakdown_button.setToolTip("Split this task into steps")
            self.breakdown_button.setEnabled(not breakdown_busy)
            self.breakdown_button.clicked.connect(lambda: self._on_breakdown(task.id))
            header.addWidget(self.breakdown_button, 0, Qt.AlignTop)

        delete_button = QPushButton("Delete")
        delete_button.setProperty("variant", "ghost")
        delete_button.clicked.connect(lambda: self._on_delete(task.id))
        header.addWidget(delete_button, 0, Qt.AlignTop)

        layout.addLayout(header)

        if task.description:
            description = QLabel(task.description)
            description.setProperty("class", "task-meta")
            description.setWordWrap(True)
            layout.addWidget(description)

        meta = QHBoxLayout()
        meta.setSpacing(6)
        meta.addWidget(_badge(task.priority.value, PRIORITY_COLORS[task.priority]))
        meta.addWidget(_badge(task.category.value, CATEGORY_COLORS[task.category]))
        if task.due_date:
            due = QLabel(f"Due {task.due_date}")
            due.setProperty("class", "task-meta")
            meta.addWidget(due)
        meta.addStretch()

        if task.sub_tasks:
            done, total = subtask_progress(task)
            self.expand_button = QPushButton(self._expand_label(done, total))
            self.expand_button.setProperty("variant", "ghost")
            self.expand_button.clicked.connect(self._toggle_expanded)
            meta.addWidget(self.expand_button)
        layout.addLayout(meta)

        self.sub_tasks_frame = QWidget()
        sub_layout = QVBoxLayout(self.sub_tasks_frame)
        sub_layout.setContentsMargins(28, 4, 0, 0)
        sub_layout.setSpacing(4)
        for sub_task in task.sub_tasks:
            sub_layout.addWidget(SubTaskItemWidget(task.id, sub_task, on_toggle_subtask))
        self.sub_tasks_frame.setVisible(bool(task.sub_tasks) and expanded)
        layout.addWidget(self.sub_tasks_frame)

        _repolish(self)

    def _expand_label(self, done: int, total: int) -> str:
        arrow = "▲" if self._expanded else "▼"
        return f"Sub-tasks {done}/{total} {arrow}"

    def _toggle_expanded(self) -> None:
        self._expanded = not self._expanded
        self.sub_tasks_frame.setVisible(self._expanded)
        done, total = subtask_progress(self.task)
        self.expand_button.setText(self._expand_label(done, total))
        self._on_expand(self.task.id, self._expanded)


class StatCardWidget(QFrame):
    def __init__(self, caption: str, parent=None):
        super().__init__(parent)
        self.setObjectName("StatCard")
        self.setAttribute(Qt.WA_StyledBackground, True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 14, 16, 14)
        layout.setSpacing(4)

        self.value_label = QLabel("0")
        self.value_label.setProperty("class", "stat-value")
        caption_label = QLabel(caption)
        caption_label.setProperty("class", "stat-caption")

        layout.addWidget(self.value_label)
        layout.addWidget(caption_label)

    def set_value(self, value: str) -> None:
        self.value_label.setText(value)
