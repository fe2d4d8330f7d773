from __future__ import annotations

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
)

from taskmaster.domain.enums import Category, Priority
from taskmaster.services.task_service import TaskService


class TaskDialog(QDialog):
    """Collects a new task and hands it to the service; stays open on a blank title."""

    def __init__(self, service: TaskService, parent=None):
        super().__init__(parent)
        self.service = service
        self.setWindowTitle("New task")
        self.setObjectName("TaskDialog")
        self.resize(460, 420)

        title = QLabel("Create a new task")
        title.setProperty("class", "panel-title")

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("What needs to be done?")

        self.description_input = QTextEdit()
        self.description_input.setPlaceholderText("Add more details...")
        self.description_input.setMaximumHeight(110)

        self.priority_combo = QComboBox()
        for priority in Priority:
            self.priority_combo.addItem(priority.value, priority)

        self.category_combo = QComboBox()
        for category in Category:
            self.category_combo.addItem(category.value, category)

        self.due_toggle = QCheckBox("Due date")
        self.due_toggle.toggled.connect(self.on_due_toggled)
        self.due_input = QDateEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDisplayFormat("yyyy-MM-dd")
        self.due_input.setDate(QDate.currentDate())
        self.due_input.setEnabled(False)

        due_row = QHBoxLayout()
        due_row.addWidget(self.due_toggle)
        due_row.addWidget(self.due_input, 1)

        form = QFormLayout()
        form.addRow("Title", self.title_input)
        form.addRow("Description", self.description_input)
        form.addRow("Priority", self.priority_combo)
        form.addRow("Category", self.category_combo)
        form.addRow(due_row)

        cancel_button = QPushButton("Cancel")
        cancel_button.setProperty("variant", "secondary")
        cancel_button.clicked.connect(self.reject)

        create_button = QPushButton("Create task")
        create_button.setDefault(True)
        create_button.clicked.connect(self.save_task)

        buttons = QHBoxLayout()
        buttons.addStretch()
        buttons.addWidget(cancel_button)
        buttons.addWidget(create_button)

        layout = QVBoxLayout(self)
        layout.addWidget(title)
        layout.addLayout(form)
        layout.addStretch()
        layout.addLayout(buttons)

        self.title_input.setFocus()

    def on_due_toggled(self, checked: bool) -> None:
        self.due_input.setEnabled(checked)

    def save_task(self) -> None:
        data = {
            "title": self.title_input.text(),
            "description": self.description_input.toPlainText().strip(),
            "priority": self.priority_combo.currentData(),
            "category": self.category_combo.currentData(),
            "due_date": self.due_input.date().toPython() if self.due_toggle.isChecked() else None,
        }
        task = self.service.create_task(data)
        if task is None:
            QMessageBox.warning(self, "Title required", "Give the task a title.")
            self.title_input.setFocus()
            return
        self.accept()
