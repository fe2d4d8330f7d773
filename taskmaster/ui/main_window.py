from __future__ import annotations

import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from taskmaster.domain.entities import Quote
from taskmaster.domain.enums import ALL, Category, Priority
from taskmaster.domain.filters import TaskFilters
from taskmaster.domain.stats import TaskStats
from taskmaster.services.task_service import TaskService

from .calendar_view import CalendarView
from .dialogs import TaskDialog
from .widgets import StatCardWidget, TaskCardWidget
from .workers import AsyncRunner

logger = logging.getLogger(__name__)

VIEWS = [
    ("Dashboard", "overview"),
    ("Calendar", "calendar"),
    ("AI insights", "insights"),
]

BREAKDOWN = "breakdown"
QUOTE = "quote"


class MainWindow(QWidget):
    tasks_changed = Signal()

    def __init__(self, service: TaskService, runner: AsyncRunner):
        super().__init__()
        self.setWindowTitle("Taskmaster Pro")
        self.resize(1180, 760)

        self.service = service
        self.runner = runner
        self.runner.finished.connect(self.on_background_finished)

        self.expanded_ids: set[str] = set()
        self.pending_breakdowns = 0
        self.nav_buttons: dict[str, QPushButton] = {}

        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self.sidebar = self._build_sidebar()
        self.stack = QStackedWidget()
        self.overview = self._build_overview()
        self.calendar_view = CalendarView(self.service)
        self.insights = self._build_insights()
        self.stack.addWidget(self.overview)
        calendar_page, _ = self._wrap_page("Calendar", "Manage your schedule by date.", self.calendar_view)
        self.stack.addWidget(calendar_page)
        self.stack.addWidget(self.insights)

        main_layout.addWidget(self.sidebar)
        main_layout.addWidget(self.stack, 1)

        self.thinking_overlay = QLabel("Planning your steps...\nBreaking the goal into actionable sub-tasks.", self)
        self.thinking_overlay.setObjectName("ThinkingOverlay")
        self.thinking_overlay.setAlignment(Qt.AlignCenter)
        self.thinking_overlay.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self.thinking_overlay.hide()

        self.tasks_changed.connect(self.refresh)
        self._unsubscribe = self.service.store.subscribe(self.tasks_changed.emit)

        self.switch_view("overview")
        self.refresh()
        self.runner.submit(QUOTE, self.service.daily_quote())

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)

    def _build_sidebar(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("Sidebar")
        frame.setFixedWidth(250)
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(16, 20, 16, 16)
        layout.setSpacing(8)

        brand = QLabel("Taskmaster Pro")
        brand.setProperty("class", "brand")
        layout.addWidget(brand)
        layout.addSpacing(16)

        for label, key in VIEWS:
            button = QPushButton(label)
            button.setProperty("variant", "nav")
            button.setCheckable(True)
            button.clicked.connect(lambda _checked=False, view=key: self.switch_view(view))
            layout.addWidget(button)
            self.nav_buttons[key] = button

        layout.addStretch()

        quote_card = QFrame()
        quote_card.setObjectName("QuoteCard")
        quote_layout = QVBoxLayout(quote_card)
        quote_layout.setContentsMargins(12, 12, 12, 12)
        quote_title = QLabel("Daily quote")
        quote_title.setProperty("class", "section-title")
        self.quote_label = QLabel('"Fetching inspiration..."')
        self.quote_label.setWordWrap(True)
        self.quote_label.setProperty("class", "quote")
        self.author_label = QLabel("- AI")
        self.author_label.setProperty("class", "task-meta")
        quote_layout.addWidget(quote_title)
        quote_layout.addWidget(self.quote_label)
        quote_layout.addWidget(self.author_label)
        layout.addWidget(quote_card)

        return frame

    def _wrap_page(self, title: str, subtitle: str, body: QWidget) -> tuple[QWidget, QLabel]:
        page = QFrame()
        page.setObjectName("Page")
        layout = QVBoxLayout(page)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(12)
        header_title = QLabel(title)
        header_title.setProperty("class", "page-title")
        header_subtitle = QLabel(subtitle)
        header_subtitle.setProperty("class", "task-meta")
        layout.addWidget(header_title)
        layout.addWidget(header_subtitle)
        layout.addWidget(body, 1)
        return page, header_subtitle

    def _build_overview(self) -> QWidget:
        body = QWidget()
        layout = QVBoxLayout(body)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        action_bar = QFrame()
        action_bar.setObjectName("ActionBar")
        action_layout = QHBoxLayout(action_bar)
        action_layout.setContentsMargins(12, 10, 12, 10)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search tasks...")
        self.search_input.setMinimumWidth(220)
        self.search_input.textChanged.connect(self.refresh_tasks)

        self.category_filter = QComboBox()
        self.category_filter.addItem("All categories", ALL)
        for category in Category:
            self.category_filter.addItem(category.value, category.value)
        self.category_filter.currentIndexChanged.connect(self.refresh_tasks)

        self.priority_filter = QComboBox()
        self.priority_filter.addItem("All priorities", ALL)
        for priority in Priority:
            self.priority_filter.addItem(priority.value, priority.value)
        self.priority_filter.currentIndexChanged.connect(self.refresh_tasks)

        add_button = QPushButton("New task")
        add_button.clicked.connect(self.new_task)

        action_layout.addWidget(self.search_input, 1)
        action_layout.addWidget(self.category_filter)
        action_layout.addWidget(self.priority_filter)
        action_layout.addWidget(add_button)

        stats_row = QHBoxLayout()
        self.total_card = StatCardWidget("Total")
        self.done_card = StatCardWidget("Completed")
        self.rate_card = StatCardWidget("Completion rate")
        self.priority_label = QLabel("")
        self.priority_label.setProperty("class", "stats-badge")
        stats_row.addWidget(self.total_card)
        stats_row.addWidget(self.done_card)
        stats_row.addWidget(self.rate_card)
        stats_row.addWidget(self.priority_label, 1)

        self.task_scroll = QScrollArea()
        self.task_scroll.setWidgetResizable(True)
        self.task_scroll.setFrameShape(QFrame.NoFrame)
        self.task_scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.task_container = QWidget()
        self.task_layout = QVBoxLayout(self.task_container)
        self.task_layout.setContentsMargins(0, 0, 0, 0)
        self.task_layout.setSpacing(10)
        self.task_layout.addStretch()
        self.task_scroll.setWidget(self.task_container)

        self.empty_state = QFrame()
        self.empty_state.setObjectName("EmptyState")
        empty_layout = QVBoxLayout(self.empty_state)
        empty_label = QLabel("No tasks match the current filters.")
        empty_label.setAlignment(Qt.AlignCenter)
        self.clear_filters_button = QPushButton("Clear all filters")
        self.clear_filters_button.setProperty("variant", "ghost")
        self.clear_filters_button.clicked.connect(self.clear_filters)
        empty_layout.addWidget(empty_label)
        empty_layout.addWidget(self.clear_filters_button, 0, Qt.AlignCenter)

        layout.addWidget(action_bar)
        layout.addLayout(stats_row)
        layout.addWidget(self.empty_state)
        layout.addWidget(self.task_scroll, 1)

        page, self.pending_label = self._wrap_page("Today's focus", "", body)
        return page

    def _build_insights(self) -> QWidget:
        body = QWidget()
        layout = QVBoxLayout(body)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(16)

        cards = QHBoxLayout()
        self.insight_done_card = StatCardWidget("Tasks completed")
        self.insight_rate_card = StatCardWidget("Completion rate")
        self.insight_urgent_card = StatCardWidget("Urgent items")
        cards.addWidget(self.insight_done_card)
        cards.addWidget(self.insight_rate_card)
        cards.addWidget(self.insight_urgent_card)

        suggestions_title = QLabel("Productivity suggestions")
        suggestions_title.setProperty("class", "section-title")
        self.suggestion_pending = QLabel("")
        self.suggestion_pending.setWordWrap(True)
        self.suggestion_pending.setProperty("class", "suggestion")
        self.suggestion_breakdown = QLabel(
            "Use the AI breakdown to turn a large goal into smaller, actionable steps."
        )
        self.suggestion_breakdown.setWordWrap(True)
        self.suggestion_breakdown.setProperty("class", "suggestion")

        layout.addLayout(cards)
        layout.addWidget(suggestions_title)
        layout.addWidget(self.suggestion_pending)
        layout.addWidget(self.suggestion_breakdown)
        layout.addStretch()

        page, _ = self._wrap_page("AI insights", "Efficiency advice based on your task history.", body)
        return page

    def switch_view(self, view: str) -> None:
        index = [key for _label, key in VIEWS].index(view)
        self.stack.setCurrentIndex(index)
        for key, button in self.nav_buttons.items():
            button.setChecked(key == view)
        if view == "calendar":
            self.calendar_view.refresh()

    def current_filters(self) -> TaskFilters:
        return TaskFilters(
            category=self.category_filter.currentData() or ALL,
            priority=self.priority_filter.currentData() or ALL,
            search=self.search_input.text().strip(),
        )

    def refresh(self) -> None:
        stats = self.service.get_stats()
        self.refresh_tasks()
        self._render_stats(stats)
        if self.stack.currentIndex() == 1:
            self.calendar_view.refresh()
        self._sync_thinking()

    def refresh_tasks(self) -> None:
        filters = self.current_filters()
        tasks = self.service.list_tasks(filters)
        self._clear_tasks()
        for task in tasks:
            card = TaskCardWidget(
                task,
                expanded=task.id in self.expanded_ids,
                breakdown_busy=self.pending_breakdowns > 0,
                on_toggle=self.on_toggle,
                on_delete=self.on_delete,
                on_breakdown=self.on_breakdown,
                on_toggle_subtask=self.on_toggle_subtask,
                on_expand=self.on_expand,
            )
            self.task_layout.insertWidget(self.task_layout.count() - 1, card)
        self.empty_state.setVisible(not tasks)
        self.clear_filters_button.setVisible(not filters.is_default)

    def _render_stats(self, stats: TaskStats) -> None:
        self.pending_label.setText(f"{stats.pending} tasks still waiting to be done today.")
        self.total_card.set_value(str(stats.total))
        self.done_card.set_value(str(stats.completed))
        self.rate_card.set_value(f"{stats.completion_rate}%")
        self.priority_label.setText(
            " • ".join(f"{priority.value}: {count}" for priority, count in stats.priority_breakdown.items())
        )

        self.insight_done_card.set_value(str(stats.completed))
        self.insight_rate_card.set_value(f"{stats.completion_rate}%")
        self.insight_urgent_card.set_value(str(stats.urgent))
        self.suggestion_pending.setText(
            f"You have {stats.pending} unfinished tasks. "
            "Tackle high-priority items during your high-energy morning hours."
        )

    def _clear_tasks(self) -> None:
        while self.task_layout.count() > 1:
            item = self.task_layout.takeAt(0)
            widget = item.widget()
            if widget:
                widget.deleteLater()

    def clear_filters(self) -> None:
        self.search_input.blockSignals(True)
        self.category_filter.blockSignals(True)
        self.priority_filter.blockSignals(True)
        self.search_input.clear()
        self.category_filter.setCurrentIndex(0)
        self.priority_filter.setCurrentIndex(0)
        self.search_input.blockSignals(False)
        self.category_filter.blockSignals(False)
        self.priority_filter.blockSignals(False)
        self.refresh_tasks()

    def new_task(self) -> None:
        dialog = TaskDialog(self.service, self)
        dialog.exec()

    def on_toggle(self, task_id: str) -> None:
        self.service.toggle_complete(task_id)

    def on_delete(self, task_id: str) -> None:
        confirm = QMessageBox.question(
            self,
            "Confirm",
            "Delete this task?",
        )
        if confirm != QMessageBox.Yes:
            return
        self.expanded_ids.discard(task_id)
        self.service.delete_task(task_id)

    def on_toggle_subtask(self, task_id: str, subtask_id: str) -> None:
        self.service.toggle_subtask(task_id, subtask_id)

    def on_expand(self, task_id: str, expanded: bool) -> None:
        if expanded:
            self.expanded_ids.add(task_id)
        else:
            self.expanded_ids.discard(task_id)

    def on_breakdown(self, task_id: str) -> None:
        logger.info("Breakdown requested for task %s", task_id)
        self.pending_breakdowns += 1
        self.runner.submit(f"{BREAKDOWN}:{task_id}", self.service.request_breakdown(task_id))
        self._sync_thinking()
        self.refresh_tasks()

    def on_background_finished(self, tag: str, result: object) -> None:
        if tag == QUOTE:
            quote = result if isinstance(result, Quote) else self.service.quote_call.value
            if quote is not None:
                self.quote_label.setText(f'"{quote.quote}"')
                self.author_label.setText(f"- {quote.author}")
            return
        kind, _, task_id = tag.partition(":")
        if kind == BREAKDOWN:
            self.pending_breakdowns = max(self.pending_breakdowns - 1, 0)
            if result:
                self.expanded_ids.add(task_id)
            self.refresh()

    def _sync_thinking(self) -> None:
        visible = self.pending_breakdowns > 0 or self.service.thinking
        if visible:
            self.thinking_overlay.setGeometry(self.rect())
            self.thinking_overlay.raise_()
        self.thinking_overlay.setVisible(visible)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.thinking_overlay.setGeometry(self.rect())

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._unsubscribe()
        self.runner.shutdown()
        super().closeEvent(event)
