"""
Live Query Box Widget

Line edit with a results list and a status line, driven by a QueryCoordinator.
Embeddable as a chat-history search box or as a prompt autosuggest box.
"""

import logging

from PyQt6.QtCore import QEvent, QObject, Qt, pyqtSignal
from PyQt6.QtWidgets import QLabel, QLineEdit, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from pyqt_livequery.core.highlight import highlight_html
from pyqt_livequery.core.query_state import (
    CoordinatorSnapshot,
    Debouncing,
    Failed,
    Loading,
    Settled,
    TooShort,
)
from pyqt_livequery.services.key_navigation import KeyboardNavigator, NavigationKey, navigation_key_for
from pyqt_livequery.services.query_coordinator import QueryCoordinator

logger = logging.getLogger(__name__)

ITEM_ROLE = Qt.ItemDataRole.UserRole


def status_text(snapshot: CoordinatorSnapshot, loading_text: str = "Searching...") -> str:
    """Status line for a snapshot; empty when the results list speaks for itself."""
    state = snapshot.state
    if isinstance(state, TooShort):
        return f"Type at least {state.min_chars} characters"
    if isinstance(state, (Debouncing, Loading)):
        return loading_text
    if isinstance(state, Failed):
        return f"{state.kind.user_message}. Keep typing to try again."
    if isinstance(state, Settled) and state.result_set.is_empty:
        return f"No results for \"{state.query.text.strip()}\""
    return ""


class LiveQueryBox(QWidget):
    """
    Search-as-you-type box.

    Renders coordinator snapshots (push-based) and forwards navigation keys
    from the line edit. The coordinator is owned by the caller; closing the
    widget disposes it. With ``show_starters`` configured, starter suggestions
    fill the list while the line edit is empty.

    Signals:
        item_accepted(ResultItem): Enter on a highlighted result or a click
    """

    item_accepted = pyqtSignal(object)

    def __init__(self, coordinator: QueryCoordinator, placeholder: str = "Search chats...",
                 fill_on_accept: bool = False, loading_text: str = "Searching...",
                 parent=None):
        super().__init__(parent)
        self.coordinator = coordinator
        self._fill_on_accept = fill_on_accept
        self._loading_text = loading_text
        self._navigator = KeyboardNavigator(coordinator, on_accept=self._on_item_accepted)
        self._rendering = False

        self._setup_ui(placeholder)
        self._setup_connections()
        self.render(coordinator.snapshot())
        if coordinator.config.show_starters:
            coordinator.request_starters()

    def _setup_ui(self, placeholder: str):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.line_edit = QLineEdit()
        self.line_edit.setPlaceholderText(placeholder)
        self.line_edit.setClearButtonEnabled(True)
        layout.addWidget(self.line_edit)

        self.status_label = QLabel("")
        self.status_label.setVisible(False)
        layout.addWidget(self.status_label)

        self.results_list = QListWidget()
        self.results_list.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.results_list.setVisible(False)
        layout.addWidget(self.results_list, stretch=1)

    def _setup_connections(self):
        self.line_edit.textChanged.connect(self.coordinator.on_input)
        self.line_edit.installEventFilter(self)
        self.coordinator.snapshot_changed.connect(self.render)
        self.results_list.currentRowChanged.connect(self._on_row_changed)
        self.results_list.itemClicked.connect(self._on_item_clicked)

    # ---------- Rendering ----------
    def render(self, snapshot: CoordinatorSnapshot):
        """Redraw from a coordinator snapshot."""
        self._rendering = True
        try:
            message = status_text(snapshot, self._loading_text)
            self.status_label.setText(message)
            self.status_label.setVisible(bool(message))

            items = snapshot.items
            if items:
                if self._shown_items() != items:
                    query_text = snapshot.state.query.text if isinstance(snapshot.state, Settled) else ""
                    self._fill_results(items, query_text)
                self.results_list.setCurrentRow(snapshot.selected_index)
                self.results_list.setVisible(True)
            else:
                self.results_list.clear()
                self.results_list.setVisible(False)
        finally:
            self._rendering = False

    def _fill_results(self, items, query_text: str):
        self.results_list.clear()
        for item in items:
            row = QListWidgetItem()
            row.setData(ITEM_ROLE, item)
            row.setToolTip(item.label)
            self.results_list.addItem(row)

            label = QLabel(highlight_html(item.label, query_text))
            label.setTextFormat(Qt.TextFormat.RichText)
            label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
            row.setSizeHint(label.sizeHint())
            self.results_list.setItemWidget(row, label)

    def _shown_items(self):
        return tuple(
            self.results_list.item(i).data(ITEM_ROLE)
            for i in range(self.results_list.count())
        )

    # ---------- Input ----------
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self.line_edit and event.type() == QEvent.Type.KeyPress:
            key = navigation_key_for(event.key())
            if key is NavigationKey.ESCAPE:
                self._navigator.handle(key)
                self._set_text_silently("")
                return True
            if key is not None and self._navigator.handle(key):
                return True
        return super().eventFilter(obj, event)

    def _on_row_changed(self, row: int):
        if not self._rendering and row >= 0:
            self.coordinator.cursor.select(row)

    def _on_item_clicked(self, row: QListWidgetItem):
        self.coordinator.cursor.select(self.results_list.row(row))
        self._navigator.accept()

    def _on_item_accepted(self, item):
        self._set_text_silently(item.label if self._fill_on_accept else "")
        self.item_accepted.emit(item)

    def _set_text_silently(self, text: str):
        self.line_edit.blockSignals(True)
        try:
            self.line_edit.setText(text)
        finally:
            self.line_edit.blockSignals(False)

    def closeEvent(self, event):
        self.coordinator.dispose()
        super().closeEvent(event)
