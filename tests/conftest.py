"""pytest configuration and fixtures for pyqt-livequery tests."""

import os
import threading
import time

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtTest import QTest  # noqa: E402
from PyQt6.QtWidgets import QApplication  # noqa: E402

from pyqt_livequery.core import CancellationToken, LookupCancelled, LookupTask  # noqa: E402
from pyqt_livequery.protocols import LookupBackend, ResultItem  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


def _wait_until(predicate, timeout_ms=3000, message="condition"):
    deadline = time.monotonic() + timeout_ms / 1000
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError(f"Timed out after {timeout_ms}ms waiting for {message}")
        QTest.qWait(5)


@pytest.fixture
def wait_until(qapp):
    """Spin the Qt event loop until predicate() is true."""
    return _wait_until


def make_items(*labels, kind="chat"):
    return [
        ResultItem(id=str(i), label=label, score=float(len(labels) - i), kind=kind)
        for i, label in enumerate(labels)
    ]


class ScriptedBackend(LookupBackend):
    """
    Backend whose lookups block until the test releases them.

    Responses are scripted per query text; release order decides completion
    order. With honor_cancel=False the token is ignored entirely.
    """

    def __init__(self, name="scripted", honor_cancel=True, auto_release=False, is_synthetic=True):
        self.name = name
        self.is_synthetic = is_synthetic
        self.honor_cancel = honor_cancel
        self.auto_release = auto_release
        self.calls = []
        self._responses = {}
        self._gates = {}
        self._lock = threading.Lock()
        self._closed = threading.Event()

    def respond(self, query, items=None, error=None):
        self._responses[query] = error if error is not None else list(items or [])
        return self

    def release(self, query):
        self._gate(query).set()

    def release_all(self):
        self._closed.set()
        with self._lock:
            gates = list(self._gates.values())
        for gate in gates:
            gate.set()

    def lookup(self, query, token: CancellationToken):
        with self._lock:
            self.calls.append(query)
        gate = self._gate(query)
        if self.auto_release:
            gate.set()
        while not gate.wait(0.005):
            if self.honor_cancel and token.is_cancelled:
                raise LookupCancelled(query)
            if self._closed.is_set():
                raise LookupCancelled(query)

        outcome = self._responses.get(query, [])
        if isinstance(outcome, Exception):
            raise outcome
        return list(outcome)

    def starters(self, token: CancellationToken):
        # Scripted under the empty query, which never reaches lookup()
        return self.lookup("", token)

    def _gate(self, query):
        with self._lock:
            return self._gates.setdefault(query, threading.Event())


@pytest.fixture
def scripted_backend(qapp):
    """Factory for ScriptedBackends; every gate is opened at teardown."""
    created = []

    def factory(**kwargs):
        backend = ScriptedBackend(**kwargs)
        created.append(backend)
        return backend

    yield factory

    for backend in created:
        backend.release_all()
    for task in list(LookupTask._live):
        task.wait(2000)
    QTest.qWait(10)


@pytest.fixture
def items():
    """Factory for chat ResultItems with descending scores."""
    return make_items


@pytest.fixture
def make_coordinator(qapp):
    """Build QueryCoordinators that are disposed at teardown."""
    from pyqt_livequery.services import BackendSelector, QueryCoordinator

    created = []

    def factory(backend, config=None, **kwargs):
        selector = kwargs.pop("selector", None) or BackendSelector(backend)
        coordinator = QueryCoordinator(selector, config, **kwargs)
        created.append(coordinator)
        return coordinator

    yield factory

    for coordinator in created:
        coordinator.dispose()
