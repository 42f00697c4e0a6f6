"""Swappable handle to the active lookup backend."""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_livequery.protocols.lookup_backend import LookupBackend
from pyqt_livequery.protocols.query_config import QueryConfig

logger = logging.getLogger(__name__)


class BackendSelector(QObject):
    """
    Holds exactly one active LookupBackend.

    Passed to each QueryCoordinator at construction; coordinators that should
    switch together share one selector. Coordinators resolve the backend once
    per dispatch, so swapping never migrates a lookup already in flight.

    Usage:
        selector = BackendSelector.from_config(
            config, synthetic=create_search_backend(), remote=RemoteBackend(...)
        )
        search = QueryCoordinator(selector, config)

        selector.switch_to_synthetic()  # Development toggle
    """

    backend_changed = pyqtSignal(object)

    def __init__(self,
                 backend: LookupBackend,
                 synthetic: Optional[LookupBackend] = None,
                 remote: Optional[LookupBackend] = None,
                 parent=None):
        super().__init__(parent)
        if backend is None:
            raise ValueError("BackendSelector requires an initial backend")
        self._current = backend
        self._synthetic = synthetic
        self._remote = remote

    @classmethod
    def from_config(cls, config: QueryConfig,
                    synthetic: LookupBackend,
                    remote: Optional[LookupBackend] = None,
                    parent=None) -> "BackendSelector":
        """Pick the initial backend from config.use_synthetic_backend."""
        use_synthetic = config.use_synthetic_backend or remote is None
        if not config.use_synthetic_backend and remote is None:
            logger.warning("No remote backend supplied, falling back to synthetic backend")
        backend = synthetic if use_synthetic else remote
        logger.info(f"Lookup backend initialized: {backend.name}")
        return cls(backend, synthetic=synthetic, remote=remote, parent=parent)

    def get_current(self) -> LookupBackend:
        return self._current

    def set_current(self, backend: LookupBackend) -> None:
        """Replace the active backend. Affects only future dispatches."""
        if backend is None:
            raise ValueError("Cannot select a None backend")
        if backend is self._current:
            return
        previous, self._current = self._current, backend
        logger.info(f"Switched lookup backend: {previous.name} -> {backend.name}")
        self.backend_changed.emit(backend)

    def is_using_synthetic(self) -> bool:
        return self._current.is_synthetic

    def switch_to_synthetic(self) -> None:
        if self._synthetic is None:
            raise RuntimeError("No synthetic backend registered with this selector")
        self.set_current(self._synthetic)

    def switch_to_remote(self) -> None:
        if self._remote is None:
            raise RuntimeError("No remote backend registered with this selector")
        self.set_current(self._remote)
