"""
pyqt-livequery: debounced, cancellable, race-free live queries for PyQt6.

Drives an asynchronous lookup (chat search, prompt autosuggest) from rapidly
changing input and guarantees the UI only ever shows results for the latest
text the user typed.

Architecture:
- Tier 1 (Core): Debounce timer, cancellation token, lookup worker thread, state types
- Tier 2 (Protocols): LookupBackend ABC, ResultItem, static configuration
- Tier 3 (Services): BackendSelector, synthetic/remote backends, QueryCoordinator,
  SelectionCursor, keyboard navigation
- Tier 4 (Widgets): LiveQueryBox

Key Features:
- Generation-tagged dispatches: late responses can never overwrite newer ones
- Backends swappable at runtime without touching coordinators
- Push-based snapshots for rendering, no polling
- Explicit selection reset policy (-1 for search, 0 for autosuggest)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
