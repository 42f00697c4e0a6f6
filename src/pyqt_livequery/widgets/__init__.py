"""
Widget implementations.

Embeddable widgets that render coordinator snapshots.
"""

from .live_query_box import LiveQueryBox, status_text

__all__ = [
    "LiveQueryBox",
    "status_text",
]
