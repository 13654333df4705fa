"""
store/
------
Persistence for saved visualizations.

    from store import VisualizationStore
"""

from store.visualizations import VisualizationStore, validate_record, DEFAULT_LIST_LIMIT

__all__ = [
    "VisualizationStore",
    "validate_record",
    "DEFAULT_LIST_LIMIT",
]
