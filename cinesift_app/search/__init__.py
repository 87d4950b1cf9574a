"""
================================================================================
CineSift - Search Package
================================================================================
Aggregated search with deduplication and relevance ranking.

Components:
  - deduplicator.py - Merges records that describe the same title
  - relevance.py - Drops unrenderable records, ranks by query relevance
  - smart_search.py - Orchestrates parallel provider queries
================================================================================
"""

from .deduplicator import SearchDeduplicator, merge_records
from .relevance import filter_relevant, relevance_score
from .smart_search import SearchMode, SmartSearch

__all__ = [
    'SearchDeduplicator',
    'merge_records',
    'filter_relevant',
    'relevance_score',
    'SearchMode',
    'SmartSearch',
]
