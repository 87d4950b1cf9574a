"""
================================================================================
CineSift - Search Result Deduplicator
================================================================================
Collapses records from different providers into one record per real title.

Problem:
  User searches "铃芽之旅" -> TMDb, Maoyan and Douban each return the film,
  each with different ids and different gaps in their data.

Solution:
  1. Score every record by data completeness
  2. Stable-sort most complete first
  3. Walk the list; fold each record into the first accepted record it
     matches, otherwise accept it as a new title
  4. The accepted (more complete) record keeps provenance and is enriched
     with whatever it lacks from the records folded into it
================================================================================
"""

from typing import Dict, List, Optional, Set
import logging

from ..metadata.matcher import completeness_score, normalize_title, same_media
from ..metadata.models import MediaRecord

logger = logging.getLogger(__name__)


RATING_FIELDS = ('rating_imdb', 'rating_douban', 'rating_bangumi', 'rating_maoyan')

# Fields filled from the secondary record when the primary has nothing usable
FILLABLE_FIELDS = (
    'poster_url',
    'summary',
    'directors',
    'actors',
    'genres',
    'duration',
    'title_original',
)


def merge_records(primary: MediaRecord, secondary: MediaRecord) -> MediaRecord:
    """
    Merge secondary into a copy of primary.

    Strategy:
      - match_count is summed
      - Each source rating is taken from secondary only where primary has 0
      - Poster, summary, credits, genres, duration and original title are
        taken from secondary only where primary's is empty
      - Everything else (provenance included) stays with primary

    Args:
        primary: Accepted record (higher completeness)
        secondary: Record being folded in

    Returns:
        New merged MediaRecord
    """
    merged = primary.copy()
    merged.match_count = primary.match_count + secondary.match_count

    for name in RATING_FIELDS:
        if getattr(merged, name) == 0 and getattr(secondary, name) > 0:
            setattr(merged, name, getattr(secondary, name))

    for name in FILLABLE_FIELDS:
        if not getattr(merged, name) and getattr(secondary, name):
            value = getattr(secondary, name)
            setattr(merged, name, list(value) if isinstance(value, list) else value)

    return merged


class SearchDeduplicator:
    """
    Deduplicates provider output using the same-media predicate.

    Algorithm:
      1. Sort by completeness score, descending, stable on ties
      2. Linear scan of accepted records for a match
      3. Merge into the match or accept as new

    The pairwise scan is O(n^2) in the number of records. Past
    bucket_threshold records, candidates are narrowed to accepted records
    sharing a title character first, with identical results.
    """

    def __init__(self, bucket_threshold: int = 64):
        """
        Initialize deduplicator.

        Args:
            bucket_threshold: Record count above which title bucketing kicks in
        """
        self.bucket_threshold = bucket_threshold

    def deduplicate(self, results: List[MediaRecord]) -> List[MediaRecord]:
        """
        Deduplicate records into one entry per title.

        Args:
            results: Concatenated provider output, in provider priority order

        Returns:
            Deduplicated records, most complete first
        """
        if not results:
            return []

        ordered = sorted(results, key=completeness_score, reverse=True)

        if len(ordered) > self.bucket_threshold:
            unique = self._deduplicate_bucketed(ordered)
        else:
            unique = self._deduplicate_linear(ordered)

        logger.info(f"Deduplicated {len(results)} results into {len(unique)} unique titles")
        return unique

    def _deduplicate_linear(self, ordered: List[MediaRecord]) -> List[MediaRecord]:
        unique: List[MediaRecord] = []
        for record in ordered:
            index = self._find_match(unique, record, range(len(unique)))
            if index is None:
                unique.append(record)
            else:
                logger.debug(
                    f"Merging {record.source_type.value}:{record.source_id} into "
                    f"{unique[index].source_type.value}:{unique[index].source_id}"
                )
                unique[index] = merge_records(unique[index], record)
        return unique

    def _deduplicate_bucketed(self, ordered: List[MediaRecord]) -> List[MediaRecord]:
        """
        Same result as the linear scan, with fewer same_media calls.

        Similar titles always share a character: equal normalized forms do,
        and so does a containment of two or more characters. Accepted records
        are indexed under every character of their normalized titles, so the
        candidate set always holds every record the linear scan could match.
        Candidates are visited in acceptance order, so the first match is the
        same one.
        """
        unique: List[MediaRecord] = []
        buckets: Dict[str, Set[int]] = {}

        for record in ordered:
            keys = self._bucket_keys(record)
            if not keys:
                # No usable title: cannot be similar to anything
                unique.append(record)
                continue

            candidates = sorted({i for key in keys for i in buckets.get(key, ())})
            index = self._find_match(unique, record, candidates)
            if index is None:
                unique.append(record)
                index = len(unique) - 1
            else:
                unique[index] = merge_records(unique[index], record)

            # A merge can fill the original title, so re-index the stored record
            for key in self._bucket_keys(unique[index]):
                buckets.setdefault(key, set()).add(index)

        return unique

    @staticmethod
    def _bucket_keys(record: MediaRecord) -> Set[str]:
        keys: Set[str] = set()
        for title in (record.title_localized, record.title_original):
            keys.update(normalize_title(title))
        return keys

    @staticmethod
    def _find_match(unique: List[MediaRecord], record: MediaRecord, candidates) -> Optional[int]:
        for index in candidates:
            if same_media(unique[index], record):
                return index
        return None
