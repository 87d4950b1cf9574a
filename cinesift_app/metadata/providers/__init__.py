"""
Upstream media providers.

Each provider exposes search(query) -> List[MediaRecord] and never raises.
"""

from .base import BaseMetadataProvider
from .bangumi import BangumiProvider
from .douban import DoubanProvider
from .maoyan import MaoyanProvider
from .tmdb import TmdbProvider

__all__ = [
    'BaseMetadataProvider',
    'BangumiProvider',
    'DoubanProvider',
    'MaoyanProvider',
    'TmdbProvider',
]
