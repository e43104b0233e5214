"""
Resolves Spotify links into playable track metadata.
"""

from .dataclass.config import SpotifyConfig
from .dataclass.failure import Failure, FailureKind
from .dataclass.locator import ResourceKind, ResourceLocator
from .dataclass.spotify_track import SpotifyCollection, SpotifyTrack, TrackInfo
from .source_manager import SpotifySourceManager
from .utils.config import load_config

__all__ = [
  'Failure',
  'FailureKind',
  'ResourceKind',
  'ResourceLocator',
  'SpotifyCollection',
  'SpotifyConfig',
  'SpotifySourceManager',
  'SpotifyTrack',
  'TrackInfo',
  'load_config',
]
