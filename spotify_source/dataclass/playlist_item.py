"""
Dataclasses for entries of a Spotify playlist.

Playlists can contain episodes, local files, and tracks that are no longer
available, so each entry is classified before it is turned into a track.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class TrackItem:
  """
  A playlist entry that is a full, playable Spotify track.
  """

  track: Dict[str, Any]


@dataclass(frozen=True)
class OtherItem:
  """
  A playlist entry that cannot be resolved into a Spotify track.
  """

  reason: str


PlaylistItem = Union[TrackItem, OtherItem]
