"""
Dataclasses for storing resolved Spotify tracks and collections.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class TrackInfo:
  """
  Track fields carried by the host's own caching layer.
  Everything else is owned by the track codec.
  """

  title: str
  artist: str  # First artist
  duration_ms: int
  spotify_id: str
  url: str


@dataclass(frozen=True)
class SpotifyTrack:
  """
  Dataclass for storing a playable Spotify track entity.
  """

  title: str
  artist: str  # First artist
  duration_ms: int
  spotify_id: str
  url: str
  artwork: Optional[str] = None
  isrc: Optional[str] = None

  @property
  def info(self) -> TrackInfo:
    """
    Returns the fields of this track that are not written by the track codec.
    """
    return TrackInfo(
      title=self.title,
      artist=self.artist,
      duration_ms=self.duration_ms,
      spotify_id=self.spotify_id,
      url=self.url,
    )

  @classmethod
  def from_info(
    cls, info: TrackInfo, isrc: Optional[str] = None, artwork: Optional[str] = None
  ) -> 'SpotifyTrack':
    """
    Creates a SpotifyTrack from externally carried metadata and the codec fields.
    """
    return cls(
      title=info.title,
      artist=info.artist,
      duration_ms=info.duration_ms,
      spotify_id=info.spotify_id,
      url=info.url,
      artwork=artwork,
      isrc=isrc,
    )


@dataclass(frozen=True)
class SpotifyCollection:
  """
  Dataclass for an ordered list of tracks from an album, playlist, or artist.
  """

  name: str
  tracks: List[SpotifyTrack] = field(default_factory=list)

  def __len__(self) -> int:
    return len(self.tracks)
