"""
Dataclasses for parsed Spotify locators.
"""

from dataclasses import dataclass
from enum import Enum


class ResourceKind(Enum):
  """
  The kinds of Spotify entities that can be resolved into tracks.
  """

  TRACK = 'track'
  ALBUM = 'album'
  PLAYLIST = 'playlist'
  ARTIST = 'artist'


@dataclass(frozen=True)
class ResourceLocator:
  """
  A Spotify entity kind and its ID, as extracted from a Spotify link.
  Only produced by utils.url.parse_locator().
  """

  kind: ResourceKind
  identifier: str

  @property
  def uri(self) -> str:
    """
    Returns the Spotify URI for this entity, e.g. spotify:track:<id>.
    """
    return f'spotify:{self.kind.value}:{self.identifier}'
