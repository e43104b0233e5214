"""
Resolves parsed Spotify links into tracks and track collections.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union, assert_never

from spotify_source.dataclass.locator import ResourceKind, ResourceLocator
from spotify_source.dataclass.playlist_item import TrackItem
from spotify_source.dataclass.spotify_track import SpotifyCollection, SpotifyTrack

from .constants import DEFAULT_MARKET, SPOTIFY_OPEN_BASE_URL
from .logger import create_logger

if TYPE_CHECKING:
  from spotify_source.dataclass.credential import Credential

  from .spotify_client import RemoteCatalog


ResolvedItem = Union[SpotifyTrack, SpotifyCollection]


def get_art(images: Optional[List[Dict[str, Any]]]) -> Optional[str]:
  """
  Returns the first image URL from a list of artwork images,
  or None if the list is empty.
  """
  if not images:
    return None
  return images[0]['url']


def extract_track_info(
  track_obj: Dict[str, Any], artwork: Optional[str] = None, artist: Optional[str] = None
) -> SpotifyTrack:
  """
  Extracts track information from a Spotify API track object and returns a SpotifyTrack.

  :param artwork: Artwork to use if the track object does not carry its album's images.
  :param artist: Artist name to use instead of the track's first artist.
  """
  # Extract ISRC if present
  isrc = None
  if 'isrc' in track_obj.get('external_ids', {}):
    isrc = track_obj['external_ids']['isrc'].upper().replace('-', '')

  # Extract album artwork if present
  if 'album' in track_obj:
    artwork = get_art(track_obj['album'].get('images')) or artwork

  return SpotifyTrack(
    title=track_obj['name'],
    artist=artist if artist is not None else track_obj['artists'][0]['name'],
    duration_ms=int(track_obj['duration_ms']),
    spotify_id=track_obj['id'],
    url=str(SPOTIFY_OPEN_BASE_URL / 'track' / track_obj['id']),
    artwork=artwork,
    isrc=isrc,
  )


class SpotifyResolver:
  """
  Turns a ResourceLocator into a SpotifyTrack or SpotifyCollection.

  Holds no per-call state and can be used from multiple threads at once.
  Catalog errors are not caught or retried here.
  """

  def __init__(
    self, catalog: 'RemoteCatalog', market: str = DEFAULT_MARKET, *, debug: bool = False
  ):
    self._catalog = catalog
    self._market = market
    self._logger = create_logger(self.__class__.__name__, debug=debug)

  def resolve(self, locator: ResourceLocator, credential: Optional['Credential']) -> ResolvedItem:
    """
    Resolves a Spotify entity into one track or an ordered collection of tracks.
    """
    kind = locator.kind
    if kind is ResourceKind.TRACK:
      return self.get_track(locator.identifier, credential)
    if kind is ResourceKind.ALBUM:
      return self.get_album(locator.identifier, credential)
    if kind is ResourceKind.PLAYLIST:
      return self.get_playlist(locator.identifier, credential)
    if kind is ResourceKind.ARTIST:
      return self.get_artist_tracks(locator.identifier, credential)
    assert_never(kind)

  def get_track(self, track_id: str, credential: Optional['Credential']) -> SpotifyTrack:
    """
    Returns a SpotifyTrack for a given track ID.
    """
    return extract_track_info(self._catalog.get_track(credential, track_id))

  def get_album(self, album_id: str, credential: Optional['Credential']) -> SpotifyCollection:
    """
    Returns the tracks on the first page of an album's track listing.
    Album tracks don't carry their own artwork, so the album's is used.
    """
    album = self._catalog.get_album(credential, album_id)
    artwork = get_art(album.get('images'))
    tracks = [extract_track_info(track, artwork=artwork) for track in album['tracks']['items']]
    return SpotifyCollection(name=album['name'], tracks=tracks)

  def get_playlist(self, playlist_id: str, credential: Optional['Credential']) -> SpotifyCollection:
    """
    Returns every track in a playlist, skipping local files, episodes,
    and unavailable tracks. Pages are fetched one after another.
    """
    name = self._catalog.get_playlist(credential, playlist_id)['name']

    tracks = []
    skipped = 0
    page = 0
    has_more = True
    while has_more:
      items, has_more = self._catalog.get_playlist_items(credential, playlist_id, page)
      for item in items:
        if isinstance(item, TrackItem):
          tracks.append(extract_track_info(item.track))
        else:
          skipped += 1
      page += 1

    if skipped > 0:
      self._logger.debug('Skipped %d non-track items in playlist %s', skipped, playlist_id)
    return SpotifyCollection(name=name, tracks=tracks)

  def get_artist_tracks(
    self, artist_id: str, credential: Optional['Credential']
  ) -> SpotifyCollection:
    """
    Returns an artist's top tracks in the configured market.
    """
    artist_name = self._catalog.get_artist(credential, artist_id)['name']
    tracks = [
      extract_track_info(track, artist=artist_name)
      for track in self._catalog.get_artist_top_tracks(credential, artist_id, self._market)
    ]
    return SpotifyCollection(name=f"{artist_name}'s Songs", tracks=tracks)
