"""
Spotify source manager, which turns Spotify links into playable tracks
for the host's player.
"""

from typing import TYPE_CHECKING, Optional, Union

from spotify_source.dataclass.failure import Failure, FailureKind
from spotify_source.dataclass.spotify_track import SpotifyTrack, TrackInfo
from spotify_source.utils.constants import SOURCE_NAME, TOKEN_RETRY_INTERVAL
from spotify_source.utils.exceptions import (
  SpotifyAuthError,
  SpotifyCatalogError,
  SpotifyNotFoundError,
  SpotifyTransportError,
)
from spotify_source.utils.logger import create_logger, init_sentry
from spotify_source.utils.resolver import ResolvedItem, SpotifyResolver
from spotify_source.utils.spotify_client import Spotify
from spotify_source.utils.token_refresher import CredentialCell, TokenRefresher
from spotify_source.utils.track_codec import decode_track, encode_track
from spotify_source.utils.url import parse_locator

if TYPE_CHECKING:
  from spotify_source.dataclass.config import SpotifyConfig
  from spotify_source.dataclass.credential import Credential
  from spotify_source.utils.spotify_client import RemoteCatalog


FAILURE_KINDS = (
  (SpotifyAuthError, FailureKind.AUTH),
  (SpotifyTransportError, FailureKind.TRANSPORT),
  (SpotifyNotFoundError, FailureKind.NOT_FOUND),
  (SpotifyCatalogError, FailureKind.CATALOG),
)


def classify_failure(err: Exception) -> Failure:
  """
  Wraps an exception raised during resolution in a Failure.
  """
  for exc_type, kind in FAILURE_KINDS:
    if isinstance(err, exc_type):
      return Failure(kind=kind, message=str(err), cause=err)
  return Failure(kind=FailureKind.UNKNOWN, message=f'Unexpected error: {err}', cause=err)


class SpotifySourceManager:
  """
  Resolves Spotify track, album, playlist, and artist links.

  A background thread keeps the access token fresh for as long as the
  manager is alive. Lookups never wait for it: a lookup made before the
  first token arrives fails with FailureKind.AUTH.
  """

  def __init__(
    self,
    config: 'SpotifyConfig',
    catalog: Optional['RemoteCatalog'] = None,
    *,
    retry_interval: float = TOKEN_RETRY_INTERVAL,
  ):
    init_sentry(config.sentry_dsn, config.sentry_env)
    self._logger = create_logger(self.__class__.__name__, debug=config.debug_enabled)

    if catalog is None:
      catalog = Spotify(config.client_id, config.client_secret, debug=config.debug_enabled)
    self._cell = CredentialCell()
    self._resolver = SpotifyResolver(
      catalog, market=config.market, debug=config.debug_enabled
    )
    self._refresher = TokenRefresher(
      catalog, self._cell, retry_interval=retry_interval, debug=config.debug_enabled
    )
    self._refresher.start()

  def __enter__(self) -> 'SpotifySourceManager':
    return self

  def __exit__(self, *_):
    self.shutdown()

  @property
  def credential(self) -> Optional['Credential']:
    """
    The access token currently in use, or None if none has been obtained yet.
    """
    return self._cell.get()

  def source_name(self) -> str:
    """
    Returns the name of this source.
    """
    return SOURCE_NAME

  def handle(self, locator: str) -> Union[ResolvedItem, Failure, None]:
    """
    Resolves a Spotify link.

    :return: None if this is not a Spotify link, so the host can try other
        sources; a Failure if the link could not be resolved; otherwise a
        SpotifyTrack or SpotifyCollection.
    """
    parsed = parse_locator(locator)
    if parsed is None:
      return None

    self._logger.debug('Resolving %s', parsed.uri)
    try:
      return self._resolver.resolve(parsed, self._cell.get())
    except Exception as err:  # noqa: BLE001
      failure = classify_failure(err)
      self._logger.warning('Could not resolve %s: %s', parsed.uri, failure.message)
      return failure

  def is_track_encodable(self, track: object) -> bool:
    """
    Whether encode_track() can be used on this track.
    """
    return isinstance(track, SpotifyTrack)

  def encode_track(self, track: SpotifyTrack) -> bytes:
    """
    Encodes the ISRC and artwork of a track for the host's cache.
    """
    return encode_track(track)

  def decode_track(self, data: bytes, info: TrackInfo) -> SpotifyTrack:
    """
    Restores a track from its cached metadata and the output of encode_track().
    """
    return decode_track(data, info)

  def shutdown(self):
    """
    Stops refreshing the access token. Lookups already in progress are not affected.
    """
    self._refresher.stop()
