"""
Spotify catalog client.

Access tokens are obtained with the Client Credentials Flow and passed in
explicitly on every catalog call, so that the token lifecycle is owned by
TokenRefresher instead of spotipy's auth manager.
"""

from base64 import b64encode
from typing import Any, Dict, List, Optional, Protocol, Tuple

import requests
import spotipy
from requests import HTTPError, Timeout
from requests.exceptions import ConnectionError
from requests.status_codes import codes

from spotify_source.dataclass.credential import Credential
from spotify_source.dataclass.playlist_item import OtherItem, PlaylistItem, TrackItem

from .constants import (
  PLAYLIST_PAGE_SIZE,
  REQUEST_TIMEOUT,
  SPOTIFY_ACCOUNTS_BASE_URL,
  USER_AGENT,
)
from .exceptions import (
  SpotifyAuthError,
  SpotifyCatalogError,
  SpotifyNotFoundError,
  SpotifyTransportError,
)
from .logger import create_logger


class RemoteCatalog(Protocol):
  """
  The Spotify Web API operations needed to resolve Spotify links.
  All methods return Spotify API objects as parsed JSON.
  """

  def exchange_client_credentials(self) -> Credential: ...

  def get_track(self, credential: Optional[Credential], track_id: str) -> Dict[str, Any]: ...

  def get_album(self, credential: Optional[Credential], album_id: str) -> Dict[str, Any]: ...

  def get_playlist(self, credential: Optional[Credential], playlist_id: str) -> Dict[str, Any]: ...

  def get_playlist_items(
    self, credential: Optional[Credential], playlist_id: str, page: int
  ) -> Tuple[List[PlaylistItem], bool]: ...

  def get_artist(self, credential: Optional[Credential], artist_id: str) -> Dict[str, Any]: ...

  def get_artist_top_tracks(
    self, credential: Optional[Credential], artist_id: str, market: str
  ) -> List[Dict[str, Any]]: ...


def classify_playlist_item(item: Dict[str, Any]) -> PlaylistItem:
  """
  Classifies a playlist item object as either a playable track or something else.
  """
  track = item.get('track')
  if track is None:
    return OtherItem('unavailable')
  if track.get('type', 'track') != 'track':
    return OtherItem(track['type'])
  if item.get('is_local', False) or track.get('is_local', False) or track.get('id') is None:
    return OtherItem('local')
  return TrackItem(track)


class Spotify:
  """
  Spotify catalog client backed by spotipy, with client credential
  exchange done directly against the accounts service.
  """

  def __init__(self, client_id: str, client_secret: str, *, debug: bool = False):
    self._client_id = client_id
    self._client_secret = client_secret
    self._logger = create_logger(self.__class__.__name__, debug=debug)

    # Shared by every spotipy client so connections are pooled across lookups
    self._session = requests.Session()

  def _client(self, credential: Optional[Credential]) -> spotipy.Spotify:
    """
    Returns a spotipy client authenticated with the given access token.
    """
    if credential is None:
      raise SpotifyAuthError('No Spotify access token has been obtained yet')
    return spotipy.Spotify(
      auth=credential.access_token,
      requests_session=self._session,
      requests_timeout=REQUEST_TIMEOUT,
      retries=0,
    )

  def _call(self, uri: str, method: str, credential: Optional[Credential], *args, **kwargs):
    """
    Calls a spotipy client method, translating its errors into our own.
    """
    client = self._client(credential)
    try:
      response = getattr(client, method)(*args, **kwargs)
    except spotipy.SpotifyException as err:
      if err.http_status in (codes.unauthorized, codes.forbidden):
        raise SpotifyAuthError(f'Spotify rejected our access token: {err.msg}') from err
      if err.http_status in (codes.bad_request, codes.not_found):
        raise SpotifyNotFoundError(uri, reason=err.msg) from err
      raise SpotifyCatalogError(f'Error {err.http_status} while getting {uri}: {err.msg}') from err
    except (ConnectionError, Timeout) as err:
      raise SpotifyTransportError(f'Could not reach Spotify while getting {uri}: {err}') from err

    if response is None:
      raise SpotifyNotFoundError(uri)
    return response

  def exchange_client_credentials(self) -> Credential:
    """
    Gets a new access token using the Client Credentials Flow.
    """
    auth_token = b64encode(f'{self._client_id}:{self._client_secret}'.encode()).decode()
    try:
      response = requests.post(
        str(SPOTIFY_ACCOUNTS_BASE_URL / 'token'),
        headers={'Authorization': f'Basic {auth_token}', 'User-Agent': USER_AGENT},
        data={'grant_type': 'client_credentials'},
        timeout=REQUEST_TIMEOUT,
      )
      response.raise_for_status()
    except HTTPError as err:
      status = err.response.status_code if err.response is not None else None
      if status in (codes.bad_request, codes.unauthorized, codes.forbidden):
        raise SpotifyAuthError(f'Spotify rejected our client credentials: {err}') from err
      raise SpotifyCatalogError(f'Error {status} while exchanging client credentials') from err
    except (ConnectionError, Timeout) as err:
      raise SpotifyTransportError(f'Could not reach Spotify accounts service: {err}') from err

    try:
      parsed = response.json()
      return Credential(access_token=parsed['access_token'], expires_in=int(parsed['expires_in']))
    except (KeyError, TypeError, ValueError) as err:
      raise SpotifyCatalogError(f'Malformed client credentials response: {err}') from err

  def get_track(self, credential: Optional[Credential], track_id: str) -> Dict[str, Any]:
    """
    Returns the track object for a given track ID.
    """
    return self._call(f'spotify:track:{track_id}', 'track', credential, track_id)

  def get_album(self, credential: Optional[Credential], album_id: str) -> Dict[str, Any]:
    """
    Returns the album object for a given album ID, including the
    first page of its tracks.
    """
    return self._call(f'spotify:album:{album_id}', 'album', credential, album_id)

  def get_playlist(self, credential: Optional[Credential], playlist_id: str) -> Dict[str, Any]:
    """
    Returns the name of a playlist, without its tracks.
    """
    return self._call(
      f'spotify:playlist:{playlist_id}', 'playlist', credential, playlist_id, fields='name'
    )

  def get_playlist_items(
    self, credential: Optional[Credential], playlist_id: str, page: int
  ) -> Tuple[List[PlaylistItem], bool]:
    """
    Returns one page of a playlist's items, and whether there are further pages.
    """
    response = self._call(
      f'spotify:playlist:{playlist_id}',
      'playlist_items',
      credential,
      playlist_id,
      limit=PLAYLIST_PAGE_SIZE,
      offset=page * PLAYLIST_PAGE_SIZE,
      additional_types=['track'],
    )
    self._logger.debug(
      'Got page %d of playlist %s (%d items)', page, playlist_id, len(response['items'])
    )
    items = [classify_playlist_item(item) for item in response['items']]
    return items, response.get('next') is not None

  def get_artist(self, credential: Optional[Credential], artist_id: str) -> Dict[str, Any]:
    """
    Returns the artist object for a given artist ID.
    """
    return self._call(f'spotify:artist:{artist_id}', 'artist', credential, artist_id)

  def get_artist_top_tracks(
    self, credential: Optional[Credential], artist_id: str, market: str
  ) -> List[Dict[str, Any]]:
    """
    Returns the track objects for a given artist's top 10 tracks in a market.
    """
    response = self._call(
      f'spotify:artist:{artist_id}', 'artist_top_tracks', credential, artist_id, country=market
    )
    return response['tracks']
