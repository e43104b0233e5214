"""
Tests for the spotipy-backed Spotify catalog client.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
import spotipy
from requests import HTTPError
from requests.exceptions import ConnectionError, Timeout

from spotify_source.dataclass.credential import Credential
from spotify_source.dataclass.playlist_item import OtherItem, TrackItem
from spotify_source.utils.exceptions import (
  SpotifyAuthError,
  SpotifyCatalogError,
  SpotifyNotFoundError,
  SpotifyTransportError,
)
from spotify_source.utils.spotify_client import Spotify, classify_playlist_item


@pytest.fixture
def spotipy_client():
  """Patch spotipy.Spotify and return the mocked client instance."""
  with patch('spotify_source.utils.spotify_client.spotipy.Spotify') as cls:
    yield cls.return_value


def _response(status: int, body=None) -> MagicMock:
  response = MagicMock()
  response.status_code = status
  response.json.return_value = body
  if status >= 400:
    response.raise_for_status.side_effect = HTTPError(response=response)
  return response


class TestClassifyPlaylistItem:
  """Tests for classify_playlist_item()."""

  def test_track(self) -> None:
    """Full tracks are kept."""
    item = classify_playlist_item({'is_local': False, 'track': {'type': 'track', 'id': 'x'}})
    assert item == TrackItem({'type': 'track', 'id': 'x'})

  def test_unavailable(self) -> None:
    """Removed tracks come back as null and are not playable."""
    assert classify_playlist_item({'track': None}) == OtherItem('unavailable')

  def test_episode(self) -> None:
    """Podcast episodes are not tracks."""
    assert classify_playlist_item({'track': {'type': 'episode', 'id': 'e'}}) == OtherItem('episode')

  def test_local(self) -> None:
    """Local files have no Spotify ID."""
    item = classify_playlist_item({'is_local': True, 'track': {'type': 'track', 'id': None}})
    assert item == OtherItem('local')


class TestExchangeClientCredentials:
  """Tests for Spotify.exchange_client_credentials()."""

  def test_success(self) -> None:
    """A valid response becomes a Credential."""
    body = {'access_token': 'abc', 'token_type': 'Bearer', 'expires_in': 3600}
    with patch('spotify_source.utils.spotify_client.requests.post', return_value=_response(200, body)) as post:
      credential = Spotify('id', 'secret').exchange_client_credentials()

    assert credential.access_token == 'abc'
    assert credential.expires_in == 3600
    args, kwargs = post.call_args
    assert args[0] == 'https://accounts.spotify.com/api/token'
    assert kwargs['data'] == {'grant_type': 'client_credentials'}
    assert kwargs['headers']['Authorization'] == 'Basic aWQ6c2VjcmV0'

  def test_rejected(self) -> None:
    """Bad client credentials raise SpotifyAuthError."""
    with patch('spotify_source.utils.spotify_client.requests.post', return_value=_response(400)):
      with pytest.raises(SpotifyAuthError):
        Spotify('id', 'secret').exchange_client_credentials()

  def test_server_error(self) -> None:
    """Other HTTP errors raise SpotifyCatalogError."""
    with patch('spotify_source.utils.spotify_client.requests.post', return_value=_response(503)):
      with pytest.raises(SpotifyCatalogError):
        Spotify('id', 'secret').exchange_client_credentials()

  @pytest.mark.parametrize('error', [ConnectionError('reset'), Timeout('slow')])
  def test_unreachable(self, error) -> None:
    """Network errors raise SpotifyTransportError."""
    with patch('spotify_source.utils.spotify_client.requests.post', side_effect=error):
      with pytest.raises(SpotifyTransportError):
        Spotify('id', 'secret').exchange_client_credentials()

  def test_malformed(self) -> None:
    """Responses without a token raise SpotifyCatalogError."""
    with patch('spotify_source.utils.spotify_client.requests.post', return_value=_response(200, {'error': 'x'})):
      with pytest.raises(SpotifyCatalogError):
        Spotify('id', 'secret').exchange_client_credentials()


class TestCatalogCalls:
  """Tests for the catalog lookups."""

  def test_no_credential(self, spotipy_client) -> None:
    """Lookups without a token fail with SpotifyAuthError before calling Spotify."""
    with pytest.raises(SpotifyAuthError):
      Spotify('id', 'secret').get_track(None, 'abc')
    spotipy_client.track.assert_not_called()

  def test_uses_credential(self) -> None:
    """The access token is passed to spotipy on every call."""
    with patch('spotify_source.utils.spotify_client.spotipy.Spotify') as cls:
      cls.return_value.track.return_value = {'id': 'abc'}
      assert Spotify('id', 'secret').get_track(Credential('tok', 3600), 'abc') == {'id': 'abc'}
      assert cls.call_args.kwargs['auth'] == 'tok'

  @pytest.mark.parametrize(
    'status,expected',
    [
      (401, SpotifyAuthError),
      (403, SpotifyAuthError),
      (400, SpotifyNotFoundError),
      (404, SpotifyNotFoundError),
      (500, SpotifyCatalogError),
    ],
  )
  def test_error_mapping(self, spotipy_client, status, expected) -> None:
    """spotipy errors are mapped by HTTP status."""
    spotipy_client.album.side_effect = spotipy.SpotifyException(status, -1, 'error')
    with pytest.raises(expected):
      Spotify('id', 'secret').get_album(Credential('tok', 3600), 'abc')

  def test_transport_error(self, spotipy_client) -> None:
    """Connection errors raised through spotipy are transport errors."""
    spotipy_client.artist.side_effect = ConnectionError('reset')
    with pytest.raises(SpotifyTransportError):
      Spotify('id', 'secret').get_artist(Credential('tok', 3600), 'abc')

  def test_playlist_name_only(self, spotipy_client) -> None:
    """Playlist metadata is fetched without its tracks."""
    spotipy_client.playlist.return_value = {'name': 'Road Trip'}
    assert Spotify('id', 'secret').get_playlist(Credential('tok', 3600), 'pl') == {'name': 'Road Trip'}
    spotipy_client.playlist.assert_called_once_with('pl', fields='name')

  def test_playlist_items_paging(self, spotipy_client) -> None:
    """Pages map to offsets of 100 and report whether more pages exist."""
    spotipy_client.playlist_items.return_value = {
      'items': [{'track': {'type': 'track', 'id': 'a'}}, {'track': None}],
      'next': 'https://api.spotify.com/v1/playlists/pl/tracks?offset=300',
    }
    items, has_more = Spotify('id', 'secret').get_playlist_items(Credential('tok', 3600), 'pl', 2)
    assert items == [TrackItem({'type': 'track', 'id': 'a'}), OtherItem('unavailable')]
    assert has_more
    kwargs = spotipy_client.playlist_items.call_args.kwargs
    assert kwargs['offset'] == 200
    assert kwargs['limit'] == 100

  def test_last_playlist_page(self, spotipy_client) -> None:
    """The last page has no next link."""
    spotipy_client.playlist_items.return_value = {'items': [], 'next': None}
    _, has_more = Spotify('id', 'secret').get_playlist_items(Credential('tok', 3600), 'pl', 0)
    assert not has_more

  def test_artist_top_tracks_market(self, spotipy_client) -> None:
    """Top tracks are requested for the given market."""
    spotipy_client.artist_top_tracks.return_value = {'tracks': [{'id': 'a'}]}
    tracks = Spotify('id', 'secret').get_artist_top_tracks(Credential('tok', 3600), 'art', 'IN')
    assert tracks == [{'id': 'a'}]
    spotipy_client.artist_top_tracks.assert_called_once_with('art', country='IN')


class TestSpotifyClient:
  """Tests for client construction."""

  def test_session_is_shared(self) -> None:
    """Every lookup reuses one requests session."""
    with patch('spotify_source.utils.spotify_client.spotipy.Spotify') as cls:
      cls.return_value.track.return_value = {'id': 'abc'}
      cls.return_value.artist.return_value = {'name': 'Coldplay'}
      catalog = Spotify('id', 'secret')
      catalog.get_track(Credential('one', 3600), 'abc')
      catalog.get_artist(Credential('two', 3600), 'art')

    sessions = [call.kwargs['requests_session'] for call in cls.call_args_list]
    assert len(sessions) == 2
    assert sessions[0] is sessions[1]
    assert sessions[0] is not True

  def test_debug_logging(self) -> None:
    """The debug flag sets the client's log level."""
    Spotify('id', 'secret', debug=True)
    assert logging.getLogger('Spotify').isEnabledFor(logging.DEBUG)
    Spotify('id', 'secret')
    assert not logging.getLogger('Spotify').isEnabledFor(logging.DEBUG)
