"""
Shared fixtures: an in-memory catalog that behaves like the Spotify Web API.
"""

import time
from typing import Any, Dict, List, Optional

import pytest

from spotify_source.dataclass.credential import Credential
from spotify_source.dataclass.playlist_item import OtherItem, TrackItem
from spotify_source.utils.exceptions import SpotifyAuthError, SpotifyNotFoundError


def make_track(
  track_id: str,
  name: str = 'Song',
  artist: str = 'Artist',
  isrc: Optional[str] = 'USRC17607839',
  images: Optional[List[str]] = None,
) -> Dict[str, Any]:
  """Build a Spotify API track object."""
  track = {
    'type': 'track',
    'id': track_id,
    'name': name,
    'artists': [{'name': artist}, {'name': 'Featured'}],
    'duration_ms': 215000,
    'album': {
      'name': 'Album',
      'images': [{'url': url} for url in (images if images is not None else [f'https://i.scdn.co/{track_id}'])],
    },
    'external_ids': {},
  }
  if isrc is not None:
    track['external_ids']['isrc'] = isrc
  return track


def wait_for(predicate, timeout: float = 5.0) -> bool:
  """Poll until predicate() is true or the timeout elapses."""
  deadline = time.monotonic() + timeout
  while time.monotonic() < deadline:
    if predicate():
      return True
    time.sleep(0.01)
  return predicate()


class FakeCatalog:
  """In-memory RemoteCatalog that records every call."""

  def __init__(self):
    self.tracks: Dict[str, Dict[str, Any]] = {}
    self.albums: Dict[str, Dict[str, Any]] = {}
    self.playlists: Dict[str, str] = {}
    self.playlist_pages: Dict[str, List[list]] = {}
    self.artists: Dict[str, str] = {}
    self.top_tracks: Dict[str, List[Dict[str, Any]]] = {}
    self.exchange_results: List[Any] = []
    self.calls: List[tuple] = []

  def _check(self, credential: Optional[Credential]):
    if credential is None:
      raise SpotifyAuthError('No Spotify access token has been obtained yet')

  def exchange_client_credentials(self) -> Credential:
    self.calls.append(('exchange',))
    result = self.exchange_results.pop(0) if self.exchange_results else Credential('token', 3600)
    if isinstance(result, Exception):
      raise result
    return result

  def get_track(self, credential, track_id):
    self.calls.append(('track', track_id))
    self._check(credential)
    if track_id not in self.tracks:
      raise SpotifyNotFoundError(f'spotify:track:{track_id}')
    return self.tracks[track_id]

  def get_album(self, credential, album_id):
    self.calls.append(('album', album_id))
    self._check(credential)
    if album_id not in self.albums:
      raise SpotifyNotFoundError(f'spotify:album:{album_id}')
    return self.albums[album_id]

  def get_playlist(self, credential, playlist_id):
    self.calls.append(('playlist', playlist_id))
    self._check(credential)
    if playlist_id not in self.playlists:
      raise SpotifyNotFoundError(f'spotify:playlist:{playlist_id}')
    return {'name': self.playlists[playlist_id]}

  def get_playlist_items(self, credential, playlist_id, page):
    self.calls.append(('playlist_items', playlist_id, page))
    self._check(credential)
    pages = self.playlist_pages[playlist_id]
    return pages[page], page + 1 < len(pages)

  def get_artist(self, credential, artist_id):
    self.calls.append(('artist', artist_id))
    self._check(credential)
    if artist_id not in self.artists:
      raise SpotifyNotFoundError(f'spotify:artist:{artist_id}')
    return {'name': self.artists[artist_id]}

  def get_artist_top_tracks(self, credential, artist_id, market):
    self.calls.append(('top_tracks', artist_id, market))
    self._check(credential)
    return self.top_tracks[artist_id]


@pytest.fixture
def catalog() -> FakeCatalog:
  """A catalog with one of each kind of entity."""
  fake = FakeCatalog()
  fake.tracks['abc123'] = make_track('abc123', name='Yellow', artist='Coldplay', isrc='gb-aha-00-00001')
  fake.albums['alb1'] = {
    'name': 'Parachutes',
    'images': [{'url': 'https://i.scdn.co/parachutes'}],
    'tracks': {
      'items': [
        {'id': 't1', 'name': 'Don\'t Panic', 'artists': [{'name': 'Coldplay'}], 'duration_ms': 137000},
        {'id': 't2', 'name': 'Shiver', 'artists': [{'name': 'Coldplay'}], 'duration_ms': 304000},
      ]
    },
  }
  fake.playlists['xyz'] = 'Road Trip'
  fake.playlist_pages['xyz'] = [
    [TrackItem(make_track('p1')), OtherItem('local'), TrackItem(make_track('p2'))],
    [OtherItem('episode'), TrackItem(make_track('p3'))],
    [TrackItem(make_track('p4'))],
  ]
  fake.artists['art1'] = 'Coldplay'
  fake.top_tracks['art1'] = [
    make_track('top1', artist='Coldplay feat. Someone'),
    make_track('top2', isrc=None),
  ]
  return fake


@pytest.fixture
def credential() -> Credential:
  """A freshly issued access token."""
  return Credential('token', 3600)
