"""
Dataclass for the Spotify source configuration.
"""

from dataclasses import dataclass
from typing import Optional

from spotify_source.utils.constants import DEFAULT_MARKET


@dataclass
class SpotifyConfig:
  """
  Dataclass for the Spotify source configuration.
  """

  # Required
  client_id: str
  client_secret: str

  # Optional
  market: str = DEFAULT_MARKET  # Used for artist top tracks
  debug_enabled: bool = False
  sentry_dsn: Optional[str] = None
  sentry_env: Optional[str] = None

  # Type checking
  def __post_init__(self):
    if not isinstance(self.client_id, str) or not self.client_id:
      raise TypeError('client_id must be a non-empty string')
    if not isinstance(self.client_secret, str) or not self.client_secret:
      raise TypeError('client_secret must be a non-empty string')

    # Markets are ISO 3166-1 alpha-2 country codes
    if not isinstance(self.market, str) or len(self.market) != 2 or not self.market.isalpha():
      raise ValueError(f'market must be a two-letter country code, got {self.market!r}')
    self.market = self.market.upper()

    if not isinstance(self.debug_enabled, bool):
      raise TypeError('debug_enabled must be a bool')
