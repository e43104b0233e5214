"""
Configuration parser.

This module parses the configuration file and environment variables and
provides a single object with the synthesized configuration values,
where the environment variables take precedence over the config file.
"""

from os import environ
from os.path import isfile
from typing import Optional

from yaml import safe_load

from spotify_source.dataclass.config import SpotifyConfig

from .constants import DEFAULT_MARKET


def load_config(path: str = 'config.yml') -> SpotifyConfig:
  """
  Reads the Spotify source configuration from a YAML file, if it exists,
  and from SPOTIFY_SOURCE_* environment variables.

  :param path: Path to the YAML config file.
  """
  client_id: Optional[str] = None
  client_secret: Optional[str] = None
  market = DEFAULT_MARKET
  debug_enabled = False
  sentry_dsn: Optional[str] = None
  sentry_env: Optional[str] = None

  # Parse config file if it exists
  if isfile(path):
    with open(path, encoding='UTF-8') as f:
      try:
        config_file = safe_load(f) or {}
      except Exception as e:
        raise ValueError(f'Error parsing {path}: {e}') from e

    try:
      client_id = config_file['spotify']['client_id']
      client_secret = config_file['spotify']['client_secret']

      # Add optional config values
      market = config_file['spotify'].get('market', market)
      debug_enabled = config_file.get('debug', debug_enabled)
      if 'sentry' in config_file:
        sentry_dsn = config_file['sentry']['dsn']
        sentry_env = config_file['sentry']['environment']
    except (KeyError, TypeError) as e:
      raise ValueError(f'Config missing from {path}: {e.args[0]}') from e

  # Override config from environment variables
  client_id = environ.get('SPOTIFY_SOURCE_CLIENT_ID', client_id)
  client_secret = environ.get('SPOTIFY_SOURCE_CLIENT_SECRET', client_secret)
  market = environ.get('SPOTIFY_SOURCE_MARKET', market)
  sentry_dsn = environ.get('SPOTIFY_SOURCE_SENTRY_DSN', sentry_dsn)
  sentry_env = environ.get('SPOTIFY_SOURCE_SENTRY_ENV', sentry_env)
  if 'SPOTIFY_SOURCE_DEBUG' in environ:
    debug_enabled = environ['SPOTIFY_SOURCE_DEBUG'].lower() == 'true'

  # Final checks
  if client_id is None:
    raise ValueError('No Spotify client ID specified')
  if client_secret is None:
    raise ValueError('No Spotify client secret specified')

  return SpotifyConfig(
    client_id=client_id,
    client_secret=client_secret,
    market=market,
    debug_enabled=debug_enabled,
    sentry_dsn=sentry_dsn,
    sentry_env=sentry_env,
  )
