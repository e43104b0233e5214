"""
String methods for validating and parsing Spotify links.
"""

import re
from typing import Optional

from spotify_source.dataclass.locator import ResourceKind, ResourceLocator

SPOTIFY_URL_REGEX = re.compile(
  r'(https?://)?(www\.)?open\.spotify\.com/'
  r'((?i:user)/[a-zA-Z0-9_-]+/)?'
  r'(?P<kind>(?i:track|album|playlist|artist))/'
  r'(?P<identifier>[a-zA-Z0-9_-]+)'
)


def parse_locator(url: str) -> Optional[ResourceLocator]:
  """
  Gets the Spotify entity kind and ID from a Spotify link.
  Share links with trailing query strings (e.g. ?si=...) are accepted.

  :returns: A ResourceLocator, or None if this is not a Spotify link.
  """
  if not isinstance(url, str):
    return None

  match = SPOTIFY_URL_REGEX.search(url)
  if match is None:
    return None

  return ResourceLocator(
    kind=ResourceKind(match.group('kind').lower()), identifier=match.group('identifier')
  )
