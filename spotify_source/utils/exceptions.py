"""
Custom exceptions for the Spotify source.
"""

from typing import Union


class SpotifySourceError(Exception):
  """
  Custom exception class for the Spotify source.
  """

  def __init__(self, message: Union[str, Exception]):
    if isinstance(message, Exception):
      self.message = str(message)
    else:
      self.message = message

    super().__init__(self.message)

  def __str__(self) -> str:
    return self.message


class SpotifyAuthError(SpotifySourceError):
  """
  Raised when Spotify rejects our client credentials or access token.
  """


class SpotifyTransportError(SpotifySourceError):
  """
  Raised when Spotify could not be reached.
  """


class SpotifyNotFoundError(SpotifySourceError):
  """
  Raised when a well-formed Spotify ID does not exist in the catalog.
  """

  def __init__(self, uri: str, reason=None):
    self.uri = uri
    message = f'Spotify entity not found: {uri}'
    if reason is not None:
      message = f'{message} ({reason})'
    super().__init__(message)


class SpotifyCatalogError(SpotifySourceError):
  """
  Raised when Spotify returns an unexpected error or a malformed response.
  """


class TrackDecodeError(SpotifySourceError):
  """
  Raised when encoded track data is truncated or corrupt.
  """
