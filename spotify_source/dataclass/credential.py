"""
Dataclass for a client-credentials access token.
"""

from dataclasses import dataclass, field
from time import time


@dataclass(frozen=True)
class Credential:
  """
  Dataclass for a client-credentials access token.
  Replaced wholesale on every refresh, never mutated.
  """

  access_token: str
  expires_in: int  # seconds
  obtained_at: float = field(default_factory=time)

  @property
  def expires_at(self) -> float:
    """
    Returns the UNIX timestamp at which this credential expires.
    """
    return self.obtained_at + self.expires_in

  @property
  def is_expired(self) -> bool:
    """
    Whether the declared expiry of this credential has elapsed.
    """
    return time() >= self.expires_at
