"""
Dataclass for a failed resolution, returned to the host instead of raised.
"""

from dataclasses import dataclass
from enum import Enum


class FailureKind(Enum):
  """
  Classification of a failed resolution.
  """

  AUTH = 'auth'
  TRANSPORT = 'transport'
  NOT_FOUND = 'not_found'
  CATALOG = 'catalog'
  UNKNOWN = 'unknown'


@dataclass(frozen=True)
class Failure:
  """
  Dataclass for a failed resolution.
  The original exception is kept in `cause` so the host can log it.
  """

  kind: FailureKind
  message: str
  cause: BaseException
