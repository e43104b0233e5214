"""
Background refresher for the Spotify client credentials access token.
"""

from threading import Event, Lock, Thread
from typing import TYPE_CHECKING, Optional

from tenacity import (
  RetryCallState,
  RetryError,
  Retrying,
  retry_if_exception_type,
  stop_when_event_set,
  wait_fixed,
)

from .constants import MIN_REFRESH_INTERVAL, TOKEN_RETRY_INTERVAL
from .logger import create_logger

if TYPE_CHECKING:
  from spotify_source.dataclass.credential import Credential

  from .spotify_client import RemoteCatalog


class CredentialCell:
  """
  Holds the current access token. Writers replace the whole Credential,
  so readers always see either the old token or the new one.
  """

  def __init__(self):
    self._lock = Lock()
    self._credential: Optional['Credential'] = None

  def get(self) -> Optional['Credential']:
    """
    Returns the current credential, or None if no token has been obtained yet.
    """
    with self._lock:
      return self._credential

  def publish(self, credential: 'Credential'):
    """
    Replaces the current credential.
    """
    with self._lock:
      self._credential = credential


class TokenRefresher:
  """
  Obtains a new access token whenever the previous one expires,
  and publishes it to a CredentialCell.

  Failed exchanges are retried every `retry_interval` seconds for as long as
  the refresher runs, leaving the previous token in place.
  """

  def __init__(
    self,
    catalog: 'RemoteCatalog',
    cell: CredentialCell,
    *,
    retry_interval: float = TOKEN_RETRY_INTERVAL,
    debug: bool = False,
  ):
    self._catalog = catalog
    self._cell = cell
    self._retry_interval = retry_interval
    self._stop_event = Event()
    self._thread: Optional[Thread] = None
    self._logger = create_logger(self.__class__.__name__, debug=debug)

  @property
  def running(self) -> bool:
    """
    Whether the refresh loop is currently running.
    """
    return self._thread is not None and self._thread.is_alive()

  def start(self):
    """
    Starts the refresh loop on a daemon thread.
    """
    if self._thread is not None:
      raise RuntimeError('TokenRefresher has already been started')

    self._thread = Thread(target=self._run, name='spotify-token-refresher', daemon=True)
    self._thread.start()

  def stop(self, timeout: Optional[float] = None):
    """
    Stops the refresh loop. No token exchange is started after this returns,
    although one that is already in flight is allowed to finish.
    """
    self._stop_event.set()
    if self._thread is not None and self._thread.is_alive():
      self._thread.join(timeout)

  def _log_failure(self, retry_state: RetryCallState):
    err = retry_state.outcome.exception() if retry_state.outcome is not None else None
    self._logger.error(
      'Failed to update the Spotify access token (attempt %d). Retrying in %s seconds: %s',
      retry_state.attempt_number,
      self._retry_interval,
      err,
    )

  def _exchange(self) -> Optional['Credential']:
    if self._stop_event.is_set():
      return None
    return self._catalog.exchange_client_credentials()

  def _fetch(self) -> Optional['Credential']:
    """
    Exchanges client credentials until it succeeds or the refresher is stopped.
    """
    retrying = Retrying(
      retry=retry_if_exception_type(Exception),
      wait=wait_fixed(self._retry_interval),
      stop=stop_when_event_set(self._stop_event),
      sleep=self._stop_event.wait,
      before_sleep=self._log_failure,
    )
    try:
      return retrying(self._exchange)
    except RetryError:
      # Stopped while waiting to retry
      return None

  def _run(self):
    while not self._stop_event.is_set():
      credential = self._fetch()
      if credential is None:
        break

      self._cell.publish(credential)
      self._logger.debug(
        'Updated Spotify access token, expires in %d seconds', credential.expires_in
      )
      self._stop_event.wait(max(credential.expires_in, MIN_REFRESH_INTERVAL))

    self._logger.debug('Token refresher stopped')
