"""
Constants used for API requests.
"""

from yarl import URL

RELEASE = '0.0.0-unknown'  # This is replaced by the release tag during CI/CD

USER_AGENT = f'spotify-source/{RELEASE}'

SOURCE_NAME = 'spotify'

SPOTIFY_ACCOUNTS_BASE_URL = URL.build(scheme='https', host='accounts.spotify.com', path='/api')

SPOTIFY_OPEN_BASE_URL = URL.build(scheme='https', host='open.spotify.com')

# Timeout for a single request to the Spotify API, in seconds
REQUEST_TIMEOUT = 10

# Seconds to wait before retrying a failed client credentials exchange.
# Fixed, not exponential.
TOKEN_RETRY_INTERVAL = 60

# Minimum seconds between two successful exchanges, even if a token
# arrives already expired
MIN_REFRESH_INTERVAL = 1

# Maximum page size of the playlist items endpoint
PLAYLIST_PAGE_SIZE = 100

# Market used for artist top tracks unless configured otherwise
DEFAULT_MARKET = 'IN'
