"""
Binary encoding of the Spotify-specific fields of a track.

Only the ISRC and the artwork URL are written, in that order, each as a
one-byte presence flag followed (if present) by an unsigned 16-bit
big-endian byte length and the UTF-8 text. Title, artist, duration, ID,
and URL are carried by the host's caching layer as a TrackInfo.
"""

from io import BytesIO
from struct import Struct, error as StructError
from typing import BinaryIO, Optional

from spotify_source.dataclass.spotify_track import SpotifyTrack, TrackInfo

from .exceptions import TrackDecodeError

FLAG = Struct('>?')
LENGTH = Struct('>H')
MAX_TEXT_LENGTH = 0xFFFF


def write_nullable_text(stream: BinaryIO, text: Optional[str]):
  """
  Writes an optional string, keeping None distinct from ''.
  """
  stream.write(FLAG.pack(text is not None))
  if text is None:
    return

  encoded = text.encode('utf-8')
  if len(encoded) > MAX_TEXT_LENGTH:
    raise ValueError(f'Text is too long to encode ({len(encoded)} bytes)')
  stream.write(LENGTH.pack(len(encoded)))
  stream.write(encoded)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
  data = stream.read(size)
  if len(data) != size:
    raise TrackDecodeError(f'Expected {size} bytes of track data, got {len(data)}')
  return data


def read_nullable_text(stream: BinaryIO) -> Optional[str]:
  """
  Reads an optional string written by write_nullable_text().
  """
  try:
    (present,) = FLAG.unpack(_read_exact(stream, FLAG.size))
    if not present:
      return None

    (length,) = LENGTH.unpack(_read_exact(stream, LENGTH.size))
    return _read_exact(stream, length).decode('utf-8')
  except (StructError, UnicodeDecodeError) as err:
    raise TrackDecodeError(f'Corrupt track data: {err}') from err


def write_track(track: SpotifyTrack, stream: BinaryIO):
  """
  Writes the Spotify-specific fields of a track to a stream.
  """
  write_nullable_text(stream, track.isrc)
  write_nullable_text(stream, track.artwork)


def read_track(stream: BinaryIO, info: TrackInfo) -> SpotifyTrack:
  """
  Reads the fields written by write_track() and combines them with `info`.
  """
  isrc = read_nullable_text(stream)
  artwork = read_nullable_text(stream)
  return SpotifyTrack.from_info(info, isrc=isrc, artwork=artwork)


def encode_track(track: SpotifyTrack) -> bytes:
  """
  Encodes the Spotify-specific fields of a track.
  """
  buffer = BytesIO()
  write_track(track, buffer)
  return buffer.getvalue()


def decode_track(data: bytes, info: TrackInfo) -> SpotifyTrack:
  """
  Decodes data produced by encode_track() back into a full SpotifyTrack.
  Trailing bytes are rejected.
  """
  buffer = BytesIO(data)
  track = read_track(buffer, info)
  if buffer.read(1):
    raise TrackDecodeError('Unexpected trailing bytes after track data')
  return track
