import logging
import struct

from .exceptions import FormatError, TruncatedDataError
from .path_or_fobj import open_seekable
from .reader import EXIF_MARKER, read_exif

logger = logging.getLogger(__name__)

JPEG_SOI = b'\xff\xd8'
JPEG_APP1 = 0xE1
# Markers after which there are no more metadata segments
JPEG_SOS = 0xDA
JPEG_EOI = 0xD9


def _is_standalone_marker(code):
    return code == 0x01 or 0xD0 <= code <= 0xD7


def find_exif_segment(fobj):
    """
    Walk the marker segments at the start of a JPEG to find the APP1 segment
    with EXIF data.

    :param fobj: a binary filelike-object positioned at the start of a JPEG.
    :returns: the segment payload starting with the 'Exif\\0\\0' marker, or
        None if the JPEG has no EXIF segment.
    """
    if fobj.read(2) != JPEG_SOI:
        raise FormatError('Not a JPEG file')
    while True:
        byte = fobj.read(1)
        if not byte:
            return None
        if byte != b'\xff':
            raise FormatError('Expected a JPEG marker at %d' % (fobj.tell() - 1))
        marker = fobj.read(1)
        # Any number of 0xFF fill bytes may precede a marker code
        while marker == b'\xff':
            marker = fobj.read(1)
        if not marker:
            return None
        code = marker[0]
        if code in (JPEG_SOS, JPEG_EOI):
            return None
        if _is_standalone_marker(code):
            continue
        lengthBytes = fobj.read(2)
        if len(lengthBytes) < 2:
            raise TruncatedDataError('JPEG segment 0x%02X has no length' % code)
        length = struct.unpack('>H', lengthBytes)[0]
        if length < 2:
            raise FormatError('Invalid length %d for JPEG segment 0x%02X' % (length, code))
        payload = fobj.read(length - 2)
        if len(payload) < length - 2:
            raise TruncatedDataError('JPEG segment 0x%02X is truncated' % code)
        logger.debug('JPEG segment 0x%02X, %d bytes', code, length)
        if code == JPEG_APP1 and payload.startswith(EXIF_MARKER):
            return payload


def read_jpeg_exif(source):
    """
    Read the EXIF directory of a JPEG.

    :param source: bytes, a file path, a pathlib Path, or a binary
        filelike-object.  A filelike-object is closed when done.
    :returns: a Directory, or None if the JPEG has no EXIF data.
    """
    fobj = open_seekable(source)
    try:
        segment = find_exif_segment(fobj)
    finally:
        fobj.close()
    if segment is None:
        logger.info('No EXIF segment found')
        return None
    return read_exif(segment)
