import logging
import os
import struct

from .constants import Datatype, Tag, TagSet
from .directory import Directory, Field
from .exceptions import FormatError, SourceAlreadySetError, SourceNotSetError, TruncatedDataError
from .path_or_fobj import open_seekable

logger = logging.getLogger(__name__)

EXIF_MARKER = b'Exif\x00\x00'


class Reader:
    """
    Read the IFD0 directory of a TIFF header, and any EXIF, GPS, or
    Interoperability sub-directories it points to, into a Directory.

    The data may be a bare TIFF header and IFDs or the same prefixed by the
    'Exif\\0\\0' marker used in JPEG APP1 segments.  Offsets are relative to the
    start of the TIFF header.  Tags that are not in the tag set of the
    directory being read are skipped.

    A reader owns its source once it is set, and closes it when the reader is
    closed::

        with Reader() as reader:
            reader.setSource(path)
            directory = reader.read()
    """

    def __init__(self):
        self._stream = None
        self._byteOrder = None
        self._origin = 0
        self._size = 0
        self._visited = set()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def setSource(self, source):
        """
        Set the data to read.

        :param source: bytes, a file path, a pathlib Path, or a binary
            filelike-object.  Reading starts at the current position of a
            seekable filelike-object.
        """
        if self._stream is not None:
            raise SourceAlreadySetError('Source is already set; close the reader before reusing it')
        self._stream = open_seekable(source)

    def close(self):
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.close()

    def read(self):
        """
        Read the first directory of the source.

        :returns: a Directory with the BaselineTIFF tag set.
        """
        if self._stream is None:
            raise SourceNotSetError('No source has been set')
        stream = self._stream
        start = stream.tell()
        stream.seek(0, os.SEEK_END)
        self._size = stream.tell()
        stream.seek(start)
        if stream.read(len(EXIF_MARKER)) == EXIF_MARKER:
            self._origin = stream.tell()
        else:
            self._origin = start
            stream.seek(start)
        signature = self._readBytes(2)
        if signature == b'II':
            self._byteOrder = '<'
        elif signature == b'MM':
            self._byteOrder = '>'
        else:
            raise FormatError('Not a known TIFF byte order: %r' % signature)
        # The version number (42) is not checked
        self._readBytes(2)
        ifdOffset = struct.unpack(self._byteOrder + 'L', self._readBytes(4))[0]
        logger.debug('TIFF data at %d, %s-endian, IFD0 at offset %d (0x%X)',
                     self._origin, 'big' if self._byteOrder == '>' else 'little',
                     ifdOffset, ifdOffset)
        self._visited = set()
        self._seek(ifdOffset)
        return self._readDirectory(Tag)

    def _readBytes(self, length):
        data = self._stream.read(length)
        if len(data) < length:
            raise TruncatedDataError(
                'Expected %d bytes at %d, but only %d are available' % (
                    length, self._stream.tell() - len(data), len(data)))
        return data

    def _seek(self, offset, length=0):
        position = self._origin + offset
        if position + length > self._size:
            raise TruncatedDataError(
                'Offset %d (0x%X) with length %d is beyond the end of the data' % (
                    offset, offset, length))
        self._stream.seek(position)

    def _readDirectory(self, tagSet):
        """
        Read an IFD at the current stream position, recursing into
        sub-directories.  The next IFD offset that follows the entries is not
        read.

        :param tagSet: the TagSet of the directory.
        :returns: a Directory.
        """
        bom = self._byteOrder
        stream = self._stream
        self._visited.add(stream.tell())
        directory = Directory(tagSet)
        entryCount = struct.unpack(bom + 'H', self._readBytes(2))[0]
        logger.debug('Reading %d entries of %s IFD at %d (0x%X)',
                     entryCount, tagSet.name, stream.tell() - 2 - self._origin,
                     stream.tell() - 2 - self._origin)
        for _entry in range(entryCount):
            tagID, datatypeCode, count = struct.unpack(bom + 'HHL', self._readBytes(8))
            slot = self._readBytes(4)
            tag = tagSet.getTag(tagID)
            if tag is None:
                logger.debug('Skipping unknown tag %d (0x%X) in %s IFD', tagID, tagID, tagSet.name)
                continue
            datatype = Datatype.forValue(datatypeCode)
            if tag.isIFDPointer:
                offset = struct.unpack(bom + 'L', slot)[0]
                if self._origin + offset in self._visited:
                    logger.warning('IFD at offset %d (0x%X) was already read; skipping tag %s',
                                   offset, offset, tag)
                    continue
                logger.debug('Tag %s points to IFD at %d (0x%X)', tag, offset, offset)
                position = stream.tell()
                self._seek(offset)
                directory.put(tag, self._readDirectory(TagSet.forIFDPointerTag(tagID)))
                stream.seek(position)
                continue
            byteLength = datatype.size * count
            if byteLength <= 4:
                data = slot[:byteLength]
            else:
                offset = struct.unpack(bom + 'L', slot)[0]
                position = stream.tell()
                self._seek(offset, byteLength)
                data = self._readBytes(byteLength)
                stream.seek(position)
            directory.put(Field(tag, datatype), datatype.decode(data, bom))
        return directory


def read_exif(source):
    """
    Read a directory from a TIFF or EXIF source.

    :param source: bytes, a file path, a pathlib Path, or a binary
        filelike-object.  A filelike-object is closed when done.
    :returns: a Directory.
    """
    with Reader() as reader:
        reader.setSource(source)
        return reader.read()
