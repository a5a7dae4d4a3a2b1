import io
import logging
import struct

import pytest

import tiffexif
from tiffexif import Datatype, EXIFTag, GPSTag, InteroperabilityTag, Rational, Reader, Tag

from .tiffbuilder import SAMPLE_ENTRIES, SubIFD, build_tiff, sample_directory

SCENARIO_A = bytes.fromhex('4D4D002A000000080001010000030000000100400000')


def test_read_minimal():
    directory = tiffexif.read_exif(SCENARIO_A)
    assert directory.getTagSet() is Tag
    assert directory.size() == 1
    assert directory.getValue(Tag.ImageWidth) == 64


@pytest.mark.parametrize('bigEndian', [True, False])
@pytest.mark.parametrize('exifMarker', [True, False])
def test_read_sample(bigEndian, exifMarker):
    data = build_tiff(SAMPLE_ENTRIES, bigEndian=bigEndian, exifMarker=exifMarker)
    directory = tiffexif.read_exif(data)
    assert directory == sample_directory()
    assert directory.getValue(Tag.Make) == 'Canon'
    assert directory.getValue(Tag.XResolution) == Rational(72, 1)
    exif = directory.getValue(Tag.EXIFIFD)
    assert exif.getTagSet() is EXIFTag
    assert exif.getValue(EXIFTag.ExifVersion) == b'0220'
    assert exif.getValue(EXIFTag.ShutterSpeedValue) == Rational(117, 16)


def test_byte_order_symmetry():
    entries = [
        (256, 3, 4729),
        (257, 4, 3000000),
        (270, 2, 'A longer description'),
        (282, 5, Rational(300, 7)),
        (34853, 4, SubIFD([
            (2, 5, [Rational(40, 1), Rational(26, 1), Rational(4621, 100)]),
            (6, 5, Rational(0, 1)),
            (31, 5, Rational(5, 0)),
        ])),
    ]
    big = tiffexif.read_exif(build_tiff(entries, bigEndian=True))
    little = tiffexif.read_exif(build_tiff(entries, bigEndian=False))
    assert big == little
    assert big.getValue(Tag.ImageLength) == 3000000
    gps = big.getValue(Tag.GPSIFD)
    assert gps.getTagSet() is GPSTag
    assert gps.getValue(GPSTag.GPSLatitude) == Rational(40, 1)
    assert gps.getValue(GPSTag.GPSAltitude) == Rational(0, 1)
    assert gps.getValue(GPSTag.GPSHPositioningError) == Rational(5, 0)


def test_sub_ifd_linkage():
    data = build_tiff([
        (256, 3, 64),
        (34665, 4, SubIFD([
            (33434, 5, Rational(1, 100)),
            (40965, 4, SubIFD([
                (1, 2, 'R98'),
            ])),
        ])),
        (34853, 4, SubIFD([
            (1, 2, 'N'),
        ])),
    ])
    directory = tiffexif.read_exif(data)
    assert directory.size() == 3
    exif = directory.getValue(Tag.EXIFIFD)
    assert exif.size() == 2
    interop = exif.getValue(EXIFTag.InteroperabilityIFD)
    assert interop.getTagSet() is InteroperabilityTag
    assert interop.getValue(InteroperabilityTag.InteroperabilityIndex) == 'R98'
    gps = directory.getValue(Tag.GPSIFD)
    assert gps.getValue(GPSTag.GPSLatitudeRef) == 'N'
    pointerField = [field for field in directory if field.tag is Tag.EXIFIFD][0]
    assert pointerField.datatype is Datatype.LONG


@pytest.mark.parametrize('bigEndian', [True, False])
def test_inline_boundary(bigEndian):
    bom = '>' if bigEndian else '<'
    data = build_tiff([
        (270, 2, 'abc'),
        (271, 2, 'abcd'),
        (272, 7, 3, b'xyz'),
        (305, 7, 5, b'12345'),
        (318, 3, 2, struct.pack(bom + 'HH', 5, 6)),
        (319, 3, 3, struct.pack(bom + 'HHH', 7, 8, 9)),
    ], bigEndian=bigEndian)
    directory = tiffexif.read_exif(data)
    assert directory.getValue(Tag.ImageDescription) == 'abc'
    assert directory.getValue(Tag.Make) == 'abcd'
    assert directory.getValue(Tag.Model) == b'xyz'
    assert directory.getValue(Tag.Software) == b'12345'
    assert directory.getValue(Tag.WhitePoint) == 5
    assert directory.getValue(Tag.PrimaryChromaticities) == 7


def test_unknown_tags_are_skipped(caplog):
    data = build_tiff([
        (256, 3, 64),
        (700, 1, b'<x:xmpmeta/>'),
        (33434, 5, Rational(1, 160)),
        (50000, 3, 7),
    ])
    with caplog.at_level(logging.DEBUG):
        directory = tiffexif.read_exif(data)
    assert directory.size() == 1
    assert directory.getValue(Tag.ImageWidth) == 64
    assert 'Skipping unknown tag 700' in caplog.text
    assert 'Skipping unknown tag 33434' in caplog.text


def test_unknown_datatype():
    data = build_tiff([(270, 99, 3, b'abc')])
    directory = tiffexif.read_exif(data)
    field = next(iter(directory))
    assert field.datatype is Datatype.UNDEFINED
    assert directory.getValue(Tag.ImageDescription) == b'abc'


def test_next_ifd_is_not_followed():
    data = bytearray(build_tiff([(256, 3, 64)]))
    # link a second IFD after the first
    data[22:26] = struct.pack('>L', len(data))
    data += struct.pack('>HHHL', 1, 257, 3, 1) + b'\x00\x20\x00\x00' + b'\x00' * 4
    directory = tiffexif.read_exif(bytes(data))
    assert directory.size() == 1
    assert directory.getValue(Tag.ImageLength) is None


def test_repeated_ifd(caplog):
    data = build_tiff([
        (256, 3, 64),
        (34665, 4, 1, struct.pack('>L', 8)),
    ])
    with caplog.at_level(logging.WARNING):
        directory = tiffexif.read_exif(data)
    assert directory.size() == 1
    assert 'already read' in caplog.text


@pytest.mark.parametrize('data', [
    b'XX',
    b'XX\x00',
    b'XX\x00\x2a\x00\x00\x00\x08',
    b'Exif\x00\x00XX',
    b'Exif\x00\x00XX\x00\x2a\x00\x00\x00\x08',
    b'\x89PNG\r\n\x1a\n',
    b'MI',
])
def test_bad_signature(data):
    with pytest.raises(tiffexif.FormatError, match='byte order'):
        tiffexif.read_exif(data)


def test_bad_byte_order():
    with pytest.raises(tiffexif.FormatError, match='byte order'):
        tiffexif.read_exif(b'XX\x00\x2a\x00\x00\x00\x08\x00\x00')


@pytest.mark.parametrize('data', [
    b'',
    b'M',
    b'MM',
    b'II\x2a',
    b'MM\x00\x2a',
    b'MM\x00\x2a\x00\x00\x00\x08',
    b'MM\x00\x2a\x00\x00\x00\x08\x00',
    b'MM\x00\x2a\x00\x00\x10\x00\x00\x01',
    SCENARIO_A[:-3],
    build_tiff([(270, 2, 10, struct.pack('>L', 5000))]),
    build_tiff([(34665, 4, 1, struct.pack('>L', 5000))]),
    build_tiff([(270, 2, 'A description')])[:-4],
])
def test_truncated(data):
    with pytest.raises(tiffexif.TruncatedDataError):
        tiffexif.read_exif(data)
    with pytest.raises(OSError):
        tiffexif.read_exif(data)


def test_set_source_twice():
    reader = Reader()
    reader.setSource(SCENARIO_A)
    with pytest.raises(tiffexif.SourceAlreadySetError):
        reader.setSource(SCENARIO_A)
    reader.close()
    reader.setSource(SCENARIO_A)
    assert reader.read().size() == 1
    reader.close()
    reader.close()


def test_read_without_source():
    reader = Reader()
    with pytest.raises(tiffexif.SourceNotSetError):
        reader.read()
    with pytest.raises(RuntimeError):
        reader.read()


def test_context_manager_closes_stream():
    stream = io.BytesIO(SCENARIO_A)
    with Reader() as reader:
        reader.setSource(stream)
        directory = reader.read()
    assert stream.closed
    assert directory.getValue(Tag.ImageWidth) == 64
    with pytest.raises(tiffexif.SourceNotSetError):
        reader.read()


def test_read_twice():
    with Reader() as reader:
        reader.setSource(io.BytesIO(SCENARIO_A))
        first = reader.read()
    with Reader() as reader:
        reader.setSource(bytearray(SCENARIO_A))
        assert reader.read() == first


def test_read_from_stream_position():
    stream = io.BytesIO(b'JUNK' * 3 + build_tiff(SAMPLE_ENTRIES))
    stream.seek(12)
    assert tiffexif.read_exif(stream) == sample_directory()


def test_read_unseekable():
    stream = io.BytesIO(build_tiff(SAMPLE_ENTRIES, exifMarker=True))
    stream.seekable = lambda: False
    assert tiffexif.read_exif(stream) == sample_directory()
    assert stream.closed


def test_read_path(tmp_path):
    path = tmp_path / 'sample.tif'
    path.write_bytes(build_tiff(SAMPLE_ENTRIES, bigEndian=False))
    assert tiffexif.read_exif(path) == sample_directory()
    assert tiffexif.read_exif(str(path)) == sample_directory()


def test_read_missing_path(tmp_path):
    with pytest.raises(OSError):
        tiffexif.read_exif(str(tmp_path / 'nosuchfile.tif'))


def test_read_debug_logging(caplog):
    with caplog.at_level(logging.DEBUG):
        tiffexif.read_exif(build_tiff(SAMPLE_ENTRIES))
    assert 'big-endian, IFD0 at offset 8' in caplog.text
    assert 'Reading 8 entries of BaselineTIFF IFD' in caplog.text
    assert 'Reading 6 entries of EXIF IFD' in caplog.text
