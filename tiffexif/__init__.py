import logging
from importlib.metadata import PackageNotFoundError, version

from .commands import exif_dump, exif_info, exif_serialize, main
from .constants import (Datatype, EXIFTag, ExifDatatype, ExifTag, GPSTag, InteroperabilityTag,
                        Tag, TagSet)
from .directory import Directory, Field
from .exceptions import (FormatError, ForeignTagError, SourceAlreadySetError, SourceNotSetError,
                         TiffexifError, TruncatedDataError)
from .jpeg import read_jpeg_exif
from .rational import Rational
from .reader import Reader, read_exif
from .serialization import (deserialize_directory, dump_directory, load_directory,
                            serialize_directory)

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    __version__ = None


logger = logging.getLogger(__name__)

# See http://docs.python.org/3.3/howto/logging.html#configuring-logging-for-a-library
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = (
    'Datatype', 'ExifDatatype',
    'Tag', 'EXIFTag', 'GPSTag', 'InteroperabilityTag', 'ExifTag', 'TagSet',

    'Directory',
    'Field',
    'Rational',

    'TiffexifError',
    'FormatError',
    'TruncatedDataError',
    'SourceAlreadySetError',
    'SourceNotSetError',
    'ForeignTagError',

    'Reader',
    'read_exif',
    'read_jpeg_exif',
    'serialize_directory',
    'dump_directory',
    'deserialize_directory',
    'load_directory',

    'exif_dump',
    'exif_info',
    'exif_serialize',

    '__version__',
    'main',
)
