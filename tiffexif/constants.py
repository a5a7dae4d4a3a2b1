# flake8: noqa: E501
# Disable flake8 line-length check (E501), it makes this file harder to read

import struct

from .rational import Rational


def _normalize(key):
    return str(key).upper().replace('_', '')


class TiffConstant(int):
    def __new__(cls, value, *args, **kwargs):
        return super().__new__(cls, value)

    def __init__(self, value, constantDict):
        """
        Create a constant.  The constant is at least a value and an
        associated name.  It can have other properties.

        :param value: an integer.
        :param constantDict: a dictionary with at least a 'name' key.
        """
        self.__dict__.update(constantDict)
        self.value = value
        self.name = str(getattr(self, 'name', self.value))

    def __str__(self):
        if str(self.name) != str(self.value):
            return '%s %d (0x%X)' % (self.name, self.value, self.value)
        return '%d (0x%X)' % (self.value, self.value)

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, self)

    def __int__(self):
        return self.value

    def __eq__(self, other):
        if isinstance(other, TiffConstant):
            return self.value == other.value and self.name == other.name
        try:
            intOther = int(other)
            return self.value == intOther
        except ValueError:
            try:
                intOther = int(other, 0)
                return self.value == intOther
            except ValueError:
                pass
        except TypeError:
            return False
        return _normalize(self.name) == _normalize(other)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        # Same as hash(int(self)).  Equality with names is not reflected here.
        return hash(self.value)


class ExifDatatype(TiffConstant):
    def decode(self, data, byteOrder='>'):
        """
        Decode the bytes of a field value.  Numeric datatypes decode the first
        component of the value; ASCII and UNDEFINED use all of it.

        SHORT and LONG values accept fewer bytes than their nominal width:
        LONG reads 8, 4, or 2 bytes, whichever is available, and both fall
        back to the unsigned value of the first byte.  Inline values written
        by some encoders depend on this.

        ASCII is always decoded to a str.  Bytes that are not valid UTF-8 map
        to lone surrogates, which json escapes and reads back unchanged.

        :param data: the raw bytes of the value.
        :param byteOrder: '>' for big-endian (Motorola) or '<' for
            little-endian (Intel).
        :returns: an int, float, str, Rational, or bytes.
        """
        data = bytes(data)
        if self.name == 'ASCII':
            if data[-1:] == b'\x00':
                data = data[:-1]
            return data.decode('utf-8', 'surrogateescape')
        if self.name == 'UNDEFINED' or not len(data):
            return data
        if self.name in ('RATIONAL', 'SRATIONAL'):
            # Both halves are read as signed 32-bit values
            return Rational(*struct.unpack(byteOrder + 'll', data[:8]))
        if self.name in ('BYTE', 'SBYTE', 'FLOAT', 'DOUBLE'):
            return struct.unpack(byteOrder + self.pack, data[:self.size])[0]
        if self.name in ('SHORT', 'SSHORT'):
            width = 2 if len(data) >= 2 else 1
        else:
            width = next((w for w in (8, 4) if len(data) >= w), 2 if len(data) == 2 else 1)
        if width == 1:
            return data[0]
        pack = {8: 'q', 4: 'l', 2: 'h'}[width]
        if not self.name.startswith('S'):
            pack = pack.upper()
        return struct.unpack(byteOrder + pack, data[:width])[0]


class ExifTag(TiffConstant):
    isIFDPointer = False
    tagSet = None

    def __eq__(self, other):
        if isinstance(other, ExifTag):
            return self.value == other.value and self.tagSet is other.tagSet
        return super().__eq__(other)

    __hash__ = TiffConstant.__hash__


class TiffConstantSet:
    def __init__(self, setClass, setDict):
        """
        Create a set of TiffConstant values.

        :param setClass: the class for the constants.  This must be a subclass
            of TiffConstant.
        :param setDict: a dictionary to turn into TiffConstant values.  The
            keys should be integers and the values dictionaries with at least a
            name key.
        """
        entries = {}
        names = {}
        for k, v in setDict.items():
            entry = setClass(k, v)
            entries[k] = entry
            names[_normalize(entry.name)] = entry
            names[str(int(entry))] = entry
            for altname in v.get('altnames', ()):
                names[_normalize(altname)] = entry
        self._entries = dict(sorted(entries.items()))
        self._names = names
        self._setClass = setClass

    def _lookup(self, key):
        if isinstance(key, TiffConstant):
            key = int(key)
        key = str(key)
        try:
            key = str(int(key, 0))
        except ValueError:
            pass
        return self._names[_normalize(key)]

    def __contains__(self, other):
        try:
            self._lookup(other)
        except KeyError:
            return False
        return True

    def __getattr__(self, key):
        if key.startswith('_'):
            raise AttributeError(key)
        try:
            return self._lookup(key)
        except KeyError:
            raise AttributeError("'%s' object has no attribute '%s'" % (type(self).__name__, key))

    def __getitem__(self, key):
        return self._lookup(key)

    def get(self, key, default=None):
        try:
            return self._lookup(key)
        except KeyError:
            return default

    def __iter__(self):
        yield from self._entries.values()

    def __len__(self):
        return len(self._entries)


class DatatypeSet(TiffConstantSet):
    def forValue(self, value):
        """
        Get a datatype by its TIFF type code.  Unrecognized codes are treated
        as UNDEFINED so that the value is kept as raw bytes.

        :param value: the numeric datatype code.
        :returns: an ExifDatatype.
        """
        try:
            return self._entries.get(int(value), self._entries[7])
        except (TypeError, ValueError):
            return self._entries[7]

    forTIFFTagType = forValue


class TagSet(TiffConstantSet):
    """
    The tags that may appear in one kind of image file directory.  Each tag
    set other than the baseline TIFF set is reached from a parent directory
    through its IFD pointer tag.
    """

    _byPointerTag = {}
    _byName = {}

    def __init__(self, name, ifdPointerTag, setDict):
        super().__init__(ExifTag, setDict)
        self.name = name
        self.ifdPointerTag = ifdPointerTag
        for tag in self._entries.values():
            tag.tagSet = self
        if ifdPointerTag:
            TagSet._byPointerTag[ifdPointerTag] = self
        TagSet._byName[_normalize(name)] = self

    def __repr__(self):
        return '<TagSet %s>' % self.name

    def __str__(self):
        return self.name

    def containsTag(self, tagID):
        return self.getTag(tagID) is not None

    def getTag(self, tagID):
        """
        :param tagID: the numeric tag ID.
        :returns: the ExifTag with that ID in this set, or None.  Values that
            are not numbers are never in the set.
        """
        try:
            return self._entries.get(int(tagID))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def forIFDPointerTag(tagID):
        """
        :param tagID: the numeric ID of a tag in a parent directory.
        :returns: the TagSet of the sub-IFD that tag points to, or None if it
            is not a pointer tag.
        """
        try:
            return TagSet._byPointerTag.get(int(tagID))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def forName(name):
        return TagSet._byName.get(_normalize(name))

    @staticmethod
    def all():
        return list(TagSet._byName.values())


Datatype = DatatypeSet(ExifDatatype, {
    1: {'pack': 'B', 'name': 'BYTE', 'size': 1, 'desc': 'UINT8 - unsigned byte'},
    2: {'pack': None, 'name': 'ASCII', 'size': 1, 'desc': 'null-terminated string'},
    3: {'pack': 'H', 'name': 'SHORT', 'size': 2, 'desc': 'UINT16 - unsigned short'},
    4: {'pack': 'L', 'name': 'LONG', 'size': 4, 'desc': 'UINT32 - unsigned long', 'altnames': {'DWORD'}},
    5: {'pack': 'll', 'name': 'RATIONAL', 'size': 8, 'desc': 'two 32-bit integers forming a numerator and a denominator'},
    6: {'pack': 'b', 'name': 'SBYTE', 'size': 1, 'desc': 'INT8 - signed byte'},
    7: {'pack': None, 'name': 'UNDEFINED', 'size': 1, 'desc': 'arbitrary binary data'},
    8: {'pack': 'h', 'name': 'SSHORT', 'size': 2, 'desc': 'INT16 - signed short'},
    9: {'pack': 'l', 'name': 'SLONG', 'size': 4, 'desc': 'INT32 - signed long'},
    10: {'pack': 'll', 'name': 'SRATIONAL', 'size': 8, 'desc': 'two INT32 - two signed longs forming a numerator and a denominator'},
    11: {'pack': 'f', 'name': 'FLOAT', 'size': 4, 'desc': 'binary32 - IEEE-754 single-precision float'},
    12: {'pack': 'd', 'name': 'DOUBLE', 'size': 8, 'desc': 'binary64 - IEEE-754 double precision float'},
})

Tag = TagSet('BaselineTIFF', 0, {
    256: {'name': 'ImageWidth', 'desc': 'The number of columns in the image'},
    257: {'name': 'ImageLength', 'altnames': {'ImageHeight'}, 'desc': 'The number of rows of pixels in the image'},
    258: {'name': 'BitsPerSample', 'desc': 'Number of bits per component'},
    259: {'name': 'Compression', 'desc': 'Compression scheme used on the image data'},
    262: {'name': 'PhotometricInterpretation', 'altnames': {'Photometric'}, 'desc': 'The color space of the image data'},
    270: {'name': 'ImageDescription', 'desc': 'A string that describes the subject of the image'},
    271: {'name': 'Make', 'desc': 'The scanner manufacturer'},
    272: {'name': 'Model', 'desc': 'The scanner model name or number'},
    273: {'name': 'StripOffsets', 'desc': 'For each strip, the byte offset of that strip'},
    274: {'name': 'Orientation', 'desc': 'The orientation of the image with respect to the rows and columns'},
    277: {'name': 'SamplesPerPixel', 'desc': 'The number of components per pixel'},
    278: {'name': 'RowsPerStrip', 'desc': 'The number of rows per strip'},
    279: {'name': 'StripByteCounts', 'desc': 'For each strip, the number of bytes in the strip after compression'},
    282: {'name': 'XResolution', 'desc': 'The number of pixels per ResolutionUnit in the ImageWidth direction'},
    283: {'name': 'YResolution', 'desc': 'The number of pixels per ResolutionUnit in the ImageLength direction'},
    284: {'name': 'PlanarConfiguration', 'altnames': {'PlanarConfig'}, 'desc': 'How the components of each pixel are stored'},
    296: {'name': 'ResolutionUnit', 'desc': 'The unit of measurement for XResolution and YResolution'},
    301: {'name': 'TransferFunction', 'desc': 'Transfer function'},
    305: {'name': 'Software', 'desc': 'Name and version number of the software package(s) used to create the image'},
    306: {'name': 'DateTime', 'desc': 'Date and time of image creation'},
    315: {'name': 'Artist', 'desc': 'Person who created the image'},
    318: {'name': 'WhitePoint', 'desc': 'White point chromaticity'},
    319: {'name': 'PrimaryChromaticities', 'desc': 'Chromaticities of primaries'},
    513: {'name': 'JPEGInterchangeFormat', 'altnames': {'JPEGIFOffset'}, 'desc': 'Offset to JPEG SOI'},
    514: {'name': 'JPEGInterchangeFormatLength', 'altnames': {'JPEGIFByteCount'}, 'desc': 'Bytes of JPEG data'},
    529: {'name': 'YCbCrCoefficients', 'desc': 'Color space transformation matrix coefficients'},
    530: {'name': 'YCbCrSubSampling', 'altnames': {'YCbCrSubsampling'}, 'desc': 'Subsampling ratio of Y to C'},
    531: {'name': 'YCbCrPositioning', 'desc': 'Y and C positioning'},
    532: {'name': 'ReferenceBlackWhite', 'desc': 'Pair of black and white reference values'},
    33432: {'name': 'Copyright', 'desc': 'Copyright holder'},
    34665: {'name': 'EXIFIFD', 'altnames': {'ExifIFDPointer', 'ExifOffset'}, 'isIFDPointer': True, 'desc': 'Exif IFD pointer'},
    34853: {'name': 'GPSIFD', 'altnames': {'GPSIFDPointer', 'GPSInfo'}, 'isIFDPointer': True, 'desc': 'GPS IFD pointer'},
    40965: {'name': 'InteroperabilityIFD', 'altnames': {'InteroperabilityIFDPointer', 'InteropOffset'}, 'isIFDPointer': True, 'desc': 'Interoperability IFD pointer'},
})

EXIFTag = TagSet('EXIF', 34665, {
    33434: {'name': 'ExposureTime', 'desc': 'Exposure time'},
    33437: {'name': 'FNumber', 'desc': 'F number'},
    34850: {'name': 'ExposureProgram', 'desc': 'Exposure program'},
    34852: {'name': 'SpectralSensitivity', 'desc': 'Spectral sensitivity'},
    34855: {'name': 'PhotographicSensitivity', 'altnames': {'ISOSpeedRatings'}, 'desc': 'ISO speed rating'},
    34856: {'name': 'OECF', 'desc': 'Optoelectric conversion factor'},
    34864: {'name': 'SensitivityType'},
    34865: {'name': 'StandardOutputSensitivity'},
    34866: {'name': 'RecommendedExposureIndex'},
    34867: {'name': 'ISOSpeed'},
    34868: {'name': 'ISOSpeedLatitudeyyy'},
    34869: {'name': 'ISOSpeedLatitudezzz'},
    36864: {'name': 'ExifVersion', 'desc': 'Exif version'},
    36867: {'name': 'DateTimeOriginal', 'desc': 'Date and time of original data'},
    36868: {'name': 'DateTimeDigitized', 'altnames': {'CreateDate'}, 'desc': 'Date and time of digital data generation'},
    36880: {'name': 'OffsetTime'},
    36881: {'name': 'OffsetTimeOriginal'},
    36882: {'name': 'OffsetTimeDigitized'},
    37121: {'name': 'ComponentsConfiguration', 'desc': 'Meaning of each component'},
    37122: {'name': 'CompressedBitsPerPixel', 'desc': 'Image compression mode'},
    37377: {'name': 'ShutterSpeedValue', 'altnames': {'ShutterSpeed'}, 'desc': 'Shutter speed'},
    37378: {'name': 'Aperture', 'altnames': {'ApertureValue'}, 'desc': 'Aperture'},
    37379: {'name': 'Brightness', 'altnames': {'BrightnessValue'}, 'desc': 'Brightness'},
    37380: {'name': 'ExposureBias', 'altnames': {'ExposureBiasValue'}, 'desc': 'Exposure bias'},
    37381: {'name': 'MaxApertureValue', 'desc': 'Maximum lens aperture'},
    37382: {'name': 'SubjectDistance', 'desc': 'Subject distance'},
    37383: {'name': 'MeteringMode', 'desc': 'Metering mode'},
    37384: {'name': 'LightSource', 'desc': 'Light source'},
    37385: {'name': 'Flash', 'desc': 'Flash'},
    37386: {'name': 'FocalLength', 'desc': 'Lens focal length'},
    37396: {'name': 'SubjectArea', 'desc': 'Subject area'},
    37500: {'name': 'MakerNote', 'desc': 'Manufacturer notes'},
    37510: {'name': 'UserComment', 'desc': 'User comments'},
    37520: {'name': 'SubSecTime', 'desc': 'DateTime subseconds'},
    37521: {'name': 'SubSecTimeOriginal', 'desc': 'DateTimeOriginal subseconds'},
    37522: {'name': 'SubSecTimeDigitized', 'desc': 'DateTimeDigitized subseconds'},
    37888: {'name': 'Temperature', 'altnames': {'AmbientTemperature'}},
    37889: {'name': 'Humidity'},
    37890: {'name': 'Pressure'},
    37891: {'name': 'WaterDepth'},
    37892: {'name': 'Acceleration'},
    37893: {'name': 'CameraElevationAngle'},
    40960: {'name': 'FlashpixVersion', 'desc': 'Supported Flashpix version'},
    40961: {'name': 'ColorSpace', 'desc': 'Color space information'},
    40962: {'name': 'PixelXDimension', 'desc': 'Valid image width'},
    40963: {'name': 'PixelYDimension', 'desc': 'Valid image height'},
    40964: {'name': 'RelatedSoundFile', 'desc': 'Related audio file'},
    40965: {'name': 'InteroperabilityIFD', 'altnames': {'InteroperabilityIFDPointer', 'InteropOffset'}, 'isIFDPointer': True, 'desc': 'Interoperability IFD pointer'},
    41483: {'name': 'FlashEnergy', 'desc': 'Flash energy'},
    41484: {'name': 'SpatialFrequencyResponse', 'desc': 'Spatial frequency response'},
    41486: {'name': 'FocalPlaneXResolution', 'desc': 'Focal plane X resolution'},
    41487: {'name': 'FocalPlaneYResolution', 'desc': 'Focal plane Y resolution'},
    41488: {'name': 'FocalPlaneResolutionUnit', 'desc': 'Focal plane resolution unit'},
    41492: {'name': 'SubjectLocation', 'desc': 'Subject location'},
    41493: {'name': 'ExposureIndex', 'desc': 'Exposure index'},
    41495: {'name': 'SensingMethod', 'desc': 'Sensing method'},
    41728: {'name': 'FileSource', 'desc': 'File source'},
    41729: {'name': 'SceneType', 'desc': 'Scene type'},
    41730: {'name': 'CFAPattern', 'desc': 'CFA pattern'},
    41985: {'name': 'CustomRendered', 'desc': 'Custom image processing'},
    41986: {'name': 'ExposureMode', 'desc': 'Exposure mode'},
    41987: {'name': 'WhiteBalance', 'desc': 'White balance'},
    41988: {'name': 'DigitalZoomRatio', 'desc': 'Digital zoom ratio'},
    41989: {'name': 'FocalLengthIn35mmFilm', 'desc': 'Focal length in 35 mm film'},
    41990: {'name': 'SceneCaptureType', 'desc': 'Scene capture type'},
    41991: {'name': 'GainControl', 'desc': 'Gain control'},
    41992: {'name': 'Contrast', 'desc': 'Contrast'},
    41993: {'name': 'Saturation', 'desc': 'Saturation'},
    41994: {'name': 'Sharpness', 'desc': 'Sharpness'},
    41995: {'name': 'DeviceSettingDescription', 'desc': 'Device settings description'},
    41996: {'name': 'SubjectDistanceRange', 'desc': 'Subject distance range'},
    42016: {'name': 'ImageUniqueID', 'desc': 'Unique image ID'},
    42032: {'name': 'CameraOwnerName', 'altnames': {'OwnerName'}},
    42033: {'name': 'BodySerialNumber', 'altnames': {'SerialNumber'}},
    42034: {'name': 'LensSpecification', 'altnames': {'LensInfo'}},
    42035: {'name': 'LensMake'},
    42036: {'name': 'LensModel'},
    42240: {'name': 'Gamma'},
})

GPSTag = TagSet('GPS', 34853, {
    0: {'name': 'GPSVersionID', 'altnames': {'VersionID'}, 'desc': 'GPS tag version'},
    1: {'name': 'GPSLatitudeRef', 'altnames': {'LatitudeRef'}, 'desc': 'North or South Latitude'},
    2: {'name': 'GPSLatitude', 'altnames': {'Latitude'}, 'desc': 'Latitude'},
    3: {'name': 'GPSLongitudeRef', 'altnames': {'LongitudeRef'}, 'desc': 'East or West Longitude'},
    4: {'name': 'GPSLongitude', 'altnames': {'Longitude'}, 'desc': 'Longitude'},
    5: {'name': 'GPSAltitudeRef', 'altnames': {'AltitudeRef'}, 'desc': 'Altitude reference'},
    6: {'name': 'GPSAltitude', 'altnames': {'Altitude'}, 'desc': 'Altitude'},
    7: {'name': 'GPSTimeStamp', 'altnames': {'TimeStamp'}, 'desc': 'GPS time (atomic clock)'},
    8: {'name': 'GPSSatellites', 'altnames': {'Satellites'}, 'desc': 'GPS satellites used for measurement'},
    9: {'name': 'GPSStatus', 'altnames': {'Status'}, 'desc': 'GPS receiver status'},
    10: {'name': 'GPSMeasureMode', 'altnames': {'MeasureMode'}, 'desc': 'GPS measurement mode'},
    11: {'name': 'GPSDOP', 'altnames': {'DOP'}, 'desc': 'Measurement precision'},
    12: {'name': 'GPSSpeedRef', 'altnames': {'SpeedRef'}, 'desc': 'Speed unit'},
    13: {'name': 'GPSSpeed', 'altnames': {'Speed'}, 'desc': 'Speed of GPS receiver'},
    14: {'name': 'GPSTrackRef', 'altnames': {'TrackRef'}, 'desc': 'Reference for direction of movement'},
    15: {'name': 'GPSTrack', 'altnames': {'Track'}, 'desc': 'Direction of movement'},
    16: {'name': 'GPSImgDirectionRef', 'altnames': {'ImgDirectionRef'}, 'desc': 'Reference for direction of image'},
    17: {'name': 'GPSImgDirection', 'altnames': {'ImgDirection'}, 'desc': 'Direction of image'},
    18: {'name': 'GPSMapDatum', 'altnames': {'MapDatum'}, 'desc': 'Geodetic survey data used'},
    19: {'name': 'GPSDestLatitudeRef', 'altnames': {'DestLatitudeRef'}, 'desc': 'Reference for latitude of destination'},
    20: {'name': 'GPSDestLatitude', 'altnames': {'DestLatitude'}, 'desc': 'Latitude of destination'},
    21: {'name': 'GPSDestLongitudeRef', 'altnames': {'DestLongitudeRef'}, 'desc': 'Reference for longitude of destination'},
    22: {'name': 'GPSDestLongitude', 'altnames': {'DestLongitude'}, 'desc': 'Longitude of destination'},
    23: {'name': 'GPSDestBearingRef', 'altnames': {'DestBearingRef'}, 'desc': 'Reference for bearing of destination'},
    24: {'name': 'GPSDestBearing', 'altnames': {'DestBearing'}, 'desc': 'Bearing of destination'},
    25: {'name': 'GPSDestDistanceRef', 'altnames': {'DestDistanceRef'}, 'desc': 'Reference for distance to destination'},
    26: {'name': 'GPSDestDistance', 'altnames': {'DestDistance'}, 'desc': 'Distance to destination'},
    27: {'name': 'GPSProcessingMethod', 'altnames': {'ProcessingMethod'}, 'desc': 'Name of GPS processing method'},
    28: {'name': 'GPSAreaInformation', 'altnames': {'AreaInformation'}, 'desc': 'Name of GPS area'},
    29: {'name': 'GPSDateStamp', 'altnames': {'DateStamp'}, 'desc': 'GPS date'},
    30: {'name': 'GPSDifferential', 'altnames': {'Differential'}, 'desc': 'GPS differential correction'},
    31: {'name': 'GPSHPositioningError', 'altnames': {'GPSPositioningError', 'PositioningError'}, 'desc': 'Horizontal positioning error in meters'},
})

InteroperabilityTag = TagSet('Interoperability', 40965, {
    1: {'name': 'InteroperabilityIndex', 'desc': 'Interoperability identification'},
})
