class TiffexifError(Exception):
    pass


class FormatError(TiffexifError):
    pass


class TruncatedDataError(TiffexifError, OSError):
    pass


class SourceAlreadySetError(TiffexifError, RuntimeError):
    pass


class SourceNotSetError(TiffexifError, RuntimeError):
    pass


class ForeignTagError(TiffexifError, ValueError):
    pass
