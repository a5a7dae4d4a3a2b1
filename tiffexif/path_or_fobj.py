import contextlib
import io
import shutil
import sys
import tempfile


def is_filelike_object(fobj):
    """
    Check if an object is file-like in that it has a read method.

    :param fobj: the possible filelike-object.
    :returns: True if the object is filelike.
    """
    return hasattr(fobj, 'read')


def is_seekable(fobj):
    return (hasattr(fobj, 'seekable') and fobj.seekable() and
            hasattr(fobj, 'tell'))


def open_seekable(pathOrObj):
    """
    Open a source for reading.  The caller owns the returned object and must
    close it.

    :param pathOrObj: one of bytes, bytearray, a file path, a pathlib Path, or
        a binary filelike-object.  A filelike-object that cannot seek is copied
        to a temporary file.
    :returns: a seekable binary filelike-object.
    """
    if isinstance(pathOrObj, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(pathOrObj))
    if not is_filelike_object(pathOrObj):
        return open(pathOrObj, 'rb')
    if is_seekable(pathOrObj):
        return pathOrObj
    fobj = tempfile.TemporaryFile('w+b')
    shutil.copyfileobj(pathOrObj, fobj)
    fobj.seek(0)
    pathOrObj.close()
    return fobj


@contextlib.contextmanager
def OpenPathOrFobj(pathOrObj, mode='rb'):
    """
    Given any of a file path, a pathlib Path object, a filelike-object that is
    seekable, a filelike-object that is not seekable, or '-' or None to
    indicate either stdin or stdout, return a seekable filelike-object.  A
    filelike-object passed in is not closed.

    :param pathOrObj: one of a file path, pathlib Path, bytes, filelike-object,
        or None or '-'.
    :param mode: the mode to open a path or temporary file as needed.  This
        won't affect a seekable filelike-object.  If '-' or None is specified,
        the presence of 'w' determines if stdout or stdin is opened (always in
        binary mode).
    :yields: a seekable filelike object.
    """
    if pathOrObj == '-' or pathOrObj is None:
        pathOrObj = sys.stdout.buffer if 'w' in mode.lower() else sys.stdin.buffer
    if isinstance(pathOrObj, (bytes, bytearray, memoryview)) and 'w' not in mode.lower():
        yield io.BytesIO(bytes(pathOrObj))
    elif not is_filelike_object(pathOrObj) and not hasattr(pathOrObj, 'write'):
        with open(pathOrObj, mode) as fobj:
            yield fobj
    elif is_seekable(pathOrObj) and hasattr(pathOrObj, 'truncate'):
        yield pathOrObj
    elif 'w' not in mode.lower():
        # The temporary file is left for garbage collection to close, so it
        # can outlive this context.
        fobj = tempfile.TemporaryFile('w+b')
        shutil.copyfileobj(pathOrObj, fobj)
        fobj.seek(0)
        yield fobj
    else:
        with tempfile.TemporaryFile('w+b') as fobj:
            yield fobj
            fobj.seek(0)
            shutil.copyfileobj(fobj, pathOrObj)
