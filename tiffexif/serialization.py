import base64
import binascii
import json
import logging

from .constants import Datatype, Tag, TagSet
from .directory import Directory, Field
from .exceptions import FormatError
from .path_or_fobj import OpenPathOrFobj
from .rational import Rational

logger = logging.getLogger(__name__)


def _serialize_value(value):
    if isinstance(value, Directory):
        return serialize_directory(value)
    if isinstance(value, Rational):
        return [value.numerator, value.denominator]
    if isinstance(value, bytes):
        return base64.b64encode(value).decode()
    return value


def serialize_directory(directory, parentTag=None):
    """
    Convert a directory to the structure of its persisted JSON form::

        {"parentTag": 34665, "fields": [{"tag": 33434, "dataType": 5,
                                         "value": [1, 160]}, ...]}

    Fields are in ascending tag order.  Sub-directories are nested as the
    value of their pointer field.  Bytes are Base64 encoded and rationals are
    [numerator, denominator] lists.

    :param directory: the Directory to serialize.
    :param parentTag: the pointer tag of the parent directory.  If None, this
        is the IFD pointer tag of the directory's tag set.  The baseline TIFF
        tag set has no parent tag.
    :returns: a dictionary that can be passed to json.dumps.
    """
    if parentTag is None:
        parentTag = directory.getTagSet().ifdPointerTag or None
    result = {}
    if parentTag is not None:
        result['parentTag'] = int(parentTag)
    result['fields'] = [{
        'tag': int(field.tag),
        'dataType': int(field.datatype),
        'value': _serialize_value(value),
    } for field, value in directory.getFields().items()]
    return result


def dump_directory(directory, dest=None, indent=2):
    """
    Write the persisted JSON form of a directory.

    :param directory: the Directory to serialize.
    :param dest: a file path, a binary filelike-object, or '-' for stdout.  If
        None, the JSON is returned instead.
    :param indent: the JSON indentation.  None for the most compact form.
    :returns: the JSON text if dest is None.
    """
    text = json.dumps(serialize_directory(directory), indent=indent)
    if dest is None:
        return text
    with OpenPathOrFobj(dest, 'wb') as fobj:
        fobj.write(text.encode() + b'\n')


def _deserialize_value(value, datatype):
    if datatype in (Datatype.RATIONAL, Datatype.SRATIONAL):
        if isinstance(value, dict) and 'numerator' in value and 'denominator' in value:
            value = [value['numerator'], value['denominator']]
        if not isinstance(value, list) or len(value) != 2:
            raise FormatError('A %s value must be a [numerator, denominator] list' % datatype.name)
        try:
            return Rational(*value)
        except (TypeError, ValueError):
            raise FormatError('Invalid %s value: %r' % (datatype.name, value))
    if isinstance(value, str) and datatype != Datatype.ASCII:
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error:
            raise FormatError('Value of datatype %s is not Base64 encoded' % datatype.name)
    if isinstance(value, list) and datatype == Datatype.UNDEFINED:
        try:
            return bytes(value)
        except (TypeError, ValueError):
            raise FormatError('An UNDEFINED value list must contain byte values')
    if isinstance(value, (dict, list)):
        raise FormatError('Unexpected value for datatype %s: %r' % (datatype.name, value))
    return value


def _tag_set_for_parent(parentTag):
    if parentTag is None:
        return Tag
    tagSet = TagSet.forIFDPointerTag(parentTag)
    if tagSet is None:
        raise FormatError('Unknown parentTag: %r' % (parentTag, ))
    return tagSet


def deserialize_directory(obj, parentTag=None):
    """
    Convert the structure of the persisted JSON form back to a directory.

    :param obj: a dictionary with a 'fields' list and an optional
        'parentTag'.
    :param parentTag: the pointer tag used when obj has no 'parentTag'.  If
        both are absent, the directory has the baseline TIFF tag set.
    :returns: a Directory.
    """
    if not isinstance(obj, dict):
        raise FormatError('A directory must be a JSON object')
    tagSet = _tag_set_for_parent(obj.get('parentTag', parentTag))
    fields = obj.get('fields')
    if not isinstance(fields, list):
        raise FormatError('A directory must have a list of fields')
    directory = Directory(tagSet)
    for entry in fields:
        if not isinstance(entry, dict):
            raise FormatError('A field must be a JSON object')
        # Resolve tag and datatype before looking at the value, since the
        # value's conversion depends on both.
        if entry.get('tag') is None:
            raise FormatError('Missing tag in %s field' % tagSet.name)
        tag = tagSet.getTag(entry['tag'])
        if tag is None:
            raise FormatError('Unknown %s tag: %r' % (tagSet.name, entry['tag']))
        if entry.get('dataType') is None:
            raise FormatError('Missing dataType for tag %s' % tag)
        datatype = Datatype.forValue(entry['dataType'])
        if entry.get('value') is None:
            raise FormatError('Missing value for tag %s' % tag)
        value = entry['value']
        if tag.isIFDPointer and isinstance(value, dict):
            value = deserialize_directory(value, int(tag))
        else:
            value = _deserialize_value(value, datatype)
        directory.put(Field(tag, datatype), value)
    logger.debug('Deserialized %s directory with %d fields', tagSet.name, len(directory))
    return directory


def load_directory(source):
    """
    Read a directory from its persisted JSON form.

    :param source: JSON text, bytes, or a filelike-object.
    :returns: a Directory.
    """
    try:
        if hasattr(source, 'read'):
            obj = json.load(source)
        else:
            obj = json.loads(source)
    except ValueError as exc:
        raise FormatError('Invalid directory JSON: %s' % exc)
    return deserialize_directory(obj)
