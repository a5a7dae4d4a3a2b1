import functools
import types

from .constants import Datatype, ExifTag, Tag
from .exceptions import ForeignTagError
from .rational import Rational


@functools.total_ordering
class Field:
    """
    The identity of a directory entry: a tag and the datatype its value was
    stored with.  Two fields with the same tag are the same field, whatever
    their datatypes.
    """

    def __init__(self, tag, datatype):
        self.tag = tag
        self.datatype = Datatype.forValue(datatype)

    def getTag(self):
        return self.tag

    def getDataType(self):
        return self.datatype

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return self.tag == other.tag

    def __lt__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return int(self.tag) < int(other.tag)

    def __hash__(self):
        return hash(self.tag)

    def __repr__(self):
        return 'Field(%s, %s)' % (self.tag.name, self.datatype.name)


def _normalize_value(value):
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


class Directory:
    """
    A set of fields read from one image file directory, all belonging to one
    TagSet.  Fields are kept in ascending tag order.  A value is a decoded
    primitive (int, float, or str), a Rational, bytes, or another Directory
    for IFD pointer tags.
    """

    def __init__(self, tagSet=Tag):
        """
        :param tagSet: the TagSet whose tags this directory holds.
        """
        self.tagSet = tagSet
        self._fields = {}

    def getTagSet(self):
        return self.tagSet

    def _resolveTag(self, tag):
        if isinstance(tag, ExifTag):
            if tag.tagSet is not self.tagSet:
                raise ForeignTagError('Tag %s is not in the %s tag set' % (tag, self.tagSet.name))
            return tag
        try:
            return self.tagSet[tag]
        except KeyError:
            raise ForeignTagError('Tag %s is not in the %s tag set' % (tag, self.tagSet.name))

    def put(self, key, *args):
        """
        Add a field to the directory, replacing any field with the same tag.
        This can be called as any of::

            put(field, value)
            put(tag, datatype, value)
            put(tag, subDirectory)

        A sub-directory is stored with the LONG datatype, as IFD pointers
        are.

        :param key: a Field or a tag.  A tag may be an ExifTag or anything
            that looks it up in this directory's tag set.
        """
        if isinstance(key, Field):
            if len(args) != 1:
                raise TypeError('put(field, value) takes exactly one value')
            field, value = Field(self._resolveTag(key.tag), key.datatype), args[0]
        elif len(args) == 2:
            field, value = Field(self._resolveTag(key), args[0]), args[1]
        elif len(args) == 1 and isinstance(args[0], Directory):
            field, value = Field(self._resolveTag(key), Datatype.LONG), args[0]
        else:
            raise TypeError('put() takes a field and a value, a tag, datatype, '
                            'and value, or a tag and a directory')
        self._fields.pop(field, None)
        self._fields[field] = _normalize_value(value)
        self._fields = dict(sorted(self._fields.items()))

    def getValue(self, tag):
        """
        Get the value of the field with a tag.

        :param tag: an ExifTag, a tag number, or a tag name.
        :returns: the value or None if there is no such field.
        """
        if not isinstance(tag, ExifTag):
            tag = self.tagSet.get(tag)
            if tag is None:
                return None
        for field, value in self._fields.items():
            if field.tag == tag:
                return value
        return None

    def getFields(self):
        """
        :returns: a read-only mapping of Field to value in tag order.
        """
        return types.MappingProxyType(self._fields)

    def size(self):
        """
        :returns: the number of fields in this directory, not counting those
            of any sub-directories.
        """
        return len(self._fields)

    def __len__(self):
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __contains__(self, key):
        if isinstance(key, Field):
            return key in self._fields
        return self.getValue(key) is not None

    def __eq__(self, other):
        if not isinstance(other, Directory):
            return NotImplemented
        return self.tagSet is other.tagSet and self._fields == other._fields

    def __hash__(self):
        return hash((self.tagSet.name, tuple(self._fields)))

    def __repr__(self):
        return '<Directory %s: %d field%s>' % (
            self.tagSet.name, len(self), '' if len(self) == 1 else 's')

    def toMap(self):
        """
        Get a plain dictionary of the directory.  Sub-directories are nested
        under the name of their pointer tag and rationals become dictionaries
        of numerator and denominator.

        :returns: a dictionary with 'tagSet' and 'fields' keys.
        """
        fields = {}
        for field, value in self._fields.items():
            if isinstance(value, (Directory, Rational)):
                value = value.toMap()
            fields[field.tag.name] = value
        return {'tagSet': self.tagSet.name, 'fields': fields}
