import argparse
import base64
import json
import logging
import os
import sys

import yaml

from .directory import Directory
from .exceptions import TiffexifError
from .jpeg import JPEG_SOI, read_jpeg_exif
from .path_or_fobj import OpenPathOrFobj
from .rational import Rational
from .reader import read_exif
from .serialization import dump_directory, load_directory

logger = logging.getLogger(__name__)


class ThrowOnLevelHandler(logging.NullHandler):
    def handle(self, record):
        raise TiffexifError(record.getMessage())


def read_directory(source):
    """
    Read a directory from a TIFF or EXIF blob, a JPEG, or the persisted JSON
    form, based on the first bytes of the source.

    :param source: a file path, a binary filelike-object, or '-' for stdin.
    :returns: a Directory or None if a JPEG has no EXIF data.
    """
    with OpenPathOrFobj(source, 'rb') as fobj:
        data = fobj.read()
    if data[:2] == JPEG_SOI:
        return read_jpeg_exif(data)
    if data.lstrip()[:1] == b'{':
        return load_directory(data)
    return read_exif(data)


def _exif_dump_value(value, max, dest):
    if isinstance(value, Rational):
        dest.write(' %s' % value)
        if value.denominator:
            dest.write(' (%.8g)' % float(value))
    elif isinstance(value, bytes):
        dest.write(' <%d> %r' % (len(value), value[:max]))
        if len(value) > max:
            dest.write(' ...')
    elif isinstance(value, float):
        dest.write(' %.10g' % value)
    elif isinstance(value, str):
        # Bytes that were not UTF-8 are shown as \xNN escapes
        dest.write(' %s' % value.encode('utf-8', 'surrogateescape').decode('utf-8', 'backslashreplace'))
    else:
        dest.write(' %s' % value)


def _exif_dump_directory(directory, max, dest=None, linePrefix=''):
    """
    Print a directory and its sub-directories to a stream.

    :param directory: the Directory to print.
    :param max: the maximum number of bytes to print for binary values.
    :param dest: the stream to print results to.
    :param linePrefix: a string to put in front of each line.  This is usually
        whitespace.
    """
    dest = sys.stdout if dest is None else dest
    dest.write('%sDirectory %s: %d field%s\n' % (
        linePrefix, directory.getTagSet().name, len(directory),
        '' if len(directory) == 1 else 's'))
    for field, value in directory.getFields().items():
        dest.write('%s  %s %s:' % (linePrefix, field.tag, field.datatype.name))
        if isinstance(value, Directory):
            dest.write('\n')
            _exif_dump_directory(value, max, dest, linePrefix + '    ')
            continue
        _exif_dump_value(value, max, dest)
        dest.write('\n')


class ExtendedJsonEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, bytes):
            return base64.b64encode(obj).decode()
        return '%s:%s' % (type(obj).__name__, repr(obj))


def exif_info(*args, **kwargs):
    """
    Alias for exif_dump.
    """
    return exif_dump(*args, **kwargs)


def exif_dump(source, max=20, dest=None, *args, **kwargs):
    """
    Print the EXIF information.

    :param source: the source path or a list of source paths.
    :param max: the maximum number of bytes to display for binary values.
    :param dest: an open stream to write to.
    :param json: if True, print the directory as JSON.
    :param yaml: if True, print the directory as YAML.
    """
    dest = sys.stdout if dest is None else dest
    if isinstance(source, list):
        if kwargs.get('yaml'):
            maps = {}
            for src in source:
                directory = read_directory(src)
                maps[str(src)] = directory.toMap() if directory is not None else None
            yaml.safe_dump(maps, dest, sort_keys=False)
            return
        if kwargs.get('json'):
            dest.write('{\n')
        for srcidx, src in enumerate(source):
            if kwargs.get('json'):
                json.dump(str(src), dest)
                dest.write(': ')
            else:
                dest.write('-- %s --\n' % src)
            exif_dump(src, max=max, dest=dest, *args, **kwargs)
            if kwargs.get('json'):
                dest.write(',\n' if srcidx + 1 != len(source) else '\n}')
        return
    directory = read_directory(source)
    if kwargs.get('yaml'):
        yaml.safe_dump(directory.toMap() if directory is not None else None, dest, sort_keys=False)
        return
    if kwargs.get('json'):
        json.dump(directory.toMap() if directory is not None else None, dest,
                  indent=2, cls=ExtendedJsonEncoder)
        return
    if directory is None:
        dest.write('No EXIF data\n')
        return
    _exif_dump_directory(directory, max, dest)


def exif_serialize(source, output=None, overwrite=False, **kwargs):
    """
    Write the persisted JSON form of the directory of a source.

    :param source: the source path, - for stdin.
    :param output: the path to write, - or None for stdout.
    :param overwrite: if False, throw an error if the output path already
        exists.
    """
    if output not in (None, '-') and os.path.exists(output) and not overwrite:
        raise TiffexifError('File already exists: %s' % output)
    directory = read_directory(source)
    if directory is None:
        raise TiffexifError('No EXIF data in %s' % source)
    dump_directory(directory, '-' if output is None else output)


def main(args=None):
    from . import __version__

    if args is None:
        args = sys.argv[1:]
    description = 'Read EXIF and TIFF metadata directories.  Version %s.' % __version__
    epilog = """Sources can be a bare TIFF header with its IFDs, the same
prefixed by 'Exif\\0\\0', a JPEG file, or a directory previously written by the
serialize command."""
    argumentsForAllParsers = [{
        'args': ('--verbose', '-v'),
        'kwargs': dict(action='count', default=0, help='Increase output.'),
    }, {
        'args': ('--silent', '--quiet', '-q'),
        'kwargs': dict(action='count', default=0, help='Decrease output.'),
    }, {
        'args': ('--stop-on-warning', '-X'),
        'kwargs': dict(
            dest='warningIsError', action='store_true', help='Treat warnings as errors.'),
    }]
    mainParser = argparse.ArgumentParser(description=description, epilog=epilog)
    secondaryParser = argparse.ArgumentParser(description=description, add_help=False)
    subparsers = mainParser.add_subparsers(
        dest='command',
        title='subcommands',
        help='Subcommands.  See <subcommand> --help for details.')

    parserInfo = subparsers.add_parser(
        'dump',
        aliases=['info'],
        help='dump [--max MAX] [--json | --yaml] source [source ...]',
        description='Print the EXIF directories of a file.',
        epilog=epilog)
    parserInfo.add_argument(
        'source', nargs='+', help='Source file, - for stdin.')
    parserInfo.add_argument(
        '--max', '-m', type=int, help='Maximum bytes of binary values to display.', default=20)
    outputFormat = parserInfo.add_mutually_exclusive_group()
    outputFormat.add_argument(
        '--json', action='store_true',
        help='Output as json.')
    outputFormat.add_argument(
        '--yaml', action='store_true',
        help='Output as yaml.')

    parserSerialize = subparsers.add_parser(
        'serialize',
        help='serialize [--overwrite] source [output]',
        description='Write the EXIF directories of a file as JSON that can be '
        'read back without loss.',
        epilog=epilog)
    parserSerialize.add_argument(
        'source', help='Source file, - for stdin.')
    parserSerialize.add_argument(
        'output', nargs='?', help='Output file.  If not specified, write to stdout.')
    parserSerialize.add_argument(
        '--overwrite', '-y', action='store_true',
        help='Allow overwriting an existing output file.')

    for parser in (secondaryParser, parserInfo, parserSerialize):
        for argument in argumentsForAllParsers:
            parser.add_argument(*argument['args'], **argument['kwargs'])

    # This allows argumentsForAllParsers to be either before or after the
    # command.
    secondary, notInSecondary = secondaryParser.parse_known_args(args)
    args = mainParser.parse_args(notInSecondary)
    for k, v in vars(secondary).items():
        setattr(args, k, v)
    logging.basicConfig(
        stream=sys.stderr, level=max(1, logging.WARNING - 10 * (args.verbose - args.silent)))
    logger.debug('Parsed arguments: %r', args)
    logLevelHandler = ThrowOnLevelHandler(
        level=logging.WARNING if args.warningIsError else logging.ERROR)
    try:
        logging.getLogger('tiffexif').addHandler(logLevelHandler)
        if args.command:
            try:
                func = globals().get('exif_' + args.command)
                func(**vars(args))
            except Exception as exc:
                if args.verbose - args.silent >= 1:
                    raise
                sys.stderr.write(str(exc).strip() + '\n')
                return 1
        else:
            mainParser.print_help(sys.stdout)
    finally:
        logging.getLogger('tiffexif').handlers.remove(logLevelHandler)
