"""
grpar.archive
Group archive table of contents.

Layout (all integers little-endian):

    12 bytes : "KenSilverman"
     4 bytes : number of files

  then, for each file:
    12 bytes : file name (zero-filled)
     4 bytes : file size

  then the file data, concatenated in table order.
"""
import logging

from .layout import Struct, Sig, Str, UInt, ParseError, ShortRead, SignatureMismatch, read_struct, sizeof
from .errors import ArchiveOpenError, ArchiveNotFoundError, TruncatedError, BadMagicError, AllocationError


logger = logging.getLogger(__name__)

MAGIC = b'KenSilverman'
NAME_WIDTH = 12


class GRPHeader(Struct):
    magic = Sig(MAGIC)
    count = UInt(32)

class GRPEntry(Struct):
    name = Str(NAME_WIDTH)
    size = UInt(32)

HEADER_SIZE = sizeof(GRPHeader)
ENTRY_SIZE = sizeof(GRPEntry)


def data_start(count):
    return HEADER_SIZE + count * ENTRY_SIZE


def names_match(lookup, name, width=NAME_WIDTH + 1):
    """
    Compare two names the way the fixed-width name field does: byte by byte,
    stopping at the first difference, at `width` bytes, or at a NUL.
    """
    try:
        a = lookup.encode('latin-1') if isinstance(lookup, str) else bytes(lookup)
    except UnicodeEncodeError:
        return False
    b = name.encode('latin-1') if isinstance(name, str) else bytes(name)

    for i in range(width):
        ca = a[i] if i < len(a) else 0
        cb = b[i] if i < len(b) else 0
        if ca != cb:
            return False
        if ca == 0:
            break
    return True

def find_file(files, name):
    """ Return the first record in archive order whose name matches, or None. """
    for record in files:
        if names_match(name, record.name):
            return record
    return None


class FileRecord:
    __slots__ = ('index', 'name', 'size', 'offset')

    def __init__(self, index, name, size, offset):
        self.index = index
        self.name = name
        self.size = size
        self.offset = offset

    def __repr__(self):
        return '<FileRecord #{}: {!r} (offset = {}, size = {})>'.format(self.index, self.name, self.offset, self.size)


class GroupArchive:
    """
    An open group archive: the binary handle plus its table of contents.

    The handle's read position is shared by every extraction; callers that
    read from it must seek first.
    """

    def __init__(self, path, handle, files):
        self.path = path
        self.handle = handle
        self.files = files

    @property
    def closed(self):
        return self.handle.closed

    def close(self):
        self.handle.close()

    def find(self, name):
        return find_file(self.files, name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __iter__(self):
        return iter(self.files)

    def __len__(self):
        return len(self.files)

    def __repr__(self):
        return '<GroupArchive {!r}: {} files>'.format(self.path, len(self.files))


def read_header(path, f):
    try:
        return read_struct(GRPHeader, f)
    except ParseError as e:
        if isinstance(e.inner, ShortRead):
            raise TruncatedError(path, 'group archive header', e.inner.expected, e.inner.got) from e
        if isinstance(e.inner, SignatureMismatch):
            raise BadMagicError(path, e.inner.data) from e
        raise

def read_toc(path, f, count):
    files = []
    offset = data_start(count)
    try:
        for i in range(count):
            try:
                entry = read_struct(GRPEntry, f)
            except ParseError as e:
                if isinstance(e.inner, ShortRead):
                    raise TruncatedError(path, 'directory entry {}'.format(i + 1), e.inner.expected, e.inner.got) from e
                if isinstance(e.inner, MemoryError):
                    raise AllocationError(path, count) from e
                raise
            files.append(FileRecord(i + 1, entry.name, entry.size, offset))
            offset += entry.size
    except MemoryError as e:
        raise AllocationError(path, count) from e
    return files

def open_archive(path):
    """
    Open the group archive at path and read its table of contents.

    Returns a GroupArchive owning the open handle. Loading is all-or-nothing:
    on any error the handle is closed and a LoadError subclass is raised.
    """
    try:
        f = open(path, 'rb')
    except FileNotFoundError as e:
        raise ArchiveNotFoundError(path, e) from e
    except OSError as e:
        raise ArchiveOpenError(path, e) from e

    try:
        header = read_header(path, f)
        files = read_toc(path, f, header.count)
    except BaseException:
        f.close()
        raise

    logger.debug('%s: %r, data starts at %d', path, header, data_start(header.count))
    return GroupArchive(path, f, files)
