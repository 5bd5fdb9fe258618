"""
grpar.extract
Listing and extraction of group archive members.
"""
import os
import logging

from .archive import find_file
from .errors import (
    FileNotInArchiveError, DestinationError, InvalidDestinationDirectoryError,
    IncompleteTransferError, ExtractionErrors, ExtractError,
)


logger = logging.getLogger(__name__)

BLOCK_SIZE = 16 * 1024


def list_files(files, verbose=False):
    """ Return the display lines for a table of contents, in archive order. """
    if not verbose:
        return [record.name for record in files]

    lines = ['{} ({} bytes, offset {} (0x{:x}))'.format(record.name, record.size, record.offset, record.offset)
             for record in files]
    lines.append('{} files found'.format(len(files)))
    return lines


def copy_record(handle, record, dest_path, block_size=BLOCK_SIZE):
    try:
        out = open(dest_path, 'wb')
    except OSError as e:
        raise DestinationError(dest_path, e.strerror or e) from e

    with out:
        handle.seek(record.offset, os.SEEK_SET)

        remaining = record.size
        while remaining:
            wanted = min(block_size, remaining)
            try:
                chunk = handle.read(wanted)
            except OSError as e:
                raise IncompleteTransferError(record.name, dest_path, 'read', record.size - remaining, record.size) from e
            if len(chunk) != wanted:
                raise IncompleteTransferError(record.name, dest_path, 'read', record.size - remaining, record.size)
            try:
                written = out.write(chunk)
            except OSError as e:
                raise IncompleteTransferError(record.name, dest_path, 'write', record.size - remaining, record.size) from e
            if written != len(chunk):
                raise IncompleteTransferError(
                    record.name, dest_path, 'write', record.size - remaining + written, record.size
                )
            remaining -= written

    logger.info('%s extracted to %s (%d bytes)', record.name, dest_path, record.size)
    return dest_path

def extract_file(handle, files, name, dest_path, block_size=BLOCK_SIZE):
    """
    Copy the first member named `name` from the archive handle to dest_path.

    Nothing is created when the name is missing. A failed copy leaves the
    partially written destination in place.
    """
    record = find_file(files, name)
    if record is None:
        raise FileNotInArchiveError(name)
    return copy_record(handle, record, dest_path, block_size=block_size)


def member_path(dest_dir, name):
    if not name or name in (os.curdir, os.pardir) or os.sep in name or (os.altsep and os.altsep in name):
        raise DestinationError(os.path.join(dest_dir, name), 'unsafe member name {!r}'.format(name))
    return os.path.join(dest_dir, name)

def extract_all(handle, files, dest_dir, block_size=BLOCK_SIZE):
    """
    Extract every member into dest_dir, in archive order.

    Each member is looked up by name, so when names repeat every copy
    holds the data of the first member with that name.

    Failures are logged as they happen and do not stop the pass; if any
    occurred, ExtractionErrors is raised once every member has been tried.
    """
    if not os.path.isdir(dest_dir):
        raise InvalidDestinationDirectoryError(dest_dir)

    written = []
    failures = []
    for record in files:
        try:
            dest_path = member_path(dest_dir, record.name)
            written.append(extract_file(handle, files, record.name, dest_path, block_size=block_size))
        except ExtractError as e:
            logger.error('%s', e)
            failures.append((record, e))

    if failures:
        raise ExtractionErrors(failures)
    return written
