"""
grpar.errors
Exceptions raised while loading and extracting group archives.
"""


class GRPError(Exception):
    pass


class LoadError(GRPError):
    """ The archive could not be opened or its table of contents read. """

    def __init__(self, path, message):
        super().__init__('{}: {}'.format(path, message))
        self.path = path

class ArchiveOpenError(LoadError):
    def __init__(self, path, inner):
        super().__init__(path, 'cannot open group archive: {}'.format(inner.strerror or inner))
        self.inner = inner

class ArchiveNotFoundError(ArchiveOpenError):
    pass

class TruncatedError(LoadError):
    def __init__(self, path, what, expected, got):
        super().__init__(path, '{} truncated (expected {} bytes, got {})'.format(what, expected, got))
        self.what = what
        self.expected = expected
        self.got = got

class BadMagicError(LoadError):
    def __init__(self, path, magic):
        super().__init__(path, 'unrecognized group archive (magic {!r})'.format(magic))
        self.magic = magic

class AllocationError(LoadError):
    def __init__(self, path, count):
        super().__init__(path, 'cannot allocate table of contents for {} files'.format(count))
        self.count = count


class ExtractError(GRPError):
    pass

class FileNotInArchiveError(ExtractError, LookupError):
    def __init__(self, name):
        super().__init__('{}: not found in group archive'.format(name))
        self.name = name

class DestinationError(ExtractError):
    def __init__(self, path, reason):
        super().__init__('cannot create destination file {}: {}'.format(path, reason))
        self.path = path
        self.reason = reason

class InvalidDestinationDirectoryError(ExtractError):
    def __init__(self, path):
        super().__init__('{}: not a directory'.format(path))
        self.path = path

class IncompleteTransferError(ExtractError):
    def __init__(self, name, dest_path, direction, transferred, size):
        super().__init__('incomplete {} for {} -> {} ({} of {} bytes)'.format(
            direction, name, dest_path, transferred, size
        ))
        self.name = name
        self.dest_path = dest_path
        self.direction = direction
        self.transferred = transferred
        self.size = size

class ExtractionErrors(ExtractError):
    """ One or more files of an extract-all pass failed. """

    def __init__(self, failures):
        super().__init__('{} file(s) failed to extract'.format(len(failures)))
        self.failures = failures

    def __iter__(self):
        return iter(self.failures)

    def __len__(self):
        return len(self.failures)
