"""
grpar
Reader for Build engine group (GRP) archives.
"""
from .archive import GroupArchive, FileRecord, GRPHeader, GRPEntry, MAGIC, open_archive, find_file, names_match
from .extract import list_files, extract_file, extract_all
from .errors import *


__version__ = '0.3'

__all__ = [
    'GroupArchive', 'FileRecord', 'GRPHeader', 'GRPEntry', 'MAGIC',
    'open_archive', 'find_file', 'names_match',
    'list_files', 'extract_file', 'extract_all',
    'GRPError', 'LoadError', 'ArchiveOpenError', 'ArchiveNotFoundError', 'TruncatedError', 'BadMagicError',
    'AllocationError', 'ExtractError', 'FileNotInArchiveError', 'DestinationError',
    'InvalidDestinationDirectoryError', 'IncompleteTransferError', 'ExtractionErrors',
]
