"""
grpar.cli
Command-line front end: list or extract the contents of a group archive.
"""
import os
import sys
import enum
import logging
import argparse
from dataclasses import dataclass, field
from typing import List, Optional

from . import __version__
from .archive import open_archive
from .extract import list_files, extract_file, extract_all
from .errors import LoadError, ExtractError, ExtractionErrors, InvalidDestinationDirectoryError


logger = logging.getLogger('grpar')

SEPARATORS = os.sep + (os.altsep or '')


class Action(enum.Enum):
    LIST = 'list'
    EXTRACT = 'extract'


@dataclass
class ProgramOptions:
    archive: str
    action: Action
    directory: str = '.'
    verbose: bool = False
    names: List[str] = field(default_factory=list)


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, '{}: error: {}\n'.format(self.prog, message))


def build_parser():
    parser = ArgumentParser(
        prog='grpar',
        description='List or extract files from a Build engine group (GRP) archive.',
        usage='%(prog)s [-h] [-V] [-t|-x] [-C path] [-v] -f grp_file [file_1] [file_2] [...]',
    )
    parser.add_argument('-V', '--version', action='version', version='%(prog)s {}'.format(__version__))
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('-t', dest='action', action='store_const', const=Action.LIST,
                      help='list files from group archive')
    mode.add_argument('-x', dest='action', action='store_const', const=Action.EXTRACT,
                      help='extract files from group archive')
    parser.add_argument('-C', dest='directory', default='.', metavar='path',
                        help='destination directory (default: current directory)')
    parser.add_argument('-v', dest='verbose', action='store_true', help='verbose mode')
    parser.add_argument('-f', dest='archive', required=True, metavar='grp_file', help='group archive')
    parser.add_argument('names', nargs='*', metavar='file',
                        help='files to extract (default: everything)')
    return parser

def parse_options(parser, argv) -> ProgramOptions:
    args = parser.parse_args(argv)
    if args.action is None:
        parser.error('please specify either -t or -x option')
    return ProgramOptions(
        archive=args.archive,
        action=args.action,
        directory=args.directory,
        verbose=args.verbose,
        names=args.names,
    )


def setup_logging(verbose):
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.INFO if verbose else logging.WARNING)


def do_list(archive, options, out):
    for line in list_files(archive.files, verbose=options.verbose):
        print(line, file=out)
    return 0

def do_extract(archive, options, out):
    if not os.path.isdir(options.directory):
        logger.error('%s', InvalidDestinationDirectoryError(options.directory))
        return 1

    if not options.names:
        try:
            written = extract_all(archive.handle, archive.files, options.directory)
        except ExtractionErrors:
            logger.error('files extracted, with error(s)')
            return 1
        if options.verbose:
            print('{} files extracted'.format(len(written)), file=out)
        return 0

    status = 0
    for name in options.names:
        dest_path = os.path.join(options.directory, name.lstrip(SEPARATORS))
        try:
            extract_file(archive.handle, archive.files, name, dest_path)
        except ExtractError as e:
            logger.error('%s', e)
            status = 1
    return status

COMMANDS = {
    Action.LIST: do_list,
    Action.EXTRACT: do_extract,
}


def main(argv: Optional[List[str]] = None, out=None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    out = out or sys.stdout
    parser = build_parser()

    if not argv:
        parser.print_help(sys.stderr)
        return 1

    try:
        options = parse_options(parser, argv)
    except SystemExit as e:
        return e.code or 0

    setup_logging(options.verbose)

    try:
        archive = open_archive(options.archive)
    except LoadError as e:
        logger.error('%s', e)
        logger.error('error reading group archive TOC')
        return 1

    with archive:
        return COMMANDS[options.action](archive, options, out)


if __name__ == '__main__':
    sys.exit(main())
