import struct
import logging

import pytest


def build_grp(members, count=None, magic=b'KenSilverman'):
    """ Build group archive bytes from (name, data) pairs. """
    if count is None:
        count = len(members)
    out = magic + struct.pack('<I', count)
    for name, data in members:
        if isinstance(name, str):
            name = name.encode('latin-1')
        out += struct.pack('<12sI', name, len(data))
    for _, data in members:
        out += data
    return out


@pytest.fixture
def make_grp(tmp_path):
    def make(members, filename='test.grp', **kwargs):
        path = tmp_path / filename
        path.write_bytes(build_grp(members, **kwargs))
        return str(path)
    return make


@pytest.fixture(autouse=True)
def reset_cli_logging():
    yield
    logger = logging.getLogger('grpar')
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)
