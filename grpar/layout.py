"""
grpar.layout
Declarative descriptions of fixed-layout binary records.
"""
import io
import collections
import inspect
import copy
from contextlib import contextmanager


__all__ = [
    # Bases.
    'Type', 'Context',
    # Numeric types.
    'Int', 'UInt',
    # Data types.
    'Sig', 'Str',
    # Algebraic types.
    'Struct',
    # Errors.
    'LayoutError', 'ShortRead', 'SignatureMismatch', 'ParseError', 'SizeError',
    # Helper functions.
    'parse', 'sizeof', 'read_struct',
]


def format_bytes(bs):
    return '[' + ' '.join(hex(b)[2:].zfill(2) for b in bs) + ']'

def format_path(path):
    return '.'.join(path)

def class_name(s: object, module_whitelist=['builtins']):
    module = s.__class__.__module__
    name = s.__class__.__qualname__
    if module in module_whitelist:
        return name
    return module + '.' + name


class LayoutError(ValueError):
    pass

class ShortRead(LayoutError):
    def __init__(self, expected, got):
        super().__init__('too little data (expected {} bytes, got {})'.format(expected, got))
        self.expected = expected
        self.got = got

class SignatureMismatch(LayoutError):
    def __init__(self, data, expected):
        super().__init__('{} does not match expected {}!'.format(format_bytes(data), format_bytes(expected)))
        self.data = data
        self.expected = expected


class Context:
    __slots__ = ('path',)

    def __init__(self):
        self.path = []

    @contextmanager
    def enter(self, name, parser):
        self.path.append((name, parser))
        yield
        self.path.pop()

    def format_path(self):
        return format_path(name for name, parser in self.path)


class Type:
    def parse(self, input, context):
        raise NotImplementedError

    def sizeof(self, context):
        return None


ORDER_MAP = {
    'le': 'little',
    'be': 'big',
}

class Int(Type):
    def __init__(self, n, signed=True, order='le'):
        self.n = n
        self.signed = signed
        self.order = order

    def parse(self, input, context):
        n, rem = divmod(self.n, 8)
        if rem != 0:
            raise ValueError('{} can only decode byte-multiple integers, got: {} bits'.format(class_name(self), self.n))
        data = input.read(n)
        if len(data) != n:
            raise ShortRead(n, len(data))
        return int.from_bytes(data, byteorder=ORDER_MAP[self.order], signed=self.signed)

    def sizeof(self, context):
        return self.n // 8

class UInt(Type):
    def __new__(self, *args, **kwargs):
        return Int(*args, signed=False, **kwargs)

class Sig(Type):
    def __init__(self, sequence):
        self.sequence = sequence

    def parse(self, input, context):
        data = input.read(len(self.sequence))
        if len(data) != len(self.sequence):
            raise ShortRead(len(self.sequence), len(data))
        if data != self.sequence:
            raise SignatureMismatch(data, self.sequence)
        return self.sequence

    def sizeof(self, context):
        return len(self.sequence)

class Str(Type):
    """
    Fixed-width, zero-padded string field.

    The value ends at the first NUL or at the field width, whichever comes
    first; the remainder of the field is always consumed.
    """

    def __init__(self, length, encoding='latin-1'):
        self.length = length
        self.encoding = encoding

    def parse(self, input, context):
        data = input.read(self.length)
        if len(data) != self.length:
            raise ShortRead(self.length, len(data))
        data, _, _ = data.partition(b'\x00')
        return data.decode(self.encoding)

    def sizeof(self, context):
        return self.length


class MetaStruct(type):
    @classmethod
    def __prepare__(mcls, name, bases, **kwargs):
        return collections.OrderedDict()

    def __new__(cls, name, bases, attrs, **kwargs):
        spec = collections.OrderedDict()

        for base in bases:
            spec.update(getattr(base, '_spec', {}))

        for key, value in attrs.copy().items():
            if isinstance(value, Type) or (inspect.isclass(value) and issubclass(value, Type)):
                spec[key] = value
                del attrs[key]

        attrs['_spec'] = spec
        return super().__new__(cls, name, bases, dict(attrs))


class Struct(Type, metaclass=MetaStruct):
    def __init__(self, **kwargs):
        self._spec = copy.deepcopy(self._spec)
        for n in self._spec:
            setattr(self, n, None)
        for n, v in kwargs.items():
            setattr(self, n, v)

    def parse(self, input, context):
        for name, parser in self._spec.items():
            with context.enter(name, parser):
                setattr(self, name, parse(parser, input, context))
        return self

    def sizeof(self, context):
        n = 0
        for name, parser in self._spec.items():
            with context.enter(name, parser):
                nbytes = sizeof(parser, context)
                if nbytes is None:
                    return None
                n += nbytes
        return n

    def __iter__(self):
        return iter(self._spec)

    def __eq__(self, other):
        if not isinstance(other, Struct):
            return NotImplemented
        return list(self) == list(other) and all(getattr(self, k) == getattr(other, k) for k in self)

    def __repr__(self):
        return '<{}({})>'.format(
            class_name(self),
            ', '.join('{}={!r}'.format(k, getattr(self, k)) for k in self)
        )


def to_input(input):
    if isinstance(input, (bytes, bytearray)):
        input = io.BytesIO(input)
    return input

def to_parser(spec):
    if isinstance(spec, Type):
        return spec
    elif inspect.isclass(spec) and issubclass(spec, Type):
        return spec()

    raise ValueError('Could not figure out specification from argument {}.'.format(spec))


class ParseError(Exception):
    def __init__(self, context, inner):
        super().__init__()
        self.context = context
        self.inner = inner

    def __str__(self):
        return '[{}]: {}: {}'.format(
            self.context.format_path(), class_name(self.inner), str(self.inner)
        )

class SizeError(ParseError):
    pass

def parse(spec, input, context=None):
    parser = to_parser(spec)
    at_start = context is None
    context = context or Context()
    try:
        return parser.parse(to_input(input), context)
    except Exception as e:
        if at_start:
            raise ParseError(context, e) from e
        raise

def sizeof(spec, context=None):
    parser = to_parser(spec)
    ctx = context or Context()
    try:
        s = parser.sizeof(ctx)
    except Exception as e:
        if not context:
            raise SizeError(ctx, e) from e
        raise

    if s is None and not context:
        raise SizeError(ctx, ValueError('size of {!r} is not fixed'.format(parser)))
    return s

def read_struct(spec, input):
    """
    Read exactly sizeof(spec) bytes from input and parse them.

    A short read raises ParseError wrapping ShortRead before any field is
    looked at, so content checks never run on incomplete records.
    """
    parser = to_parser(spec)
    length = sizeof(parser)
    data = input.read(length)
    if len(data) != length:
        raise ParseError(Context(), ShortRead(length, len(data)))
    return parse(parser, data)
