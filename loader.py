import typing


CHUNK_SIZE = 2048
INITIAL_CAPACITY = 4096
GROWTH_FACTOR = 2

TERMINATOR = 0


class LoadError(Exception):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__('{}: {}'.format(path, reason))

        self.path = path
        self.reason = reason


class Buffer:
    """ growable byte buffer with a trailing terminator


    The allocation always keeps one byte free after the content for the
    terminator.
    >>> buf = Buffer(8)
    >>> buf.capacity, buf.length, buf.headroom
    (8, 0, 8)

    Growing doubles the capacity and keeps what was already read.
    >>> import io
    >>> buf.fill(io.BytesIO(b'abc'), 4)
    3
    >>> buf.grow()
    >>> buf.capacity, buf.growths, bytes(buf)
    (16, 1, b'abc')

    Terminating writes the terminator once and shrinks the allocation.
    >>> buf.terminate()
    >>> buf.raw
    b'abc\\x00'
    >>> buf.capacity
    4
    """

    def __init__(self, capacity: int = INITIAL_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError('capacity must leave room for the terminator')

        self._data = bytearray(capacity)
        self.length = 0
        self.growths = 0
        self.terminated = False

    def __str__(self) -> str:
        return '<loader.Buffer {}/{}>'.format(self.length, self.capacity)

    def __len__(self) -> int:
        return self.length

    def __bytes__(self) -> bytes:
        return bytes(self._data[:self.length])

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def headroom(self) -> int:
        return self.capacity - self.length

    @property
    def raw(self) -> bytes:
        return bytes(self._data)

    def text(self, encoding: str = 'utf-8') -> str:
        return self._data[:self.length].decode(encoding)

    def grow(self) -> None:
        self._data.extend(bytes(self.capacity * (GROWTH_FACTOR - 1)))
        self.growths += 1

    def fill(self, stream: typing.BinaryIO, size: int = CHUNK_SIZE) -> int:
        """ read at most `size` bytes at the write offset

        Returns the number of bytes read, 0 at end of file.
        Raises ValueError when only the terminator slot is left, grow first.
        """

        if self.terminated:
            raise ValueError('buffer is already terminated')
        if size < 1:
            raise ValueError('size must be positive')

        # the terminator slot is never handed to the reader
        if self.headroom <= 1:
            raise ValueError('no room left before the terminator')

        size = min(size, self.headroom - 1)

        with memoryview(self._data) as view, \
                view[self.length:self.length + size] as window:
            count = stream.readinto(window) or 0

        self.length += count
        return count

    def terminate(self) -> None:
        if self.terminated:
            raise ValueError('buffer is already terminated')

        self._data[self.length] = TERMINATOR
        self.terminated = True

        try:
            del self._data[self.length + 1:]
        except MemoryError:
            # still terminated and valid, just larger than needed
            pass


def load(path: str) -> Buffer:
    """ load the whole file at `path` into a terminated Buffer

    Raises LoadError if the file can not be opened or read, or if memory for
    the buffer can not be allocated.
    """

    try:
        with open(path, 'rb', buffering=0) as stream:
            buf = Buffer(INITIAL_CAPACITY)

            while buf.fill(stream, CHUNK_SIZE) > 0:
                if buf.headroom <= CHUNK_SIZE:
                    buf.grow()
    except OSError as e:
        raise LoadError(path, e.strerror or str(e)) from e
    except MemoryError as e:
        raise LoadError(path, 'out of memory') from e

    buf.terminate()

    return buf


def load_text(path: str, encoding: str = 'utf-8') -> str:
    buf = load(path)

    try:
        return buf.text(encoding)
    except UnicodeDecodeError as e:
        raise LoadError(path, 'not {} text: {}'.format(encoding, e)) from e
