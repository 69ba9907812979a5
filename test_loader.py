import io
import os

import pytest

import loader


@pytest.fixture
def write(tmp_path):
    def _write(content: bytes, name: str = 'file.bin') -> str:
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)
    return _write


def test_hello_world(write):
    buf = loader.load(write(b'Hello, World!'))

    assert len(buf) == 13
    assert bytes(buf) == b'Hello, World!'
    assert buf.raw[13] == loader.TERMINATOR
    assert buf.raw == b'Hello, World!\x00'
    assert buf.text() == 'Hello, World!'


def test_empty_file(write):
    buf = loader.load(write(b''))

    assert buf.length == 0
    assert buf.raw == b'\x00'
    assert buf.growths == 0


@pytest.mark.parametrize('size', [
    1,
    loader.CHUNK_SIZE - 1,
    loader.CHUNK_SIZE,
    loader.CHUNK_SIZE + 1,
    loader.INITIAL_CAPACITY,
    loader.INITIAL_CAPACITY + 1,
    3 * loader.CHUNK_SIZE,
    10 * loader.INITIAL_CAPACITY + 7,
])
def test_sizes(write, size):
    content = os.urandom(size)
    buf = loader.load(write(content))

    assert buf.length == size
    assert bytes(buf) == content
    assert buf.raw[size] == loader.TERMINATOR
    assert buf.capacity == size + 1


def test_initial_capacity_minus_one_grows(write):
    size = loader.INITIAL_CAPACITY - 1
    buf = loader.load(write(b'x' * size))

    assert buf.growths >= 1
    assert buf.length == size
    assert buf.raw[size] == loader.TERMINATOR


@pytest.mark.parametrize('chunks, growths', [
    (2, 1),
    (4, 2),
    (8, 3),
])
def test_growth_keeps_room_for_every_chunk(write, monkeypatch, chunks, growths):
    fill = loader.Buffer.fill
    headrooms = []

    def recording_fill(self, stream, size=loader.CHUNK_SIZE):
        headrooms.append(self.headroom)
        return fill(self, stream, size)

    monkeypatch.setattr(loader.Buffer, 'fill', recording_fill)

    size = chunks * loader.CHUNK_SIZE
    buf = loader.load(write(b'y' * size))

    # a full chunk plus the terminator fits before every read
    assert all(h > loader.CHUNK_SIZE for h in headrooms)
    assert len(headrooms) == chunks + 1
    assert buf.growths == growths
    assert buf.length == size
    assert buf.capacity == size + 1


def test_fill_without_room_for_data():
    buf = loader.Buffer(1)

    with pytest.raises(ValueError):
        buf.fill(io.BytesIO(b'abc'))

    buf.grow()

    assert buf.fill(io.BytesIO(b'abc')) == 1
    assert bytes(buf) == b'a'


def test_fill_rejects_empty_reads():
    with pytest.raises(ValueError):
        loader.Buffer(8).fill(io.BytesIO(b'abc'), 0)


def test_independent_buffers(write):
    path = write(b'<p>%s %s</p>')

    first = loader.load(path)
    second = loader.load(path)

    assert first is not second
    assert first.raw == second.raw
    assert first.length == second.length


def test_missing_file(tmp_path):
    path = str(tmp_path / 'missing.html')

    with pytest.raises(loader.LoadError) as e:
        loader.load(path)

    assert e.value.path == path
    assert 'No such file or directory' in e.value.reason


def test_directory(tmp_path):
    with pytest.raises(loader.LoadError):
        loader.load(str(tmp_path))


def test_out_of_memory(write, monkeypatch):
    def grow(self):
        raise MemoryError()

    monkeypatch.setattr(loader.Buffer, 'grow', grow)

    with pytest.raises(loader.LoadError) as e:
        loader.load(write(b'z' * loader.INITIAL_CAPACITY))

    assert e.value.reason == 'out of memory'


def test_terminate_twice():
    buf = loader.Buffer(4)
    buf.terminate()

    with pytest.raises(ValueError):
        buf.terminate()


def test_load_text_decodes(write):
    assert loader.load_text(write('<p>é</p>'.encode('utf-8'))) == '<p>é</p>'


def test_load_text_rejects_binary(write):
    with pytest.raises(loader.LoadError):
        loader.load_text(write(b'\xff\xfe\xfa'))
