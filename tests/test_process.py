"""
uncompress test suite
external program tests
"""

import threading
import unittest
from unittest import mock
from concurrent.futures import ThreadPoolExecutor

import uncompress
from uncompress import (
    MethodRegistry, Program, Cancellation, ProcessStream,
    OpenError, SpawnError, CloseError, DecodeCancelled,
)
from .base import BaseTester, PAYLOAD, has_program


# decompressed size well beyond any pipe buffer
LARGE_PAYLOAD = b''.join(b'Excelsior %d\n' % _i for _i in range(400000))


def read_all(stream):
    """Read and discard until the end of the stream."""
    while stream.read(65536):
        pass


class RecordingProgram(Program):
    """Program that keeps track of the streams it starts."""

    def __init__(self, command, *args):
        super().__init__(command, *args)
        self.started = []

    def __call__(self, path, cancel=None, *, name=''):
        stream = super().__call__(path, cancel, name=name)
        self.started.append(stream)
        return stream


class TestPrograms(BaseTester):
    """Test decompression through the standard programs."""

    def _test_program(self, suffix):
        path = self.write_compressed(suffix)
        stream = uncompress.open(path, uncompress.programs)
        self.assertIsInstance(stream, ProcessStream)
        data = stream.read()
        stream.close()
        self.assertEqual(data, PAYLOAD)
        self.assertEqual(stream.process.returncode, 0)

    @unittest.skipUnless(has_program('zcat'), 'zcat not available')
    def test_zcat(self):
        """Decompress gzip, pack and compress files with zcat."""
        for suffix in ('gz', 'z', 'Z'):
            with self.subTest(suffix=suffix):
                self._test_program(suffix)

    @unittest.skipUnless(has_program('bzcat'), 'bzcat not available')
    def test_bzcat(self):
        """Decompress bzip2 files with bzcat."""
        self._test_program('bz2')

    @unittest.skipUnless(has_program('xzcat'), 'xzcat not available')
    def test_xzcat(self):
        """Decompress xz and lzma files with xzcat."""
        for suffix in ('xz', 'lzma'):
            with self.subTest(suffix=suffix):
                self._test_program(suffix)

    @unittest.skipUnless(has_program('zstdcat'), 'zstdcat not available')
    def test_zstdcat(self):
        """Decompress zstandard files with zstdcat."""
        self._test_program('zst')

    @unittest.skipUnless(has_program('gzip'), 'gzip not available')
    def test_program_arguments(self):
        """Extra arguments go before the file path."""
        registry = MethodRegistry({'gz': Program('gzip', '-d', '-c')})
        path = self.write_compressed('gz')
        with uncompress.open(path, registry) as stream:
            self.assertEqual(stream.read(), PAYLOAD)
            self.assertEqual(stream.name, str(self.temp_path / 'file'))


class TestSpawn(BaseTester):
    """Test starting programs."""

    def test_missing_program(self):
        """Missing program gives SpawnError, not OpenError."""
        registry = MethodRegistry({'gz': Program('no-such-decompressor-2b9f')})
        path = self.write_compressed('gz')
        with self.assertRaises(SpawnError) as cm:
            uncompress.open(path, registry)
        self.assertNotIsInstance(cm.exception, OpenError)
        self.assertIn('no-such-decompressor-2b9f', str(cm.exception))

    @unittest.skipUnless(has_program('zcat'), 'zcat not available')
    def test_missing_file(self):
        """Missing file gives OpenError and starts no program."""
        program = RecordingProgram('zcat')
        registry = MethodRegistry({'gz': program})
        with self.assertRaises(OpenError):
            uncompress.open(self.temp_path / 'missing.gz', registry)
        self.assertEqual(program.started, [])

    @unittest.skipUnless(has_program('zcat'), 'zcat not available')
    def test_cancelled_before_start(self):
        """Nothing is started when already cancelled."""
        program = RecordingProgram('zcat')
        registry = MethodRegistry({'gz': program})
        path = self.write_compressed('gz')
        cancel = Cancellation()
        cancel.cancel()
        with self.assertRaises(SpawnError):
            uncompress.open_with_cancellation(cancel, path, registry)
        self.assertEqual(program.started, [])

    def test_start_failure(self):
        """Program that can't be executed gives SpawnError."""
        program_path = self.write_file('not-a-program', b'\x00\x01\x02\x03garbage')
        program_path.chmod(0o755)
        registry = MethodRegistry({'gz': Program(str(program_path))})
        path = self.write_compressed('gz')
        with self.assertRaises(SpawnError):
            uncompress.open(path, registry)

    @unittest.skipUnless(has_program('zcat'), 'zcat not available')
    def test_no_temporary_file(self):
        """Failure to set up error capture gives SpawnError."""
        path = self.write_compressed('gz')
        with mock.patch(
                'uncompress.process.tempfile.TemporaryFile',
                side_effect=OSError('no space left on device'),
            ):
            with self.assertRaises(SpawnError):
                uncompress.open(path, uncompress.programs)


class TestReads(BaseTester):
    """Test reading from program streams."""

    def setUp(self):
        super().setUp()
        if not has_program('sh'):
            self.skipTest('sh not available')
        self.path = self.write_file('file.slow', b'')

    def test_read_what_is_available(self):
        """Read returns output already written, without waiting for more."""
        registry = MethodRegistry({
            'slow': Program('sh', '-c', 'printf abc; exec sleep 5'),
        })
        stream = uncompress.open_with_cancellation(
            Cancellation(), self.path, registry
        )
        data = self.assertCompletes(lambda: stream.read(100), timeout=3)
        self.assertEqual(data, b'abc')
        self.assertIsNone(stream.process.poll())
        self.assertCompletes(stream.close)

    def test_cancel_after_exit(self):
        """Cancelling a program that finished does not spoil its output."""
        registry = MethodRegistry({'slow': Program('sh', '-c', 'printf abc')})
        cancel = Cancellation()
        stream = uncompress.open_with_cancellation(cancel, self.path, registry)
        self.assertEqual(stream.process.wait(), 0)
        cancel.cancel()
        self.assertEqual(stream.read(), b'abc')
        stream.close()
        self.assertEqual(stream.process.returncode, 0)

    def test_concurrent(self):
        """Concurrent program streams return their own payloads."""
        suffixes = [
            _suffix for _suffix, _command in (
                ('gz', 'zcat'), ('bz2', 'bzcat'), ('xz', 'xzcat'),
                ('zst', 'zstdcat'),
            )
            if has_program(_command)
        ]
        if not suffixes:
            self.skipTest('no decompression programs available')
        expected = {}
        for suffix in suffixes:
            for count in range(3):
                payload = f'{suffix} {count} '.encode() * 20000
                path = self.write_compressed(
                    suffix, payload, stem=f'file-{suffix}-{count}'
                )
                expected[path] = payload

        def _read(path):
            with uncompress.open(path, uncompress.programs) as stream:
                return stream.read()

        with ThreadPoolExecutor(max_workers=len(expected)) as executor:
            results = dict(zip(expected, executor.map(_read, expected)))
        self.assertEqual(results, expected)


class TestClose(BaseTester):
    """Test the close discipline of program streams."""

    def setUp(self):
        super().setUp()
        if not has_program('zcat'):
            self.skipTest('zcat not available')
        self.path = self.write_compressed('gz', LARGE_PAYLOAD)

    def test_close_unread(self):
        """Close without reading drains, reaps and succeeds."""
        stream = uncompress.open(self.path, uncompress.programs)
        self.assertCompletes(stream.close)
        self.assertEqual(stream.process.returncode, 0)
        self.assertTrue(stream.closed)

    def test_close_partial(self):
        """Close after a partial read does not block on a full pipe."""
        stream = uncompress.open(self.path, uncompress.programs)
        data = stream.read(9)
        self.assertTrue(data)
        self.assertTrue(b'Excelsior'.startswith(data))
        self.assertCompletes(stream.close)
        self.assertEqual(stream.process.returncode, 0)

    def test_close_unread_cancellable(self):
        """Early close of a cancellable stream kills the program quietly."""
        for count in (0, 9):
            with self.subTest(count=count):
                stream = uncompress.open_with_cancellation(
                    Cancellation(), self.path, uncompress.programs
                )
                stream.read(count)
                self.assertCompletes(stream.close)
                self.assertIsNotNone(stream.process.returncode)

    def test_close_after_end(self):
        """Cancellable stream read to the end exits normally."""
        cancel = Cancellation()
        stream = uncompress.open_with_cancellation(
            cancel, self.path, uncompress.programs
        )
        self.assertEqual(stream.read(), LARGE_PAYLOAD)
        stream.close()
        self.assertEqual(stream.process.returncode, 0)
        # cancelling after close has no effect on the closed stream
        cancel.cancel()

    def test_close_twice(self):
        """Closing twice is harmless."""
        stream = uncompress.open(self.path, uncompress.programs)
        stream.close()
        stream.close()

    def test_read_after_close(self):
        """Reading a closed stream is an error."""
        stream = uncompress.open(self.path, uncompress.programs)
        stream.close()
        with self.assertRaises(ValueError):
            stream.read(1)

    def test_corrupt_input(self):
        """Program failure is raised on close."""
        path = self.write_file('bad.gz', b'this is not gzip data')
        stream = uncompress.open(path, uncompress.programs)
        stream.read()
        with self.assertRaises(CloseError):
            stream.close()
        self.assertNotEqual(stream.process.returncode, 0)


class TestCancel(BaseTester):
    """Test cancelling program streams."""

    def setUp(self):
        super().setUp()
        if not has_program('yes'):
            self.skipTest('yes not available')
        # `yes path` writes the path forever
        self.registry = MethodRegistry({'forever': Program('yes')})
        self.path = self.write_file('file.forever', b'')

    def test_cancel_mid_read(self):
        """Cancellation ends an endless read promptly."""
        cancel = Cancellation()
        stream = uncompress.open_with_cancellation(cancel, self.path, self.registry)
        self.assertTrue(stream.read(10))
        threading.Timer(0.2, cancel.cancel).start()
        with self.assertRaises(DecodeCancelled):
            self.assertCompletes(lambda: read_all(stream))
        self.assertCompletes(stream.close)
        self.assertIsNotNone(stream.process.returncode)

    def test_cancel_shared(self):
        """One cancellation stops several programs."""
        cancel = Cancellation()
        streams = [
            uncompress.open_with_cancellation(cancel, self.path, self.registry)
            for _ in range(3)
        ]
        for stream in streams:
            self.assertTrue(stream.read(10))
        cancel.cancel()
        for stream in streams:
            with self.assertRaises(DecodeCancelled):
                self.assertCompletes(lambda: read_all(stream))
            stream.close()
            self.assertIsNotNone(stream.process.returncode)

    def test_close_kills(self):
        """Close of an endless cancellable stream returns promptly."""
        stream = uncompress.open_with_cancellation(
            Cancellation(), self.path, self.registry
        )
        self.assertTrue(stream.read(10))
        self.assertCompletes(stream.close)
        self.assertIsNotNone(stream.process.returncode)


if __name__ == '__main__':
    unittest.main()
