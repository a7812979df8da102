from os import path
import peptag
peptag.__path__ = [path.abspath(path.join(path.dirname(__file__), path.pardir, 'peptag'))]
import unittest
import threading
from peptag.auxiliary import memoize, format_mass, PeptagError, UnknownResidueError


class MemoizeTest(unittest.TestCase):
    def test_cached(self):
        calls = []

        @memoize()
        def square(x):
            calls.append(x)
            return x * x

        self.assertEqual(square(3), 9)
        self.assertEqual(square(3), 9)
        self.assertEqual(calls, [3])

    def test_eviction(self):
        calls = []

        @memoize(maxsize=2)
        def ident(x):
            calls.append(x)
            return x

        for x in (1, 2, 3, 4):
            self.assertEqual(ident(x), x)
        self.assertEqual(ident(4), 4)
        self.assertEqual(calls, [1, 2, 3, 4])

    def test_eviction_from_threads(self):
        @memoize(maxsize=1)
        def triple(x):
            return 3 * x

        errors = []

        def worker(offset):
            try:
                for x in range(offset, offset + 500):
                    if triple(x) != 3 * x:
                        errors.append(x)
            except KeyError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i * 1000,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(errors, [])


class AuxiliaryTest(unittest.TestCase):
    def test_format_mass(self):
        self.assertEqual(format_mass(100.), '100.0')
        self.assertEqual(format_mass(300.1234), '300.12')

    def test_errors(self):
        e = UnknownResidueError('1')
        self.assertIsInstance(e, PeptagError)
        self.assertIsInstance(e, LookupError)
        self.assertEqual(e.values, ('1',))
        self.assertIn('No residue found', str(e))


if __name__ == '__main__':
    unittest.main()
