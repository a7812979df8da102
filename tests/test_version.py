from os import path
import peptag
peptag.__path__ = [path.abspath(path.join(path.dirname(__file__), path.pardir, 'peptag'))]
import unittest
from peptag import version


class VersionTest(unittest.TestCase):

    def test_short_version(self):
        self.assertEqual(version.VersionInfo('1.2'), ('1', '2', None, None, None))

    def test_longer_version(self):
        self.assertEqual(version.VersionInfo('1.2.3'), ('1', '2', '3', None, None))

    def test_short_dev_version(self):
        self.assertEqual(version.VersionInfo('1.2dev3'), ('1', '2', None, 'dev', '3'))

    def test_longer_dev_version(self):
        self.assertEqual(version.VersionInfo('1.2.3dev4'), ('1', '2', '3', 'dev', '4'))

    def test_invalid_version(self):
        self.assertRaises(ValueError, version.VersionInfo, 'one.two')

    def test_comparison(self):
        self.assertGreater(version.VersionInfo('0.3.1'), '0.3')
        self.assertLess(version.VersionInfo('0.3'), '0.10')
        self.assertLessEqual(version.VersionInfo('1.2'), '1.2')
        self.assertEqual(version.version_info, peptag.__version__)
        self.assertEqual(str(version.VersionInfo('1.2.3')), 'Version 1.2.3')


if __name__ == '__main__':
    unittest.main()
