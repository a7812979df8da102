"""
version - peptag version information
====================================

Classes
-------

  :py:class:`VersionInfo` - a namedtuple of version components, created from
  a version string or a tuple and comparable with both.

Constants
---------

  :py:const:`version` - a string with the current version.

  :py:const:`version_info` - a :py:class:`VersionInfo` for the current version.

"""

__version__ = '0.3.1'

from collections import namedtuple
import re

_version_re = re.compile(r'^(\d+)\.(\d+)(?:\.(\d+))?(?:([a-zA-Z]+)(\d+)?)?$')


class VersionInfo(namedtuple('VersionInfo', ('major', 'minor', 'micro', 'releaselevel', 'serial'))):
    """Tuple mimicking :py:const:`sys.version_info`.

    >>> VersionInfo('0.3.1') > '0.3'
    True
    """
    def __new__(cls, version):
        if isinstance(version, str):
            match = _version_re.match(version)
            if match is None:
                raise ValueError('Not a valid version string: {!r}'.format(version))
            fields = match.groups()
        else:
            fields = tuple(str(x) if x is not None else x for x in version)
        inst = super(VersionInfo, cls).__new__(cls, *fields)
        inst._version_str = version if isinstance(version, str) else '.'.join(x for x in fields[:3] if x)
        return inst

    @property
    def numbers(self):
        """Numeric components, missing ones counted as 0."""
        return tuple(int(x) if x and x.isdigit() else 0 for x in self)

    def __str__(self):
        return 'Version {}'.format(self._version_str)

    def __eq__(self, other):
        if not isinstance(other, VersionInfo):
            other = VersionInfo(other)
        return tuple(self) == tuple(other)

    def __ne__(self, other):
        return not self == other

    def __lt__(self, other):
        if not isinstance(other, VersionInfo):
            other = VersionInfo(other)
        return self.numbers < other.numbers

    def __gt__(self, other):
        if not isinstance(other, VersionInfo):
            other = VersionInfo(other)
        return self.numbers > other.numbers

    def __le__(self, other):
        return self == other or self < other

    def __ge__(self, other):
        return self == other or self > other

    def __hash__(self):
        return hash(tuple(self))


version_info = VersionInfo(__version__)
version = __version__
