from .structures import (
    PeptagError, PatternSyntaxError, UnknownResidueError,
    UnknownModificationError)

from .utils import memoize, format_mass
