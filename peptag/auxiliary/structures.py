class PeptagError(Exception):
    """Exception raised for errors in peptag library.

    Attributes
    ----------
    message : str
        Error message.
    values : tuple
        Offending values, if any.
    """

    def __init__(self, msg, *values):
        super(PeptagError, self).__init__(msg, *values)
        self.message = msg
        self.values = values

    def __str__(self):
        if not self.values:
            return "peptag error, message: %s" % (repr(self.message),)
        else:
            return "peptag error, message: %s %r" % (repr(self.message), self.values)


class PatternSyntaxError(PeptagError):
    """Raised when a pattern literal is structurally invalid,
    e.g. has unbalanced or nested brackets.

    Attributes
    ----------
    index : int or None
        Position in the literal where the problem was detected.
    """

    def __init__(self, msg, text=None, index=None):
        super(PatternSyntaxError, self).__init__(msg, *(v for v in (text, index) if v is not None))
        self.text = text
        self.index = index


class UnknownResidueError(PeptagError, LookupError):
    """Raised when a residue code cannot be resolved in a
    :py:class:`~peptag.alphabet.ResidueAlphabet`."""

    def __init__(self, code):
        super(UnknownResidueError, self).__init__('No residue found for code', code)
        self.code = code


class UnknownModificationError(PeptagError, LookupError):
    """Raised when a modification name is not present in a
    :py:class:`~peptag.modification.ModificationTable`."""

    def __init__(self, name):
        super(UnknownModificationError, self).__init__('Unknown modification', name)
        self.name = name
