"""
modification - modifications and their lookup table
===================================================

Summary
-------

Sequences, patterns and tags carry modifications as lightweight
:py:class:`ModificationMatch` objects holding a modification *name* and a
*site*. The mass and specificity of a modification are looked up by name in
a :py:class:`ModificationTable` which is passed explicitly (keyword argument
``modifications``) to every function that needs it.

Sites are 1-based residue positions. Site 0 denotes the N-terminus and site
``len + 1`` denotes the C-terminus of the carrying sequence.

Classes
-------

  :py:class:`ModificationKind` - where a modification can be attached.

  :py:class:`Modification` - name, mass, kind and residue pattern of a
  modification.

  :py:class:`ModificationMatch` - a modification attached to a site.

  :py:class:`ModificationTable` - a name-indexed registry of modifications.

Data
----

  :py:data:`std_modifications` - a table with a handful of common Unimod
  modifications.

-----------------------------------------------------------------------------
"""

#   Copyright 2012 Anton Goloborodko, Lev Levitsky
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.

from enum import Enum

from .auxiliary import PeptagError, UnknownModificationError
from .alphabet import std_alphabet


class ModificationKind(Enum):
    """Attachment class of a modification.

    ``aa`` modifications target residues anywhere in a sequence; the
    ``*_term_*`` kinds target a terminus, and the ``*_aa`` variants also
    require a specific residue at that terminus.
    """
    aa = 0
    n_term_peptide = 1
    c_term_peptide = 2
    n_term_protein = 3
    c_term_protein = 4
    n_term_peptide_aa = 5
    c_term_peptide_aa = 6
    n_term_protein_aa = 7
    c_term_protein_aa = 8

    @property
    def is_n_terminal(self):
        return self in _n_terminal_kinds

    @property
    def is_c_terminal(self):
        return self in _c_terminal_kinds

    @property
    def is_terminal(self):
        return self is not ModificationKind.aa

    @property
    def needs_residue(self):
        """Whether the kind is restricted to specific residues."""
        return self in _residue_kinds


_n_terminal_kinds = frozenset([ModificationKind.n_term_peptide, ModificationKind.n_term_protein,
                               ModificationKind.n_term_peptide_aa, ModificationKind.n_term_protein_aa])
_c_terminal_kinds = frozenset([ModificationKind.c_term_peptide, ModificationKind.c_term_protein,
                               ModificationKind.c_term_peptide_aa, ModificationKind.c_term_protein_aa])
_residue_kinds = frozenset([ModificationKind.aa,
                            ModificationKind.n_term_peptide_aa, ModificationKind.c_term_peptide_aa,
                            ModificationKind.n_term_protein_aa, ModificationKind.c_term_protein_aa])


class Modification(object):
    """A modification definition.

    Parameters
    ----------
    name : str
        Unique name of the modification, used as lookup key.
    mass : float
        Monoisotopic mass shift.
    kind : ModificationKind, optional
        Default is ``ModificationKind.aa``.
    pattern : str or PositionalPattern, optional
        Residues the modification applies to. A literal is parsed on first
        access of :py:attr:`pattern`.
    short_name : str, optional
        Name used in compact renderings. Defaults to `name`.
    alphabet : ResidueAlphabet, optional
        Alphabet used to parse a literal `pattern`.
    """

    def __init__(self, name, mass, kind=ModificationKind.aa, pattern=None, short_name=None, alphabet=std_alphabet):
        self.name = name
        self.mass = float(mass)
        self.kind = kind
        self.short_name = short_name or name
        self._pattern = pattern
        self._alphabet = alphabet
        if kind.needs_residue and pattern is None:
            raise PeptagError('Residue-specific modification needs a pattern', name, kind)

    @property
    def pattern(self):
        """The :py:class:`~peptag.pattern.PositionalPattern` of targeted
        residues, or :py:const:`None` for plain terminal modifications."""
        if isinstance(self._pattern, str):
            from .pattern import PositionalPattern
            self._pattern = PositionalPattern.from_literal(self._pattern, alphabet=self._alphabet)
        return self._pattern

    def __repr__(self):
        return '{}({!r}, {}, {})'.format(type(self).__name__, self.name, self.mass, self.kind.name)


class ModificationMatch(object):
    """A modification attached to a site of a sequence, pattern or tag.

    Attributes
    ----------
    name : str
        Name of the modification, resolved through a
        :py:class:`ModificationTable`.
    site : int
        1-based residue position; 0 is the N-terminus.
    variable : bool
    confident : bool
    inferred : bool
    """

    def __init__(self, name, site, variable=True, confident=False, inferred=False):
        self.name = name
        self.site = site
        self.variable = variable
        self.confident = confident
        self.inferred = inferred

    def copy(self, site=None):
        """Return a copy of the match, optionally moved to `site`."""
        return type(self)(self.name, self.site if site is None else site,
                          self.variable, self.confident, self.inferred)

    def __eq__(self, other):
        if not isinstance(other, ModificationMatch):
            return NotImplemented
        return (self.name, self.site, self.variable) == (other.name, other.site, other.variable)

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self):
        return hash((self.name, self.site, self.variable))

    def __repr__(self):
        return '{}({!r}, {})'.format(type(self).__name__, self.name, self.site)


class ModificationTable(dict):
    """A read-mostly registry of :py:class:`Modification` objects keyed by name.

    Examples
    --------
    >>> std_modifications.resolve('Oxidation').mass
    15.994915
    """

    def __init__(self, modifications=()):
        super(ModificationTable, self).__init__()
        for mod in modifications:
            self.add(mod)

    def add(self, modification):
        """Register `modification` under its name, replacing any previous entry."""
        self[modification.name] = modification
        return modification

    def resolve(self, name):
        """Return the :py:class:`Modification` called `name`.

        Raises
        ------
        UnknownModificationError
        """
        return self[name]

    def __missing__(self, name):
        raise UnknownModificationError(name)

    def mass(self, name):
        """Mass shift of the modification called `name`."""
        return self[name].mass


std_modifications = ModificationTable([
    Modification('Oxidation', 15.994915, ModificationKind.aa, 'M', 'ox'),
    Modification('Phospho', 79.966331, ModificationKind.aa, '[STY]', 'p'),
    Modification('Carbamidomethyl', 57.021464, ModificationKind.aa, 'C', 'cmm'),
    Modification('Deamidated', 0.984016, ModificationKind.aa, '[NQ]', 'deam'),
    Modification('Acetyl', 42.010565, ModificationKind.n_term_protein, short_name='ac'),
    Modification('Amidated', -0.984016, ModificationKind.c_term_peptide, short_name='am'),
    Modification('Gln->pyro-Glu', -17.026549, ModificationKind.n_term_peptide_aa, 'Q', 'pyro'),
])
"""Common Unimod modifications, used as the default lookup table."""
