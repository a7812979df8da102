"""
alphabet - residue codes, masses and ambiguity classes
======================================================

Summary
-------

Every other module of peptag resolves one-letter residue codes through a
:py:class:`ResidueAlphabet`. An alphabet knows the monoisotopic mass of each
code and how ambiguity codes relate to concrete residues:

- a *combination* code stands for a set of concrete residues
  (``B`` is D or N, ``Z`` is E or Q, ``J`` is I or L, ``X`` is anything);
- a concrete residue is *combined* into every code that includes it
  (``D`` is part of ``B`` and ``X``);
- *isobaric siblings* cannot be told apart by mass (I, L and J).

Alphabets are read-only once created and may be shared freely. Functions
and classes elsewhere accept an ``alphabet`` keyword argument, which
defaults to :py:data:`std_alphabet`.

Classes
-------

  :py:class:`ResidueAlphabet` - a lookup table of residue masses and
  ambiguity expansions.

  :py:class:`MatchingType` - the equivalence discipline used when comparing
  residues: ``strict``, ``chemical`` or ``isobaric``.

Data
----

  :py:data:`std_aa_mass` - monoisotopic masses of the twenty standard amino
  acid residues, selenocysteine, pyrrolysine and the I/L code J.

  :py:data:`std_unique_residues` - codes of the concrete residues in
  alphabetical order.

  :py:data:`std_combinations` - concrete residues behind each ambiguity code.

  :py:data:`std_isobaric_groups` - groups of residues with identical mass.

  :py:data:`std_alphabet` - the default :py:class:`ResidueAlphabet`.

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

from .auxiliary import PeptagError, UnknownResidueError


class MatchingType(Enum):
    """How residues are compared when a pattern is matched.

    ``strict``
        Codes must be identical.
    ``chemical``
        Ambiguity codes match the residues they stand for and vice versa
        (``B`` matches ``D``, ``D`` matches ``X``).
    ``isobaric``
        Same as ``chemical``, and residues of equal mass are interchangeable
        (I, L and J).
    """
    strict = 0
    chemical = 1
    isobaric = 2


std_aa_mass = {
    'G': 57.02146372057,
    'A': 71.03711378471,
    'S': 87.03202840427001,
    'P': 97.05276384885,
    'V': 99.06841391299,
    'T': 101.04767846841,
    'C': 103.00918478471,
    'L': 113.08406397713001,
    'I': 113.08406397713001,
    'J': 113.08406397713001,
    'N': 114.04292744114001,
    'D': 115.02694302383001,
    'Q': 128.05857750527997,
    'K': 128.09496301399997,
    'E': 129.04259308796998,
    'M': 131.04048491299,
    'H': 137.05891185845002,
    'F': 147.06841391298997,
    'U': 150.95363508471,
    'R': 156.10111102359997,
    'Y': 163.06332853254997,
    'W': 186.07931294985997,
    'O': 237.14772686284996}
"""A dictionary with monoisotopic masses of the twenty standard
amino acid residues, selenocysteine, pyrrolysine and J (I or L).
"""

std_unique_residues = 'ACDEFGHIKLMNOPQRSTUVWY'
"""Concrete residue codes in alphabetical order. This order is used whenever
a set of residues has to be listed, e.g. for PROSITE exclusion groups."""

std_combinations = {
    'B': 'DN',
    'J': 'IL',
    'Z': 'EQ',
    'X': std_unique_residues,
}
"""Concrete residues behind each ambiguity code."""

std_isobaric_groups = ('IJL',)
"""Groups of residue codes that cannot be distinguished by mass."""


class ResidueAlphabet(object):
    """A read-only table of residue codes.

    Parameters
    ----------
    aa_mass : dict, optional
        Monoisotopic masses of residues. Ambiguity codes may be omitted, in
        which case they get the mean mass of their concrete residues.
        Default is :py:data:`std_aa_mass`.
    combinations : dict, optional
        Maps each ambiguity code to an iterable of the concrete codes it
        stands for. Default is :py:data:`std_combinations`.
    isobaric_groups : iterable, optional
        Groups of codes of identical mass. Default is
        :py:data:`std_isobaric_groups`.
    order : iterable, optional
        Canonical order of the concrete residues. By default the order of
        :py:data:`std_unique_residues` is used for the standard residues,
        followed by any other codes of `aa_mass`.

    Examples
    --------
    >>> sorted(std_alphabet.sub_residues('B'))
    ['D', 'N']
    >>> sorted(std_alphabet.combinations_of('I'))
    ['J', 'X']
    >>> sorted(std_alphabet.isobaric_siblings('L'))
    ['I', 'J', 'L']
    """

    def __init__(self, aa_mass=None, combinations=None, isobaric_groups=None, order=None):
        if aa_mass is None:
            aa_mass = std_aa_mass
        if combinations is None:
            combinations = std_combinations
        if isobaric_groups is None:
            isobaric_groups = std_isobaric_groups
        combinations = {code.upper(): frozenset(c.upper() for c in residues)
                        for code, residues in combinations.items()}
        masses = {code.upper(): float(mass) for code, mass in aa_mass.items()}

        if order is None:
            order = [c for c in std_unique_residues if c in masses]
            order.extend(sorted(c for c in masses if c not in order))
        self.unique_residues = tuple(c.upper() for c in order if c.upper() not in combinations)
        for code in self.unique_residues:
            if code not in masses:
                raise PeptagError('No mass given for residue', code)

        for code, residues in combinations.items():
            unknown = residues.difference(self.unique_residues)
            if unknown:
                raise PeptagError('Ambiguity code refers to unknown residues', code, ''.join(sorted(unknown)))
            if code not in masses:
                masses[code] = sum(masses[r] for r in residues) / len(residues)

        self._mass = masses
        self._concrete = combinations
        self.residues = self.unique_residues + tuple(sorted(combinations))

        # sub-residues including the narrower ambiguity codes
        self._sub = {}
        for code, residues in combinations.items():
            narrower = {other for other, res in combinations.items()
                        if other != code and res <= residues}
            self._sub[code] = residues | narrower
        for code in self.unique_residues:
            self._sub[code] = frozenset(code)
        self._combined = {code: frozenset(c for c, sub in self._sub.items() if c != code and code in sub)
                          for code in self.residues}

        self._isobaric = {}
        for group in isobaric_groups:
            group = frozenset(c.upper() for c in group)
            for code in group:
                self._isobaric[code] = group
        self._targets = {}

    def __contains__(self, code):
        return isinstance(code, str) and code.upper() in self._mass

    def __iter__(self):
        return iter(self.residues)

    def __len__(self):
        return len(self.residues)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, ''.join(self.residues))

    def normalize(self, code):
        """Return the upper-case form of `code`, raising
        :py:exc:`~peptag.auxiliary.UnknownResidueError` if it is not known."""
        upper = code.upper()
        if upper not in self._mass:
            raise UnknownResidueError(code)
        return upper

    def validate(self, sequence):
        """Return `sequence` in upper case if all of its residues are known.

        Raises
        ------
        UnknownResidueError
        """
        sequence = sequence.upper()
        for code in sequence:
            if code not in self._mass:
                raise UnknownResidueError(code)
        return sequence

    def mass(self, code):
        """Monoisotopic mass of residue `code`."""
        try:
            return self._mass[code]
        except KeyError:
            return self._mass[self.normalize(code)]

    def is_combination(self, code):
        """Check if `code` is an ambiguity code."""
        return self.normalize(code) in self._concrete

    def sub_residues(self, code, include_combinations=True):
        """Residues that `code` stands for.

        Parameters
        ----------
        code : str
        include_combinations : bool, optional
            If :py:const:`True` (default), narrower ambiguity codes are
            included (``X`` expands to ``B``, ``J`` and ``Z`` as well).

        Returns
        -------
        out : frozenset
            A concrete residue stands for itself only.
        """
        code = self.normalize(code)
        if not include_combinations and code in self._concrete:
            return self._concrete[code]
        return self._sub[code]

    def combinations_of(self, code):
        """Ambiguity codes that include `code`."""
        return self._combined[self.normalize(code)]

    def isobaric_siblings(self, code):
        """Residues indistinguishable from `code` by mass, including `code` itself."""
        code = self.normalize(code)
        return self._isobaric.get(code, frozenset(code))

    def indistinguishable(self, code, tolerance):
        """Residues whose mass is within `tolerance` of the mass of `code`.

        Parameters
        ----------
        code : str
        tolerance : float
            Must be a finite positive number.

        Returns
        -------
        out : list
            Codes in canonical order.
        """
        if tolerance is None or not 0 < tolerance < float('inf'):
            raise PeptagError('Mass tolerance not valid for residue comparison', tolerance)
        mass = self.mass(code)
        return [c for c in self.residues if abs(self._mass[c] - mass) < tolerance]

    def targets(self, code, matching_type=MatchingType.strict):
        """All codes accepted by a pattern position holding `code`.

        Parameters
        ----------
        code : str
        matching_type : MatchingType, optional

        Returns
        -------
        out : frozenset
        """
        key = (code, matching_type)
        try:
            return self._targets[key]
        except KeyError:
            pass
        upper = self.normalize(code)
        result = {upper}
        if matching_type is not MatchingType.strict:
            result.update(self._sub[upper])
            result.update(self._combined[upper])
            if matching_type is MatchingType.isobaric and upper in self._isobaric:
                result.update(self._isobaric[upper])
        result = frozenset(result)
        self._targets[key] = result
        return result

    def is_targeted(self, residue, code, matching_type=MatchingType.strict):
        """Check if `residue` matches a pattern position holding `code`."""
        return self.normalize(residue) in self.targets(code, matching_type)


std_alphabet = ResidueAlphabet()
"""The default alphabet: standard residues and the B, J, Z, X ambiguity codes."""
