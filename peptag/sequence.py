"""
sequence - fully resolved residue sequences
===========================================

Summary
-------

A :py:class:`ConcreteSequence` is a residue string with modification
matches attached to its sites. Sites are 1-based; site 0 is the N-terminus
and site ``len + 1`` the C-terminus. Structural edits
(:py:meth:`~ConcreteSequence.insert`, :py:meth:`~ConcreteSequence.append_cterm`,
:py:meth:`~ConcreteSequence.append_nterm`, :py:meth:`~ConcreteSequence.reverse`)
keep every site pointing at the same residue.

A sequence may contain ambiguity codes (``B``, ``J``, ``Z``, ``X``).
:py:meth:`~ConcreteSequence.ambiguity_expansions` enumerates the concrete
sequences they stand for, and :py:func:`minimal_mass` gives a lower bound of
their masses.

Functions
---------

  :py:func:`minimal_mass` - lower-bound mass of a possibly ambiguous sequence.

  :py:func:`has_combination` - check a sequence for ambiguity codes.

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

import itertools

from .auxiliary import PeptagError
from .alphabet import MatchingType, std_alphabet
from .modification import std_modifications
from .pattern import PositionalPattern


def _rebased(matches, site_map):
    """Copies of `matches` moved through `site_map`, a function of the old
    site returning the new one."""
    return [m.copy(site=site_map(m.site)) for m in matches]


class ConcreteSequence(object):
    """A residue sequence with modification matches.

    Parameters
    ----------
    sequence : str
        Residue codes, case-insensitive.
    modifications : iterable, optional
        :py:class:`~peptag.modification.ModificationMatch` objects. They are
        copied.
    alphabet : ResidueAlphabet, optional

    Raises
    ------
    UnknownResidueError
        If `sequence` contains a code not in `alphabet`.
    """

    def __init__(self, sequence='', modifications=(), alphabet=std_alphabet):
        self.alphabet = alphabet
        self.sequence = alphabet.validate(sequence)
        self._modifications = []
        for m in modifications:
            self.add_modification_match(m.copy())

    def copy(self):
        return type(self)(self.sequence, self._modifications, self.alphabet)

    def __len__(self):
        return len(self.sequence)

    def __str__(self):
        return self.sequence

    def __repr__(self):
        return '{}({!r}, {!r})'.format(type(self).__name__, self.sequence, self.modification_matches())

    def __getitem__(self, index):
        return self.sequence[index]

    def residue_at(self, index):
        """Residue at 0-based `index`."""
        return self.sequence[index]

    def set_residue(self, index, code):
        """Replace the residue at 0-based `index` by `code`."""
        if not 0 <= index < len(self):
            raise PeptagError('Residue index out of range', index)
        code = self.alphabet.normalize(code)
        self.sequence = self.sequence[:index] + code + self.sequence[index + 1:]

    # modifications

    def add_modification_match(self, match, site=None):
        """Attach `match`, optionally moving it to `site` first."""
        if site is not None:
            match.site = site
        if not 0 <= match.site <= len(self) + 1:
            raise PeptagError('Modification site out of range', match.site)
        self._modifications.append(match)

    def modification_matches(self):
        """Modification matches ordered by site."""
        return sorted(self._modifications, key=lambda m: m.site)

    def modifications_at(self, site):
        return [m for m in self._modifications if m.site == site]

    def modification_sites(self):
        return sorted(set(m.site for m in self._modifications))

    def remove_modification_match(self, match):
        if match in self._modifications:
            self._modifications.remove(match)

    def clear_modification_matches(self):
        self._modifications = []

    def indexed_modifications(self):
        """A dict of site -> modification name.

        Raises
        ------
        PeptagError
            If two modifications share a site.
        """
        result = {}
        for m in self._modifications:
            if m.site in result:
                raise PeptagError('Two modifications on the same site', m.site, result[m.site], m.name)
            result[m.site] = m.name
        return result

    # structural edits

    def insert(self, offset, other):
        """Insert `other` (a string or :py:class:`ConcreteSequence`) before
        the residue at 0-based `offset`.

        Sites of this sequence after the insertion point are shifted by the
        length of `other`. Modifications of `other` are copied and shifted by
        `offset`; terminal ones are only allowed at the matching end.
        """
        if not 0 <= offset <= len(self):
            raise PeptagError('Insertion offset out of range', offset)
        if not isinstance(other, ConcreteSequence):
            other = type(self)(other, alphabet=self.alphabet)
        size = len(other)
        for m in other._modifications:
            if (m.site == 0 and offset != 0) or (m.site == size + 1 and offset != len(self)):
                raise PeptagError('Cannot insert a terminal modification inside a sequence', m.name)
        mine = _rebased(self._modifications, lambda site: site + size if site > offset else site)
        inserted = _rebased(other._modifications, lambda site: site + offset)
        self.sequence = self.sequence[:offset] + other.sequence + self.sequence[offset:]
        self._modifications = mine + inserted

    def append_cterm(self, other):
        """Append `other` after the last residue."""
        self.insert(len(self), other)

    def append_nterm(self, other):
        """Prepend `other` before the first residue."""
        self.insert(0, other)

    def reverse(self):
        """Return the reversed sequence. Sites are mirrored, so N-terminal
        modifications become C-terminal and vice versa."""
        size = len(self)
        return type(self)(self.sequence[::-1],
                          _rebased(self._modifications, lambda site: size - site + 1),
                          self.alphabet)

    # mass and ambiguity

    def mass(self, modifications=std_modifications):
        """Sum of residue masses and modification masses.

        Parameters
        ----------
        modifications : ModificationTable, optional
            Used to resolve modification names.
        """
        total = sum(self.alphabet.mass(c) for c in self.sequence)
        return total + sum(modifications.mass(m.name) for m in self._modifications)

    def has_combination(self):
        return has_combination(self.sequence, self.alphabet)

    def ambiguity_expansions(self):
        """Generate every concrete sequence obtained by replacing ambiguity
        codes by the residues they stand for, in order. Each call starts a
        new enumeration; modifications are copied to every expansion."""
        choices = []
        for code in self.sequence:
            if self.alphabet.is_combination(code):
                subs = self.alphabet.sub_residues(code, include_combinations=False)
                choices.append([c for c in self.alphabet.unique_residues if c in subs])
            else:
                choices.append([code])
        for combination in itertools.product(*choices):
            yield type(self)(''.join(combination), self._modifications, self.alphabet)

    # matching

    def as_pattern(self):
        """The sequence as a :py:class:`~peptag.pattern.PositionalPattern`
        with the same modification matches."""
        pattern = PositionalPattern(self.sequence, alphabet=self.alphabet)
        for m in self._modifications:
            pattern.add_modification_match(m.site, m.copy())
        return pattern

    def first_index(self, target, matching_type=MatchingType.strict, start=0):
        """First 0-based index of this sequence in `target`, or :py:const:`None`."""
        return self.as_pattern().first_index(target, matching_type, start)

    def matches_in(self, target, matching_type=MatchingType.strict):
        return self.first_index(target, matching_type) is not None

    def matches(self, target, matching_type=MatchingType.strict):
        """Check if this sequence and `target` have the same length and match."""
        return self.as_pattern().matches(target, matching_type)

    def is_same_as(self, other, matching_type=MatchingType.strict, modifications=std_modifications):
        """Check if `other` matches with modifications of equal masses on the
        same sites."""
        if other is None:
            return False
        return self.as_pattern().is_same_as(_as_pattern(other, self.alphabet), matching_type, modifications)

    def is_same_sequence_and_modification_status_as(self, other, matching_type=MatchingType.strict,
                                                    modifications=std_modifications):
        """Check if `other` matches and carries modifications of the same
        masses, wherever they are."""
        if other is None:
            return False
        return self.as_pattern().is_same_sequence_and_modification_status_as(
            _as_pattern(other, self.alphabet), matching_type, modifications)


def _as_pattern(obj, alphabet):
    if isinstance(obj, PositionalPattern):
        return obj
    if isinstance(obj, ConcreteSequence):
        return obj.as_pattern()
    return PositionalPattern(alphabet.validate(obj), alphabet=alphabet)


def has_combination(sequence, alphabet=std_alphabet):
    """Check if `sequence` contains an ambiguity code."""
    return any(alphabet.is_combination(c) for c in str(sequence))


def minimal_mass(sequence, alphabet=std_alphabet):
    """Lower bound of the residue mass of `sequence`.

    Ambiguity codes contribute the smallest mass among the concrete residues
    they stand for; other residues contribute their own mass. Modifications
    are not considered.

    Parameters
    ----------
    sequence : str or ConcreteSequence
    alphabet : ResidueAlphabet, optional

    Returns
    -------
    out : float
    """
    total = 0.
    for code in str(sequence):
        if alphabet.is_combination(code):
            total += min(alphabet.mass(c) for c in alphabet.sub_residues(code, include_combinations=False))
        else:
            total += alphabet.mass(code)
    return total
