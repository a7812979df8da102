"""
pattern - positional residue patterns
=====================================

Summary
-------

A :py:class:`PositionalPattern` describes a short motif position by
position. Each position holds an ordered set of allowed residue codes; an
*empty* set is a wildcard that accepts any residue. The pattern also has an
*anchor*, the position of interest (e.g. a cleavage site), and may carry
:py:class:`~peptag.modification.ModificationMatch` objects on its sites.

Patterns can be created from literals::

    >>> p = PositionalPattern.from_literal('[KR]G')
    >>> len(p), p.residues_at(0)
    (2, ('K', 'R'))

and programmatically with :py:meth:`PositionalPattern.set_targeted` and
:py:meth:`PositionalPattern.set_excluded`.

Positions are 0-based. Modification sites are 1-based, with 0 denoting the
N-terminus and ``len + 1`` the C-terminus.

Matching
--------

Residues are compared under a :py:class:`~peptag.alphabet.MatchingType`:

  - ``strict``: identical codes only;
  - ``chemical``: ambiguity codes match the residues they stand for;
  - ``isobaric``: as ``chemical``, plus I, J and L are interchangeable.

  :py:meth:`PositionalPattern.first_index` - 0-based sliding-window scan.

  :py:meth:`PositionalPattern.get_indexes` - all (overlapping) 1-based
  match positions.

  :py:meth:`PositionalPattern.compile_matcher` - the pattern as a compiled
  regular expression.

Export
------

  :py:meth:`PositionalPattern.to_literal` - literal that parses back into an
  equivalent pattern.

  :py:meth:`PositionalPattern.to_prosite` - PROSITE-like notation.

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
import logging
import re
from collections import Counter

from .auxiliary import PeptagError, PatternSyntaxError, memoize
from .alphabet import MatchingType, std_alphabet
from .modification import std_modifications

logger = logging.getLogger(__name__)

prosite_exclusion_threshold = 15
"""Allowed sets larger than this are written as exclusion groups by
:py:meth:`PositionalPattern.to_prosite`."""


@memoize(10000)
def _character_class(alphabet, codes, matching_type):
    if not codes:
        accepted = set(alphabet.residues)
    else:
        accepted = set()
        for code in codes:
            accepted.update(alphabet.targets(code, matching_type))
    return '[{}]'.format(''.join(re.escape(c) for c in sorted(accepted)))


class PositionalPattern(object):
    """A sparse, position-indexed residue pattern.

    Parameters
    ----------
    positions : iterable, optional
        Allowed residues for positions 0, 1, ... Each item is an iterable of
        residue codes (a string works); an empty item is a wildcard.
    anchor : int, optional
        Position of interest. Default is 0.
    alphabet : ResidueAlphabet, optional
        Used to resolve residue codes. Default is
        :py:data:`~peptag.alphabet.std_alphabet`.

    Notes
    -----
    Compiled matchers are cached per matching type and discarded on every
    mutation. Call :py:meth:`precompile` before sharing an instance between
    threads.
    """

    def __init__(self, positions=(), anchor=0, alphabet=std_alphabet):
        self.alphabet = alphabet
        self.anchor = anchor
        self._positions = {}
        self._modifications = {}
        self._matchers = {}
        for i, residues in enumerate(positions):
            self.set_targeted(i, residues)

    @classmethod
    def from_literal(cls, text, anchor=0, alphabet=std_alphabet):
        """Parse a pattern literal such as ``'K'``, ``'[KR]'`` or ``'[KR]X[ST]'``.

        Every letter outside brackets is a position of its own; a bracket
        group makes one position of all the letters it holds. An empty group
        ``[]`` is a wildcard.

        Raises
        ------
        PatternSyntaxError
            If brackets are nested or unbalanced.
        UnknownResidueError
            If a letter is not in `alphabet`.
        """
        pattern = cls(anchor=anchor, alphabet=alphabet)
        group = None
        start = None
        pos = 0
        for i, char in enumerate(text):
            if char == '[':
                if group is not None:
                    raise PatternSyntaxError('Nested bracket group', text, i)
                group = []
                start = i
            elif char == ']':
                if group is None:
                    raise PatternSyntaxError('Closing bracket without opening bracket', text, i)
                pattern.set_targeted(pos, group)
                pos += 1
                group = None
            elif group is not None:
                group.append(alphabet.normalize(char))
            else:
                pattern.set_targeted(pos, alphabet.normalize(char))
                pos += 1
        if group is not None:
            raise PatternSyntaxError('Unclosed bracket group', text, start)
        return pattern

    def copy(self):
        """Return a deep copy of the pattern."""
        other = type(self)(anchor=self.anchor, alphabet=self.alphabet)
        other._positions = {i: list(aas) for i, aas in self._positions.items()}
        other._modifications = {site: [m.copy() for m in matches]
                                for site, matches in self._modifications.items()}
        return other

    def __len__(self):
        return len(self._positions)

    def __iter__(self):
        for i in range(len(self)):
            yield tuple(self._positions.get(i, ()))

    def __str__(self):
        return self.as_sequence()

    def __repr__(self):
        return '{}.from_literal({!r}, anchor={})'.format(type(self).__name__, self.to_literal(), self.anchor)

    # construction

    def _invalidate(self):
        self._matchers.clear()

    def _fill(self):
        if self._positions:
            for i in range(max(self._positions)):
                self._positions.setdefault(i, [])

    def _check_position(self, pos):
        if pos < 0:
            raise PeptagError('Negative pattern position', pos)

    def set_targeted(self, pos, residues):
        """Set the residues allowed at position `pos`, overwriting the previous
        set. Positions skipped between the current end and `pos` become
        wildcards."""
        self._check_position(pos)
        allowed = []
        for code in residues:
            code = self.alphabet.normalize(code)
            if code not in allowed:
                allowed.append(code)
        self._positions[pos] = allowed
        self._fill()
        self._invalidate()

    def set_excluded(self, pos, exceptions):
        """Exclude `exceptions` from position `pos`.

        Exclusion is resolved against the residues currently allowed at `pos`
        or, for an undefined or wildcard position, against all concrete
        residues of the alphabet. An empty `exceptions` makes the position a
        wildcard.
        """
        self._check_position(pos)
        exceptions = set(self.alphabet.normalize(c) for c in exceptions or ())
        if not exceptions:
            allowed = []
        else:
            current = self._positions.get(pos) or self.alphabet.unique_residues
            allowed = [c for c in current if c not in exceptions]
        self._positions[pos] = allowed
        self._fill()
        self._invalidate()

    def residues_at(self, pos):
        """Residues allowed at `pos`. An empty tuple stands for a wildcard or
        an undefined position."""
        return tuple(self._positions.get(pos, ()))

    def is_wildcard(self, pos):
        return pos in self._positions and not self._positions[pos]

    def remove_at(self, pos):
        """Remove position `pos`, shifting the following positions and their
        modification sites one step left."""
        if not 0 <= pos < len(self):
            raise PeptagError('Pattern position out of range', pos)
        self._rebase(self, lambda i: i if i < pos else (None if i == pos else i - 1), clear=True)

    def swap_rows(self, first, second):
        """Exchange the residues allowed at two positions."""
        for row in (first, second):
            if not 0 <= row < len(self):
                raise PeptagError('Illegal row index', row)
        self._positions[first], self._positions[second] = self._positions[second], self._positions[first]
        self._invalidate()

    # modifications

    def add_modification_match(self, site, match):
        """Attach `match` at 1-based `site`. The site of `match` is updated."""
        if site < 0:
            raise PeptagError('Modification site out of range', site)
        match.site = site
        self._modifications.setdefault(site, []).append(match)

    def modifications_at(self, site):
        return list(self._modifications.get(site, ()))

    def modification_sites(self):
        return sorted(self._modifications)

    def modification_matches(self):
        """All modification matches ordered by site."""
        return [m for site in sorted(self._modifications) for m in self._modifications[site]]

    def remove_modification_match(self, site, match):
        matches = self._modifications.get(site)
        if matches and match in matches:
            matches.remove(match)
            if not matches:
                del self._modifications[site]

    def clear_modification_matches(self):
        self._modifications.clear()

    def _rebase(self, target, position_map, clear=False):
        """Copy positions and modification sites of this pattern into
        `target` through `position_map`, a function of the 0-based position
        returning the new position or :py:const:`None` to drop it.

        Modification site ``s`` follows position ``s - 1``, so the
        N-terminal site 0 follows position -1.
        """
        positions = list(self._positions.items())
        modifications = list(self._modifications.items())
        if clear:
            target._positions = {}
            target._modifications = {}
        for i, aas in positions:
            new = position_map(i)
            if new is not None:
                target._positions[new] = list(aas)
        for site, matches in modifications:
            new = position_map(site - 1)
            if new is not None:
                for m in matches:
                    target._modifications.setdefault(new + 1, []).append(m.copy(site=new + 1))
        target._fill()
        target._invalidate()
        return target

    # structural operations

    def merge(self, other):
        """Merge `other` into this pattern position by position.

        Allowed sets are united, except that a wildcard on either side keeps
        the position a wildcard. Modification matches of `other` are added.
        """
        for i, other_aas in sorted(other._positions.items()):
            mine = self._positions.get(i)
            if mine is None:
                self._positions[i] = list(other_aas)
            elif not other_aas:
                self._positions[i] = []
            elif mine:
                mine.extend(c for c in other_aas if c not in mine)
        for site, matches in sorted(other._modifications.items()):
            for m in matches:
                self.add_modification_match(site, m.copy())
        self._fill()
        self._invalidate()

    def append(self, other):
        """Append `other` after the last position of this pattern. The anchor
        is not changed. A C-terminal modification of this pattern moves to
        the new C-terminus."""
        if 0 in other._modifications:
            raise PeptagError('Cannot append a pattern with an N-terminal modification')
        if other is self:
            other = other.copy()
        offset = len(self)
        shift = len(other)
        self._rebase(self, lambda i: i if i < offset else i + shift, clear=True)
        other._rebase(self, lambda i: i + offset)

    def sub_pattern(self, start, end=None, shift_anchor=False):
        """Return positions `start` to `end` (both inclusive, `end` defaults
        to the last position) as a new pattern starting at 0.

        With `shift_anchor` the new anchor is ``anchor - start``, otherwise the
        anchor is copied as is.
        """
        if end is None:
            end = len(self) - 1
        result = type(self)(anchor=self.anchor - start if shift_anchor else self.anchor, alphabet=self.alphabet)
        return self._rebase(result, lambda i: i - start if start <= i <= end else None)

    def reverse(self):
        """Return a new pattern with positions in reverse order.

        Modification sites are mirrored. The anchor of the result is copied
        unchanged and is not meaningful after reversal.
        """
        length = len(self)
        result = type(self)(anchor=self.anchor, alphabet=self.alphabet)
        return self._rebase(result, lambda i: length - i - 1)

    # matching

    def is_targeted(self, residue, pos, matching_type=MatchingType.strict):
        """Check if `residue` is accepted at position `pos`.

        A wildcard position accepts any residue; a position outside the
        pattern accepts none.
        """
        allowed = self._positions.get(pos)
        if allowed is None:
            return False
        if not allowed:
            return True
        residue = self.alphabet.normalize(residue)
        return any(residue in self.alphabet.targets(code, matching_type) for code in allowed)

    def compile_matcher(self, matching_type=MatchingType.strict):
        """Return the pattern as a case-insensitive compiled regular expression,
        one sorted character class per position."""
        matcher = self._matchers.get(matching_type)
        if matcher is None:
            regex = ''.join(_character_class(self.alphabet, tuple(sorted(self._positions[i])), matching_type)
                            for i in range(len(self)))
            logger.debug('Compiled %s matcher for %s: %s', matching_type.name, self.to_literal(), regex)
            matcher = re.compile(regex, re.IGNORECASE)
            self._matchers[matching_type] = matcher
        return matcher

    def precompile(self, *matching_types):
        """Fill the matcher cache for `matching_types` (all by default)."""
        for mt in matching_types or MatchingType:
            self.compile_matcher(mt)
        return self

    def _window_matches(self, target, i, matching_type):
        if isinstance(target, PositionalPattern):
            for j in range(len(self)):
                candidates = target._positions.get(i + j)
                if candidates and not any(self.is_targeted(aa, j, matching_type) for aa in candidates):
                    return False
            return True
        return all(self.is_targeted(target[i + j], j, matching_type) for j in range(len(self)))

    def first_index(self, target, matching_type=MatchingType.strict, start=0):
        """First 0-based index of a window of `target` matched by the pattern.

        Parameters
        ----------
        target : str, ConcreteSequence or PositionalPattern
            Wildcards of a pattern target are matched by any position.
        matching_type : MatchingType, optional
        start : int, optional
            Index where scanning starts.

        Returns
        -------
        out : int or None
            :py:const:`None` if there is no match.
        """
        if not isinstance(target, PositionalPattern):
            target = self.alphabet.validate(str(target))
        for i in range(max(start, 0), len(target) - len(self) + 1):
            if self._window_matches(target, i, matching_type):
                return i
        return None

    def get_indexes(self, target, matching_type=MatchingType.strict):
        """All 1-based positions of `target` where the pattern matches.
        Overlapping matches are reported."""
        if not len(self):
            return []
        if isinstance(target, PositionalPattern):
            result = []
            index = self.first_index(target, matching_type)
            while index is not None:
                result.append(index + 1)
                index = self.first_index(target, matching_type, index + 1)
            return result
        target = self.alphabet.validate(str(target))
        matcher = self.compile_matcher(matching_type)
        result = []
        match = matcher.search(target)
        while match is not None:
            result.append(match.start() + 1)
            match = matcher.search(target, match.start() + 1)
        return result

    def matches_in(self, target, matching_type=MatchingType.strict):
        """Check if the pattern is found anywhere in `target`."""
        return self.first_index(target, matching_type) is not None

    def matches(self, target, matching_type=MatchingType.strict):
        """Check if the pattern matches the whole of `target`."""
        return len(self) == len(target) and self.first_index(target, matching_type) is not None

    def matches_at(self, target, index, matching_type=MatchingType.strict):
        """Check if the pattern matches `target` at 0-based `index`."""
        if index < 0 or index + len(self) > len(target):
            return False
        return self._window_matches(target if isinstance(target, PositionalPattern) else str(target),
                                    index, matching_type)

    def is_starting(self, target, matching_type=MatchingType.strict):
        """Check if `target` starts with the pattern."""
        return self.matches_at(target, 0, matching_type)

    def is_ending(self, target, matching_type=MatchingType.strict):
        """Check if `target` ends with the pattern."""
        return self.matches_at(target, len(target) - len(self), matching_type)

    def contains(self, other, matching_type=MatchingType.strict):
        """Check if `other` (a literal or a pattern) is found in this pattern."""
        if not isinstance(other, PositionalPattern):
            other = type(self).from_literal(str(other), alphabet=self.alphabet)
        return other.first_index(self, matching_type) is not None

    def _modification_masses(self, site, modifications):
        return [modifications.mass(m.name) for m in self._modifications.get(site, ())]

    def is_same_as(self, other, matching_type=MatchingType.strict, modifications=std_modifications):
        """Check if `other` matches this pattern with modifications of equal
        mass on the same sites."""
        if other is None or not self.matches(other, matching_type):
            return False
        for site in set(self._modifications) | set(other._modifications):
            mine = self._modification_masses(site, modifications)
            theirs = other._modification_masses(site, modifications)
            if len(mine) != len(theirs) or any(mass not in theirs for mass in mine):
                return False
        return True

    def is_same_sequence_and_modification_status_as(self, other, matching_type=MatchingType.strict,
                                                    modifications=std_modifications):
        """Check if `other` matches this pattern and carries the same number of
        modifications of each mass."""
        if other is None or not self.matches(other, matching_type):
            return False
        mine = Counter(mass for site in self._modifications for mass in self._modification_masses(site, modifications))
        theirs = Counter(mass for site in other._modifications
                         for mass in other._modification_masses(site, modifications))
        return mine == theirs

    def all_possible_sequences(self):
        """All plain sequences obtained by choosing one allowed residue per
        position. Wildcards give ``X``."""
        choices = [self._positions[i] or ['X'] for i in range(len(self))]
        return [''.join(combination) for combination in itertools.product(*choices)]

    def mass(self, modifications=std_modifications):
        """Mass of a pattern with exactly one residue per position, including
        its modifications.

        Raises
        ------
        PeptagError
            If a position allows several residues or is a wildcard.
        """
        total = 0.
        for i in range(len(self)):
            allowed = self._positions[i]
            if len(allowed) != 1:
                raise PeptagError('Cannot compute the mass of an ambiguous pattern', self.as_sequence(), i)
            total += self.alphabet.mass(allowed[0])
        for site in self._modifications:
            total += sum(self._modification_masses(site, modifications))
        return total

    def standard_search_pattern(self):
        """A single-position pattern targeting the residues allowed at the
        anchor position."""
        return type(self)([self.residues_at(self.anchor)], alphabet=self.alphabet)

    @classmethod
    def trypsin_example(cls, alphabet=std_alphabet):
        """K or R, not followed by P."""
        pattern = cls(alphabet=alphabet)
        pattern.set_targeted(0, 'KR')
        pattern.set_excluded(1, 'P')
        return pattern

    # rendering

    def to_literal(self):
        """Literal form of the pattern, parsed back by :py:meth:`from_literal`.
        Wildcards are written as ``[]``."""
        parts = []
        for i in range(len(self)):
            allowed = self._positions[i]
            if len(allowed) == 1:
                parts.append(allowed[0])
            else:
                parts.append('[{}]'.format(''.join(allowed)))
        return ''.join(parts)

    def as_sequence(self):
        """Display form of the pattern, with wildcards as ``X``."""
        parts = []
        for i in range(len(self)):
            allowed = self._positions[i]
            if not allowed:
                parts.append('X')
            elif len(allowed) == 1:
                parts.append(allowed[0])
            else:
                parts.append('[{}]'.format(''.join(allowed)))
        return ''.join(parts)

    def to_prosite(self):
        """PROSITE-like rendering of the pattern.

        Runs of wildcards are written as ``(n)``. Allowed sets are written as
        ``[...]`` or, when they hold more than 15 residues, as the complement
        ``{...}`` over the concrete residues. ``!`` follows the first
        position.

        Examples
        --------
        >>> PositionalPattern.trypsin_example().to_prosite()
        '[KR]!{P}'
        """
        parts = []
        run = 0
        for i in range(len(self)):
            allowed = self._positions[i]
            if not allowed:
                run += 1
            else:
                if run:
                    parts.append('({})'.format(run))
                    run = 0
                if len(allowed) > prosite_exclusion_threshold:
                    excluded = [c for c in self.alphabet.unique_residues if c not in allowed]
                    parts.append('{{{}}}'.format(''.join(excluded)))
                else:
                    parts.append('[{}]'.format(''.join(allowed)))
            if i == 0:
                if run:
                    parts.append('({})'.format(run))
                    run = 0
                parts.append('!')
        if run:
            parts.append('({})'.format(run))
        return ''.join(parts)


def merge_patterns(first, second):
    """Return a new pattern merging `second` into a copy of `first`
    (see :py:meth:`PositionalPattern.merge`)."""
    result = first.copy()
    result.merge(second)
    return result
