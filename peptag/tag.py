"""
tag - sequence tags with mass gaps
==================================

Summary
-------

A :py:class:`Tag` is a partial peptide sequence, typically produced by
de novo interpretation of a fragment spectrum. It interleaves two kinds of
components:

  - :py:class:`ExactSegment` - a run of known residues, held as a
    :py:class:`~peptag.pattern.PositionalPattern`;
  - :py:class:`MassGap` - a run of unknown residues known only by their
    total mass.

Two exact segments are never adjacent: adding an exact segment after
another one extends the latter. Gaps of zero mass are dropped.

A tag is displayed as ``<gap>RESIDUES<gap>``::

    >>> t = Tag.from_gaps(300.1, 'TAG', 180.2)
    >>> t.as_sequence()
    '<300.1>TAG<180.2>'
    >>> t.tagged_sequence()
    '...TAG...'

Matching
--------

Tags are located in protein sequences by anchoring one exact segment at a
known position and walking outwards. Exact segments must match the sequence
(see :py:meth:`~peptag.pattern.PositionalPattern.matches_at`); mass gaps
consume residues until their accumulated mass is within the tolerance of the
gap mass.

  :py:meth:`Tag.anchored_match` - greedy walk, the default.

  :py:meth:`Tag.anchored_matches` - exhaustive walk returning every span.

  :py:meth:`Tag.find_matches` - all spans of a tag in one sequence.

  :py:func:`map_tag` - all spans of a tag in a collection of proteins.

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

import logging
import warnings
from collections import defaultdict

from .auxiliary import PeptagError, format_mass
from .alphabet import MatchingType, std_alphabet
from .modification import ModificationKind, std_modifications
from .pattern import PositionalPattern
from .sequence import ConcreteSequence

logger = logging.getLogger(__name__)

water_mass = 18.0105646837
"""Monoisotopic mass of H2O."""

n_terminal_label = 'NH2'
c_terminal_label = 'COOH'


class TagComponent(object):
    """Base class of the two tag component kinds, :py:class:`ExactSegment`
    and :py:class:`MassGap`. No other kinds exist."""
    __slots__ = ()


class ExactSegment(TagComponent):
    """A run of known residues.

    Parameters
    ----------
    pattern : PositionalPattern, ConcreteSequence or str
        A string is parsed as a pattern literal. The pattern is copied.
    alphabet : ResidueAlphabet, optional
        Used to parse a literal.
    """
    __slots__ = ('pattern',)

    def __init__(self, pattern, alphabet=std_alphabet):
        if isinstance(pattern, PositionalPattern):
            pattern = pattern.copy()
        elif isinstance(pattern, ConcreteSequence):
            pattern = pattern.as_pattern()
        else:
            pattern = PositionalPattern.from_literal(pattern, alphabet=alphabet)
        self.pattern = pattern

    def __len__(self):
        return len(self.pattern)

    def __repr__(self):
        return 'ExactSegment({!r})'.format(self.pattern.to_literal())

    def mass(self, modifications=std_modifications):
        return self.pattern.mass(modifications)

    def as_sequence(self):
        return self.pattern.as_sequence()

    def copy(self):
        return ExactSegment(self.pattern)


class MassGap(TagComponent):
    """A run of unknown residues of the given total `mass`."""
    __slots__ = ('value',)

    def __init__(self, mass):
        self.value = float(mass)

    def __repr__(self):
        return 'MassGap({})'.format(self.value)

    def mass(self, modifications=None):
        return self.value

    def as_sequence(self):
        return '<{}>'.format(format_mass(self.value))

    def copy(self):
        return MassGap(self.value)


def _unsupported(component, action):
    raise PeptagError('{} is not supported for tag component'.format(action), type(component).__name__)


def _residue_masses(sequence, alphabet, fixed_masses):
    fixed_masses = fixed_masses or {}
    return [alphabet.mass(c) + fixed_masses.get(c, 0.) for c in sequence]


class Tag(object):
    """An ordered sequence of :py:class:`ExactSegment` and :py:class:`MassGap`
    components.

    Parameters
    ----------
    components : iterable or Tag, optional
        Components (or a tag to copy). Each item is added with
        :py:meth:`add`.
    alphabet : ResidueAlphabet, optional
    """

    def __init__(self, components=(), alphabet=std_alphabet):
        self.alphabet = alphabet
        self._content = []
        for component in components:
            self.add(component)

    @classmethod
    def from_gaps(cls, n_gap, exact, c_gap, alphabet=std_alphabet):
        """Create a tag of an exact segment between two mass gaps."""
        tag = cls(alphabet=alphabet)
        tag.add_mass_gap(n_gap)
        tag.add_exact(exact)
        tag.add_mass_gap(c_gap)
        return tag

    def copy(self):
        return type(self)(self, self.alphabet)

    @property
    def content(self):
        return tuple(self._content)

    def __iter__(self):
        return iter(self._content)

    def __len__(self):
        return len(self._content)

    def __getitem__(self, index):
        return self._content[index]

    def __str__(self):
        return self.as_sequence()

    def __repr__(self):
        return 'Tag({!r})'.format(self._content)

    # building

    def add_mass_gap(self, mass):
        """Append a mass gap. A gap of zero mass is ignored."""
        if mass != 0:
            self._content.append(MassGap(mass))

    def add_exact(self, pattern):
        """Append an exact segment, extending the last component if it is an
        exact segment too. Empty segments are ignored."""
        segment = ExactSegment(pattern, self.alphabet)
        if not len(segment):
            return
        if self._content and isinstance(self._content[-1], ExactSegment):
            self._content[-1].pattern.append(segment.pattern)
        else:
            self._content.append(segment)

    def add(self, component):
        """Append a copy of `component`."""
        if isinstance(component, MassGap):
            self.add_mass_gap(component.value)
        elif isinstance(component, ExactSegment):
            self.add_exact(component.pattern)
        else:
            _unsupported(component, 'Adding')

    # mass

    def n_terminal_gap(self):
        """Mass of the first component if it is a gap, else 0."""
        if self._content and isinstance(self._content[0], MassGap):
            return self._content[0].value
        return 0.

    def c_terminal_gap(self):
        """Mass of the last component if it is a gap, else 0."""
        if self._content and isinstance(self._content[-1], MassGap):
            return self._content[-1].value
        return 0.

    def mass(self, include_c_term_gap=True, include_n_term_gap=True, water=False, modifications=std_modifications):
        """Sum of the component masses.

        Parameters
        ----------
        include_c_term_gap : bool, optional
            If :py:const:`False`, the last component is left out when it is
            a mass gap.
        include_n_term_gap : bool, optional
            If :py:const:`False`, the first component is left out when it is
            a mass gap.
        water : bool, optional
            Add the mass of H2O for the peptide termini. Default is
            :py:const:`False`.
        modifications : ModificationTable, optional
            Used to resolve the modifications of exact segments.

        Returns
        -------
        out : float
        """
        total = 0.
        last = len(self._content) - 1
        for i, component in enumerate(self._content):
            if isinstance(component, MassGap):
                if (i == 0 and not include_n_term_gap) or (i == last and not include_c_term_gap):
                    continue
                total += component.value
            elif isinstance(component, ExactSegment):
                total += component.mass(modifications)
            else:
                _unsupported(component, 'Mass calculation')
        if water:
            total += water_mass
        return total

    # rendering

    def as_sequence(self):
        """All components with gaps as ``<mass>``."""
        parts = []
        for component in self._content:
            if isinstance(component, (ExactSegment, MassGap)):
                parts.append(component.as_sequence())
            else:
                _unsupported(component, 'Rendering')
        return ''.join(parts)

    def _terminal_label(self, segment, sites, terminal_kind, default, use_short_name, modifications):
        label = default
        for site in sites:
            for m in segment.pattern.modifications_at(site):
                mod = modifications.resolve(m.name)
                if getattr(mod.kind, terminal_kind):
                    label = mod.short_name if use_short_name else mod.name
        return label.replace('-', ' ')

    def n_terminal(self, include_terminal_gaps=False, use_short_name=True, modifications=std_modifications):
        """Left end of :py:meth:`tagged_sequence`."""
        if not self._content:
            return ''
        first = self._content[0]
        if isinstance(first, ExactSegment):
            return self._terminal_label(first, (0, 1), 'is_n_terminal', n_terminal_label,
                                        use_short_name, modifications) + '-'
        if isinstance(first, MassGap):
            return first.as_sequence() if include_terminal_gaps else '...'
        _unsupported(first, 'Terminal rendering')

    def c_terminal(self, include_terminal_gaps=False, use_short_name=True, modifications=std_modifications):
        """Right end of :py:meth:`tagged_sequence`."""
        if not self._content:
            return ''
        last = self._content[-1]
        if isinstance(last, ExactSegment):
            size = len(last)
            return '-' + self._terminal_label(last, (size, size + 1), 'is_c_terminal', c_terminal_label,
                                              use_short_name, modifications)
        if isinstance(last, MassGap):
            return last.as_sequence() if include_terminal_gaps else '...'
        _unsupported(last, 'Terminal rendering')

    def tagged_sequence(self, include_terminal_gaps=False, use_short_name=True, modifications=std_modifications):
        """Display the tag with termini and residue modifications.

        Residue modifications follow their residue as ``<name>``. Internal
        gaps are written as ``<mass>``; terminal gaps only when
        `include_terminal_gaps` is set and as ``...`` otherwise.

        Examples
        --------
        >>> t = Tag(alphabet=std_alphabet)
        >>> t.add_exact('PEP')
        >>> t.add_mass_gap(100.)
        >>> t.add_exact('TIDE')
        >>> t.tagged_sequence()
        'NH2-PEP<100.0>TIDE-COOH'
        """
        parts = [self.n_terminal(include_terminal_gaps, use_short_name, modifications)]
        last = len(self._content) - 1
        for i, component in enumerate(self._content):
            if isinstance(component, ExactSegment):
                pattern = component.pattern
                for j in range(len(pattern)):
                    residues = pattern.residues_at(j)
                    if not residues:
                        parts.append('X')
                    elif len(residues) == 1:
                        parts.append(residues[0])
                    else:
                        parts.append('[{}]'.format(''.join(residues)))
                    for m in pattern.modifications_at(j + 1):
                        mod = modifications.resolve(m.name)
                        if mod.kind is ModificationKind.aa:
                            parts.append('<{}>'.format(mod.short_name if use_short_name else mod.name))
            elif isinstance(component, MassGap):
                if 0 < i < last:
                    parts.append(component.as_sequence())
            else:
                _unsupported(component, 'Rendering')
        parts.append(self.c_terminal(include_terminal_gaps, use_short_name, modifications))
        return ''.join(parts)

    def longest_exact_sequence(self):
        """Display form of the longest exact segment, or an empty string."""
        result = ''
        for component in self._content:
            if isinstance(component, ExactSegment) and len(component) > len(result):
                result = component.as_sequence()
        return result

    def length_in_residues(self):
        """Number of residues with every mass gap counted as one."""
        length = 0
        for component in self._content:
            if isinstance(component, ExactSegment):
                length += len(component)
            elif isinstance(component, MassGap):
                length += 1
            else:
                _unsupported(component, 'Length calculation')
        return length

    def _offsets(self):
        offset = 0
        for component in self._content:
            yield offset, component
            if isinstance(component, ExactSegment):
                offset += len(component)
            elif isinstance(component, MassGap):
                offset += 1
            else:
                _unsupported(component, 'Site calculation')

    def modifications_as_string(self):
        """Variable modifications and their 1-based sites, e.g.
        ``'Oxidation (3), Phospho (1, 6)'``. Gaps count as one site."""
        sites = defaultdict(list)
        for offset, component in self._offsets():
            if isinstance(component, ExactSegment):
                for site in range(1, len(component) + 1):
                    for m in component.pattern.modifications_at(site):
                        if m.variable:
                            sites[m.name].append(site + offset)
        return ', '.join('{} ({})'.format(name, ', '.join(str(s) for s in sites[name]))
                         for name in sorted(sites))

    # modifications

    def potential_modification_sites(self, modification, matching_type=MatchingType.strict,
                                     modifications=std_modifications):
        """1-based sites of the tag where `modification` may be located.

        Parameters
        ----------
        modification : Modification or str
            A name is resolved through `modifications`.
        matching_type : MatchingType, optional

        Returns
        -------
        out : list
            Gaps count as a single site.
        """
        if isinstance(modification, str):
            modification = modifications.resolve(modification)
        kind = modification.kind
        ptm_pattern = modification.pattern
        if kind is ModificationKind.aa:
            sites = []
            for offset, component in self._offsets():
                if isinstance(component, ExactSegment):
                    sites.extend(i + offset for i in ptm_pattern.get_indexes(component.pattern, matching_type))
            return sites
        if kind in (ModificationKind.n_term_peptide, ModificationKind.n_term_protein):
            return [1]
        if kind in (ModificationKind.c_term_peptide, ModificationKind.c_term_protein):
            return [self.length_in_residues()]
        if not self._content:
            return []
        if kind in (ModificationKind.n_term_peptide_aa, ModificationKind.n_term_protein_aa):
            first = self._content[0]
            if isinstance(first, MassGap) or ptm_pattern.is_starting(first.pattern, matching_type):
                return [1]
            return []
        if kind in (ModificationKind.c_term_peptide_aa, ModificationKind.c_term_protein_aa):
            last = self._content[-1]
            if isinstance(last, MassGap) or ptm_pattern.is_ending(last.pattern, matching_type):
                return [self.length_in_residues()]
            return []
        raise PeptagError('Modification kind not recognized', kind)

    # comparison

    def is_same_as(self, other, matching_type=MatchingType.strict, modifications=std_modifications):
        """Check if `other` has the same components, with modifications on the
        same sites."""
        return self._same_components(other, matching_type, modifications, 'is_same_as')

    def is_same_sequence_and_modification_status_as(self, other, matching_type=MatchingType.strict,
                                                    modifications=std_modifications):
        """Check if `other` has the same components, with modifications of the
        same masses regardless of their sites."""
        return self._same_components(other, matching_type, modifications,
                                     'is_same_sequence_and_modification_status_as')

    def _same_components(self, other, matching_type, modifications, method):
        if other is None or len(self) != len(other):
            return False
        for mine, theirs in zip(self._content, other):
            if isinstance(mine, MassGap):
                if not isinstance(theirs, MassGap) or mine.value != theirs.value:
                    return False
            elif isinstance(mine, ExactSegment):
                if not isinstance(theirs, ExactSegment):
                    return False
                if not getattr(mine.pattern, method)(theirs.pattern, matching_type, modifications):
                    return False
            else:
                _unsupported(mine, 'Comparison')
        return True

    # reversal

    def can_reverse(self):
        """Check if both termini are mass gaps of at least the mass of H2O."""
        if not self._content:
            return False
        first, last = self._content[0], self._content[-1]
        return (isinstance(first, MassGap) and first.value >= water_mass
                and isinstance(last, MassGap) and last.value >= water_mass)

    def reverse(self, y_ion=True):
        """Return the tag read in the opposite direction.

        Terminal gaps exchange the mass of H2O: for a tag built from y ions
        the new N-terminal gap gains it and the new C-terminal gap loses it,
        and the other way round for b ions.
        """
        if not self.can_reverse():
            warnings.warn('Reversing a tag without terminal gaps of at least the mass of water')
        result = type(self)(alphabet=self.alphabet)
        last = len(self._content) - 1
        for i in range(last, -1, -1):
            component = self._content[i]
            if isinstance(component, MassGap):
                mass = component.value
                if i == last:
                    mass += water_mass if y_ion else -water_mass
                elif i == 0:
                    mass -= water_mass if y_ion else -water_mass
                result.add_mass_gap(mass)
            elif isinstance(component, ExactSegment):
                result.add_exact(component.pattern.reverse())
            else:
                _unsupported(component, 'Reversal')
        return result

    # matching

    def _check_anchor(self, sequence, anchor_index, anchor_component_index, matching_type):
        if not 0 <= anchor_component_index < len(self._content):
            raise PeptagError('Anchor component index out of range', anchor_component_index)
        anchor = self._content[anchor_component_index]
        if isinstance(anchor, MassGap):
            raise PeptagError('Anchor component must be an exact segment', anchor_component_index)
        if not isinstance(anchor, ExactSegment):
            _unsupported(anchor, 'Anchoring')
        return anchor.pattern.matches_at(sequence, anchor_index, matching_type)

    def anchored_match(self, sequence, anchor_index, anchor_component_index,
                       matching_type=MatchingType.strict, tolerance=0.02, fixed_masses=None):
        """Match the whole tag around an anchored exact segment.

        Parameters
        ----------
        sequence : str or ConcreteSequence
            The protein sequence.
        anchor_index : int
            0-based position in `sequence` of the first residue of the anchor
            segment.
        anchor_component_index : int
            Index of the anchor segment in the tag content.
        matching_type : MatchingType, optional
        tolerance : float, optional
            Absolute mass tolerance for gaps, in Da. Default is 0.02.
        fixed_masses : dict, optional
            Extra mass added to every occurrence of a residue while gaps are
            walked, e.g. ``{'C': 57.021464}``.

        Returns
        -------
        out : tuple or None
            Inclusive 0-based ``(start, end)`` span of the tag in `sequence`,
            or :py:const:`None` if the tag does not match.

        Notes
        -----
        Each gap is closed by the first run of residues whose mass is within
        `tolerance`; alternative runs are not tried. Use
        :py:meth:`anchored_matches` to explore all of them.
        """
        sequence = self.alphabet.validate(str(sequence))
        if not self._check_anchor(sequence, anchor_index, anchor_component_index, matching_type):
            return None
        masses = _residue_masses(sequence, self.alphabet, fixed_masses)
        left = anchor_index
        right = anchor_index + len(self._content[anchor_component_index])

        for k in range(anchor_component_index - 1, -1, -1):
            component = self._content[k]
            if isinstance(component, ExactSegment):
                left -= len(component)
                if left < 0 or not component.pattern.matches_at(sequence, left, matching_type):
                    logger.debug('Segment %d of %s not found left of %d', k, self, left + len(component))
                    return None
            elif isinstance(component, MassGap):
                left = _close_gap_left(masses, left, component.value, tolerance)
                if left is None:
                    logger.debug('Gap %d of %s not closed', k, self)
                    return None
            else:
                _unsupported(component, 'Matching')

        for k in range(anchor_component_index + 1, len(self._content)):
            component = self._content[k]
            if isinstance(component, ExactSegment):
                if not component.pattern.matches_at(sequence, right, matching_type):
                    logger.debug('Segment %d of %s not found at %d', k, self, right)
                    return None
                right += len(component)
            elif isinstance(component, MassGap):
                right = _close_gap_right(masses, right, component.value, tolerance)
                if right is None:
                    logger.debug('Gap %d of %s not closed', k, self)
                    return None
            else:
                _unsupported(component, 'Matching')
        return left, right - 1

    def anchored_matches(self, sequence, anchor_index, anchor_component_index,
                         matching_type=MatchingType.strict, tolerance=0.02, fixed_masses=None):
        """Exhaustive variant of :py:meth:`anchored_match`.

        Every run of residues within `tolerance` of a gap mass is explored.

        Returns
        -------
        out : list
            Sorted inclusive ``(start, end)`` spans; empty if the tag does not
            match.

        Notes
        -----
        Requires :py:mod:`numpy`.
        """
        import numpy as np
        sequence = self.alphabet.validate(str(sequence))
        if not self._check_anchor(sequence, anchor_index, anchor_component_index, matching_type):
            return []
        masses = np.array(_residue_masses(sequence, self.alphabet, fixed_masses), dtype=float)
        lefts = {anchor_index}
        rights = {anchor_index + len(self._content[anchor_component_index])}

        for k in range(anchor_component_index - 1, -1, -1):
            component = self._content[k]
            new = set()
            for left in lefts:
                if isinstance(component, ExactSegment):
                    start = left - len(component)
                    if start >= 0 and component.pattern.matches_at(sequence, start, matching_type):
                        new.add(start)
                elif isinstance(component, MassGap):
                    cumulative = np.cumsum(masses[:left][::-1])
                    hits, = np.nonzero(np.abs(cumulative - component.value) <= tolerance)
                    new.update(left - int(h) - 1 for h in hits)
                else:
                    _unsupported(component, 'Matching')
            lefts = new
            if not lefts:
                return []

        for k in range(anchor_component_index + 1, len(self._content)):
            component = self._content[k]
            new = set()
            for right in rights:
                if isinstance(component, ExactSegment):
                    if component.pattern.matches_at(sequence, right, matching_type):
                        new.add(right + len(component))
                elif isinstance(component, MassGap):
                    cumulative = np.cumsum(masses[right:])
                    hits, = np.nonzero(np.abs(cumulative - component.value) <= tolerance)
                    new.update(right + int(h) + 1 for h in hits)
                else:
                    _unsupported(component, 'Matching')
            rights = new
            if not rights:
                return []
        return sorted((left, right - 1) for left in lefts for right in rights)

    def _seed(self):
        best = None
        for i, component in enumerate(self._content):
            if isinstance(component, ExactSegment) and (best is None or len(component) > len(self._content[best])):
                best = i
        return best

    def find_matches(self, sequence, matching_type=MatchingType.strict, tolerance=0.02,
                     fixed_masses=None, exhaustive=False):
        """All spans of the tag in `sequence`.

        The longest exact segment is searched in `sequence` and every
        occurrence is used as anchor for :py:meth:`anchored_match` (or
        :py:meth:`anchored_matches` if `exhaustive` is set).

        Returns
        -------
        out : list
            Distinct inclusive ``(start, end)`` spans in order of discovery.
            Empty if the tag has no exact segment.
        """
        seed = self._seed()
        if seed is None:
            return []
        sequence = self.alphabet.validate(str(sequence))
        spans = []
        for position in self._content[seed].pattern.get_indexes(sequence, matching_type):
            if exhaustive:
                found = self.anchored_matches(sequence, position - 1, seed, matching_type, tolerance, fixed_masses)
            else:
                span = self.anchored_match(sequence, position - 1, seed, matching_type, tolerance, fixed_masses)
                found = [] if span is None else [span]
            for span in found:
                if span not in spans:
                    spans.append(span)
        return spans


def _close_gap_left(masses, cursor, gap, tolerance):
    total = 0.
    while cursor > 0:
        cursor -= 1
        total += masses[cursor]
        if abs(total - gap) <= tolerance:
            return cursor
        if total > gap + tolerance:
            return None
    return None


def _close_gap_right(masses, cursor, gap, tolerance):
    total = 0.
    while cursor < len(masses):
        total += masses[cursor]
        cursor += 1
        if abs(total - gap) <= tolerance:
            return cursor
        if total > gap + tolerance:
            return None
    return None


def map_tag(tag, proteins, matching_type=MatchingType.strict, tolerance=0.02, fixed_masses=None, exhaustive=False):
    """Locate `tag` in a collection of protein sequences.

    Parameters
    ----------
    tag : Tag
    proteins : dict or iterable
        A mapping of accession to sequence, or an iterable of
        ``(accession, sequence)`` pairs such as the output of a FASTA reader.
    matching_type : MatchingType, optional
    tolerance : float, optional
    fixed_masses : dict, optional
    exhaustive : bool, optional

    Yields
    ------
    out : tuple
        ``(accession, start, end)`` with an inclusive 0-based span.
    """
    if hasattr(proteins, 'items'):
        proteins = proteins.items()
    for accession, sequence in proteins:
        spans = tag.find_matches(sequence, matching_type, tolerance, fixed_masses, exhaustive)
        logger.debug('%d matches of %s in %s', len(spans), tag, accession)
        for start, end in spans:
            yield accession, start, end
