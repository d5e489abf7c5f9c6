import re
import weakref
from copy import copy
from typing import TYPE_CHECKING, List, Optional

from ..config import Config
from ..constants import EFFECT_TYPE, STRAND, reverse_complement
from ..interval import Interval

if TYPE_CHECKING:
    from ..variant import Variant
    from .effects import VariantEffects

DEFAULT_CONFIG = Config()


class ReferenceName(str):
    """
    Class for reference sequence names. Ensures that hg19/hg38 chromosome names match.

    Example:
        >>> ReferenceName('chr1') == ReferenceName('1')
        True
    """

    def __eq__(self, other):
        options = {str(self)}
        if self.startswith('chr'):
            options.add(str(self[3:]))
        else:
            options.add('chr' + str(self))
        return other in options

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(re.sub('^chr', '', str(self)))

    def __lt__(self, other):
        self_std_repr = self if not self.startswith('chr') else self[3:]
        other_std_repr = other if not other.startswith('chr') else other[3:]
        return str.__lt__(self_std_repr, other_std_repr)


class Marker:
    """
    a strand aware genomic interval. Start and end are both inclusive genomic positions

    The parent is held as a weak reference. The object owning the marker tree (usually the
    :class:`~vareffect.annotate.genomic.Genome`) must be kept alive by the caller
    """

    effect_type = EFFECT_TYPE.NONE

    def __init__(self, parent=None, start: int = 0, end: Optional[int] = None, strand=None, marker_id: str = ''):
        """
        Args:
            parent: the object this marker belongs to. Only a weak reference is kept, the caller must keep the
                parent alive for as long as the marker is used
            start: start of the marker (inclusive)
            end: end of the marker (inclusive). Defaults to the start
            strand (STRAND): the strand, inherited from the parent when not given
            marker_id: the identifier for this marker

        Raises:
            AttributeError: if the start is greater than the end

        Example:
            >>> Marker(None, 12572784, 12578898)
        """
        start = int(start)
        end = int(end) if end is not None else start
        if start > end:
            raise AttributeError('marker start > end is not allowed', start, end)
        self.parent = parent
        self.start = start
        self.end = end
        self.strand = STRAND.enforce(strand) if strand is not None else None
        self.id = marker_id if marker_id is not None else ''

    @property
    def parent(self):
        """the object this marker belongs to or None if it was never set or no longer exists"""
        if self._parent is None:
            return None
        return self._parent()

    @parent.setter
    def parent(self, parent):
        self._parent = weakref.ref(parent) if parent is not None else None

    def find_parent(self, cls):
        """
        Returns:
            the closest ancestor of the given type or None
        """
        node = self.parent
        while node is not None:
            if isinstance(node, cls):
                return node
            node = getattr(node, 'parent', None)
        return None

    @property
    def chromosome_name(self) -> Optional[str]:
        """the name of the chromosome this marker is on (from the parent chain)"""
        parent = self.parent
        return getattr(parent, 'chromosome_name', None) if parent is not None else None

    @property
    def config(self) -> Config:
        """the configuration of the genome this marker belongs to"""
        parent = self.parent
        if parent is None:
            return DEFAULT_CONFIG
        return getattr(parent, 'config', DEFAULT_CONFIG)

    def get_strand(self):
        """
        pulls strand information from the current object, or follows parent
        objects until the strand is found

        Returns:
            STRAND: the strand of this or any of its parent objects or STRAND.NS
        """
        if self.strand is not None:
            return self.strand
        parent = self.parent
        while parent is not None:
            strand = getattr(parent, 'strand', None)
            if strand is not None:
                return strand
            parent = getattr(parent, 'parent', None)
        return STRAND.NS

    @property
    def is_strand_minus(self) -> bool:
        return self.get_strand() == STRAND.NEG

    @property
    def is_strand_plus(self) -> bool:
        return not self.is_strand_minus

    def __getitem__(self, index):
        return Interval.__getitem__(self, index)

    def size(self) -> int:
        return self.end - self.start + 1

    def __len__(self):
        return self.size()

    def _same_chromosome(self, other) -> bool:
        first = self.chromosome_name
        second = getattr(other, 'chromosome_name', None)
        if first is None or second is None:
            return True
        return ReferenceName(first) == str(second)

    def intersects(self, other) -> bool:
        """True if the markers are on the same chromosome and share at least one base"""
        return self._same_chromosome(other) and Interval.overlaps(self, other)

    def includes(self, other) -> bool:
        """True if every base of the other marker is within this marker"""
        return self._same_chromosome(other) and self.start <= other.start and other.end <= self.end

    def intersect(self, other) -> Optional['Marker']:
        """
        Returns:
            Marker: a new marker (same parent, strand and id as this marker) covering the shared bases or None
        """
        if not self.intersects(other):
            return None
        return Marker(self.parent, max(self.start, other.start), min(self.end, other.end), self.strand, self.id)

    def intersect_size(self, other) -> int:
        if not self.intersects(other):
            return 0
        return min(self.end, other.end) - max(self.start, other.start) + 1

    def distance(self, other) -> int:
        """number of bases between the two markers. 0 if they intersect, -1 if on different chromosomes"""
        if not self._same_chromosome(other):
            return -1
        return abs(Interval.dist(self, other))

    def clone(self) -> 'Marker':
        """shallow copy of this marker"""
        return copy(self)

    def should_apply(self, variant: 'Variant') -> bool:
        """True if the variant can change the coordinates or content of this marker"""
        return self._same_chromosome(variant) and variant.start <= self.end

    def apply(self, variant: 'Variant') -> Optional['Marker']:
        """
        create a new marker reflecting the change in coordinates caused by the variant. The current
        marker is never changed

        Returns:
            Marker: the updated copy or None when the variant deletes the whole marker
        """
        if not self.should_apply(variant):
            return self.clone()
        if variant.is_mixed():
            marker = self
            for part in variant.decompose():
                marker = marker.apply(part)
                if marker is None:
                    return None
            return marker
        marker = self._apply_coordinates(variant)
        if marker is not None:
            self._apply_content(variant, marker)
        return marker

    def _apply_coordinates(self, variant: 'Variant') -> Optional['Marker']:
        marker = self.clone()
        if variant.is_ins():
            length_change = variant.length_change()
            if variant.start < marker.start:
                marker.start += length_change
            marker.end += length_change
        elif variant.is_del():
            if variant.end < self.start:
                length_change = variant.length_change()
                marker.start += length_change
                marker.end += length_change
            elif variant.start <= self.start and variant.end >= self.end:
                return None
            else:
                before = max(0, self.start - variant.start)
                inside = self.intersect_size(variant)
                marker.start -= before
                marker.end -= before + inside
        return marker

    def _apply_content(self, variant: 'Variant', marker: 'Marker'):
        """update anything other than coordinates on the copy created by apply"""
        pass

    def variant_effect(self, variant: 'Variant', effects: 'VariantEffects') -> bool:
        """
        add the effect(s) of a variant on this marker

        Returns:
            bool: True if an effect was added
        """
        if not self.intersects(variant):
            return False
        effects.add(variant, self, self.effect_type)
        return True

    def query(self, marker) -> List['Marker']:
        """child markers which intersect the input marker"""
        return []

    def serialize_save(self, serializer) -> str:
        """tab delimited record for the genome database"""
        return '\t'.join(
            [
                self.__class__.__name__,
                str(serializer.number(self)),
                str(serializer.number(self.parent)),
                str(self.start),
                str(self.end),
                self.id,
                self.strand if self.strand is not None else '',
            ]
        )

    def serialize_parse(self, serializer):
        """populate this marker from the fields of a genome database record"""
        serializer.register(serializer.next_field_int(), self)
        self.parent = serializer.marker(serializer.next_field_int())
        self.start = serializer.next_field_int()
        self.end = serializer.next_field_int()
        self.id = serializer.next_field()
        strand = serializer.next_field()
        self.strand = STRAND.enforce(strand) if strand else None

    def key(self):
        """:class:`tuple`: a tuple representing the items expected to be unique. for hashing and comparing"""
        return (self.__class__.__name__, self.chromosome_name, self.start, self.end, self.strand, self.id)

    def __eq__(self, other):
        if not hasattr(other, 'key'):
            return False
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __lt__(self, other):
        return (self.start, self.end) < (other.start, other.end)

    def __repr__(self):
        cls = self.__class__.__name__
        return '{}({}:{}-{}{}, id={})'.format(
            cls, self.chromosome_name, self.start, self.end, self.strand or '', self.id
        )


class MarkerSeq(Marker):
    """
    a marker with a sequence. The sequence is stored with respect to the strand of the marker (reverse
    complemented on the negative strand) and always covers the marker from start to end
    """

    def __init__(self, parent=None, start=0, end=None, strand=None, marker_id='', seq=None):
        Marker.__init__(self, parent, start, end, strand, marker_id)
        self.seq = '' if not seq else str(seq).upper()

    def has_seq(self) -> bool:
        return len(self.seq) > 0

    @property
    def forward_seq(self) -> str:
        """the sequence wrt the positive/forward strand"""
        if self.is_strand_minus and self.seq:
            return reverse_complement(self.seq)
        return self.seq

    def bases_at(self, index: int, length: int) -> str:
        """
        Args:
            index: 0-based offset from the genomic start of the marker
            length: number of bases

        Returns:
            str: the forward strand bases
        """
        if self.is_strand_minus:
            start = len(self.seq) - index - length
            return reverse_complement(self.seq[start:start + length])
        return self.seq[index:index + length]

    def _apply_content(self, variant, marker):
        if not self.seq:
            return
        seq = self.forward_seq
        overlap = Interval.intersection(self, variant)
        if variant.is_ins():
            if variant.start >= self.start:
                offset = variant.start - self.start
                seq = seq[:offset] + variant.alt + seq[offset:]
        elif overlap is None:
            return
        elif variant.is_del():
            offset = overlap.start - self.start
            seq = seq[:offset] + seq[offset + len(overlap):]
        elif variant.is_snp() or variant.is_mnp():
            offset = overlap.start - self.start
            alt_offset = overlap.start - variant.start
            alt = variant.alt[alt_offset:alt_offset + len(overlap)]
            seq = seq[:offset] + alt + seq[offset + len(overlap):]
        marker.seq = reverse_complement(seq) if self.is_strand_minus else seq
