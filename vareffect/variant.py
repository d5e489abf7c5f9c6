import re
from typing import List, Optional

from .annotate.base import Marker, ReferenceName
from .constants import EFFECT_TYPE, STRAND, VARIANT_TYPE
from .interval import Interval

ALLELE_PATTERN = re.compile(r'^[ACGTN]*$')


def classify_variant(ref: str, alt: str) -> str:
    """
    Example:
        >>> classify_variant('A', 'T')
        'SNP'
        >>> classify_variant('', 'AC')
        'INS'
    """
    if not ref and not alt:
        return VARIANT_TYPE.INTERVAL
    elif len(ref) == len(alt):
        return VARIANT_TYPE.SNP if len(ref) == 1 else VARIANT_TYPE.MNP
    elif not ref:
        return VARIANT_TYPE.INS
    elif not alt:
        return VARIANT_TYPE.DEL
    return VARIANT_TYPE.MIXED


class Variant(Marker):
    """
    a change in sequence wrt the positive/forward strand of a chromosome

    Insertions are placed before the base at their start position. Reference and alternate alleles are expected to
    already be trimmed of any bases they share (see :meth:`Variant.from_vcf`)
    """

    effect_type = EFFECT_TYPE.NONE

    def __init__(
        self,
        chromosome=None,
        start: int = 0,
        ref: str = '',
        alt: str = '',
        end: Optional[int] = None,
        variant_id: str = '',
    ):
        """
        Args:
            chromosome: the chromosome name (or Chromosome object) the variant is on
            start: the first reference base affected
            ref: the reference allele
            alt: the alternate allele
            end: the last position, only used for intervals (no ref or alt given)
            variant_id: optional identifier

        Raises:
            ValueError: if either allele contains anything other than nucleotides (ACGTN)

        Example:
            >>> Variant('1', 100, 'A', 'T')
            Variant(1:100_A/T)
        """
        ref = (ref or '').upper()
        alt = (alt or '').upper()
        for allele in (ref, alt):
            if not ALLELE_PATTERN.match(allele):
                raise ValueError('unexpected allele. expected nucleotides (ACGTN)', allele)
        variant_type = classify_variant(ref, alt)
        start = int(start)
        if variant_type == VARIANT_TYPE.INTERVAL:
            end = start if end is None else end
        elif variant_type in {VARIANT_TYPE.SNP, VARIANT_TYPE.INS}:
            end = start
        else:
            end = start + len(ref) - 1
        Marker.__init__(self, None, start, end, STRAND.POS, variant_id)
        chromosome = getattr(chromosome, 'name', chromosome)
        self.chromosome = ReferenceName(chromosome) if chromosome is not None else None
        self.ref = ref
        self.alt = alt
        self.variant_type = variant_type

    @classmethod
    def from_vcf(cls, chromosome, pos: int, ref: str, alt: str, variant_id: str = '') -> 'Variant':
        """
        create a variant from VCF style alleles by removing the leading and then trailing bases
        shared by the reference and alternate alleles

        Example:
            >>> Variant.from_vcf('1', 100, 'A', 'AT')
            Variant(1:101_/T)
        """
        ref = ref.upper()
        alt = alt.upper()
        if ref == alt:
            return cls(chromosome, pos, ref, alt, variant_id=variant_id)
        while ref and alt and ref[0] == alt[0]:
            ref = ref[1:]
            alt = alt[1:]
            pos += 1
        while ref and alt and ref[-1] == alt[-1]:
            ref = ref[:-1]
            alt = alt[:-1]
        return cls(chromosome, pos, ref, alt, variant_id=variant_id)

    @property
    def chromosome_name(self):
        return self.chromosome

    def is_snp(self) -> bool:
        return self.variant_type == VARIANT_TYPE.SNP

    def is_mnp(self) -> bool:
        return self.variant_type == VARIANT_TYPE.MNP

    def is_ins(self) -> bool:
        return self.variant_type == VARIANT_TYPE.INS

    def is_del(self) -> bool:
        return self.variant_type == VARIANT_TYPE.DEL

    def is_mixed(self) -> bool:
        return self.variant_type == VARIANT_TYPE.MIXED

    def is_interval(self) -> bool:
        return self.variant_type == VARIANT_TYPE.INTERVAL

    def is_variant(self) -> bool:
        """False for intervals and for alleles which do not change the sequence"""
        return not self.is_interval() and self.ref != self.alt

    def flanks(self) -> Interval:
        """
        the reference bases touched by the variant. An insertion touches the bases on either side of it

        Example:
            >>> Variant('1', 101, '', 'T').flanks()
            Interval(100, 101)
        """
        if self.is_ins():
            return Interval(self.start - 1, self.start)
        return Interval(self.start, self.end)

    def length_change(self) -> int:
        """net change in sequence length caused by this variant"""
        return len(self.alt) - len(self.ref)

    def decompose(self) -> List['Variant']:
        """
        split a mixed variant into a substitution of the leading bases followed by a pure insertion or deletion

        Example:
            >>> Variant('1', 100, 'ACG', 'T').decompose()
            [Variant(1:100_A/T), Variant(1:101_CG/)]
        """
        if not self.is_mixed():
            return [self]
        shared = min(len(self.ref), len(self.alt))
        parts = []
        if shared:
            parts.append(Variant(self.chromosome, self.start, self.ref[:shared], self.alt[:shared]))
        parts.append(Variant(self.chromosome, self.start + shared, self.ref[shared:], self.alt[shared:]))
        return parts

    def key(self):
        return (self.chromosome, self.start, self.end, self.ref, self.alt)

    def __str__(self):
        if self.is_interval():
            return '{}:{}-{}'.format(self.chromosome, self.start, self.end)
        return '{}:{}_{}/{}'.format(self.chromosome, self.start, self.ref, self.alt)

    def __repr__(self):
        return 'Variant({})'.format(str(self))
