"""
codon level consequences of variants falling in the coding region of a transcript
"""
from typing import Optional, Tuple

from ..constants import (
    CODON_SIZE,
    EFFECT_TYPE,
    ERROR_WARNING,
    STOP_AA,
    VARIANT_TYPE,
    get_codon_table,
    reverse_complement,
    translate,
)
from ..interval import Interval
from ..util import logger


def format_codons(ref: str, alt: str) -> Tuple[str, str]:
    """
    upper case the bases which differ between two codon strings of equal length, lower case the rest

    Example:
        >>> format_codons('GCT', 'ACT')
        ('Gct', 'Act')
    """
    ref_chars = []
    alt_chars = []
    for ref_base, alt_base in zip(ref, alt):
        if ref_base.upper() == alt_base.upper():
            ref_chars.append(ref_base.lower())
            alt_chars.append(alt_base.lower())
        else:
            ref_chars.append(ref_base.upper())
            alt_chars.append(alt_base.upper())
    return ''.join(ref_chars), ''.join(alt_chars)


class CodonChange:
    """
    calculates the codon (and amino acid) change caused by a variant on a transcript. Use
    :meth:`CodonChange.factory` to get the calculator for a variant type
    """

    def __init__(self, variant, transcript, effects, exon=None):
        """
        Args:
            variant (Variant): the variant
            transcript (Transcript): the transcript the variant is in
            effects (VariantEffects): accumulator for the effects found
            exon (Exon): only consider the part of the variant in this exon
        """
        self.variant = variant
        self.transcript = transcript
        self.effects = effects
        self.exon = exon
        self.codon_num = -1
        self.codon_index = -1

    @classmethod
    def factory(cls, variant, transcript, effects, exon=None) -> 'CodonChange':
        """
        Raises:
            ValueError: there is no codon level analysis for the variant type (intervals)
        """
        by_type = {
            VARIANT_TYPE.SNP: CodonChangeSnp,
            VARIANT_TYPE.MNP: CodonChangeMnp,
            VARIANT_TYPE.INS: CodonChangeIns,
            VARIANT_TYPE.DEL: CodonChangeDel,
            VARIANT_TYPE.MIXED: CodonChangeMixed,
        }
        try:
            return by_type[variant.variant_type](variant, transcript, effects, exon)
        except KeyError:
            raise ValueError('cannot compute codon changes for variant type', variant.variant_type)

    @property
    def table(self) -> str:
        return self.transcript.codon_table

    def codon_change(self):
        """add the effects of the variant on each intersecting (target) exon"""
        if self.exon is not None:
            exons = [self.exon]
        else:
            exons = [exon for exon in self.transcript.sorted_strand() if exon.intersects(self.variant)]
        for exon in exons:
            self.codon_change_single(exon)

    def codon_change_single(self, exon) -> bool:
        raise NotImplementedError('abstract method')

    def coding_overlap(self, exon) -> Optional[Interval]:
        """the part of the variant in the coding part of an exon"""
        if not self.transcript.is_cds(self.variant):
            return None
        bounds = self.transcript.cds_bounds()
        return Interval.intersection(self.variant, exon, bounds)

    def cds_range(self, overlap: Interval) -> Tuple[int, int]:
        """the first and last cds index (transcription order) of a coding interval"""
        first = self.transcript.cds_base_number(overlap.start)
        last = self.transcript.cds_base_number(overlap.end)
        return min(first, last), max(first, last)

    def oriented(self, seq: str) -> str:
        """a forward strand sequence wrt the transcript strand"""
        if self.transcript.is_strand_minus and seq:
            return reverse_complement(seq)
        return seq

    def translate(self, codons: str) -> str:
        return translate(codons, table=self.table)

    def sequence_warnings(self, cds: str) -> Tuple[str, ...]:
        if cds and len(cds) % CODON_SIZE != 0:
            return (ERROR_WARNING.WARNING_TRANSCRIPT_INCOMPLETE,)
        return ()

    def add(self, effect_type: str, marker, codons_ref='', codons_alt='', aa_ref='', aa_alt='', errors=()):
        return self.effects.add(
            self.variant,
            marker,
            effect_type,
            codons_ref=codons_ref,
            codons_alt=codons_alt,
            aa_ref=aa_ref,
            aa_alt=aa_alt,
            codon_num=self.codon_num,
            codon_index=self.codon_index,
            errors=errors,
        )

    def add_missing_codons(self, effect_type: str, marker, cds: str):
        """
        add an effect without codons when the codons affected are not in the coding sequence. This is either because
        there is no sequence or because the variant is in a trailing partial codon
        """
        if cds:
            logger.debug(f'variant {self.variant} is in an incomplete codon of transcript {self.transcript.id}')
            error = ERROR_WARNING.WARNING_TRANSCRIPT_INCOMPLETE
        else:
            logger.debug(f'no coding sequence available for transcript {self.transcript.id}')
            error = ERROR_WARNING.WARNING_SEQUENCE_NOT_AVAILABLE
        return self.add(effect_type, marker, errors=(error,))

    def classify_substitution(self, ref_codons: str, alt_codons: str, aa_ref: str, aa_alt: str) -> str:
        """effect type of a change which does not alter the length of the coding sequence"""
        table = get_codon_table(self.table)
        is_start = self.codon_num == 0 and ref_codons[:CODON_SIZE].upper() in table.start_codons
        if aa_ref == aa_alt:
            if STOP_AA in aa_ref:
                return EFFECT_TYPE.SYNONYMOUS_STOP
            if is_start:
                return EFFECT_TYPE.SYNONYMOUS_START
            return EFFECT_TYPE.SYNONYMOUS_CODING
        if is_start:
            if alt_codons[:CODON_SIZE].upper() in table.start_codons:
                return EFFECT_TYPE.NON_SYNONYMOUS_START
            return EFFECT_TYPE.START_LOST
        if STOP_AA in aa_ref and STOP_AA not in aa_alt:
            return EFFECT_TYPE.STOP_LOST
        if STOP_AA in aa_alt and STOP_AA not in aa_ref:
            return EFFECT_TYPE.STOP_GAINED
        return EFFECT_TYPE.NON_SYNONYMOUS_CODING

    def stop_change(self, aa_ref: str, aa_alt: str, default: str) -> str:
        """replace the effect of an in-frame change when it creates or removes a stop codon"""
        if STOP_AA in aa_alt and STOP_AA not in aa_ref:
            return EFFECT_TYPE.STOP_GAINED
        if STOP_AA in aa_ref and STOP_AA not in aa_alt:
            return EFFECT_TYPE.STOP_LOST
        return default


class CodonChangeMnp(CodonChange):
    """substitution of one or more adjacent bases"""

    def codon_change_single(self, exon) -> bool:
        overlap = self.coding_overlap(exon)
        if overlap is None:
            return False
        first, last = self.cds_range(overlap)
        self.codon_num, self.codon_index = divmod(first, CODON_SIZE)
        cds = self.transcript.cds_seq()
        codon_start = self.codon_num * CODON_SIZE
        codon_end = (last // CODON_SIZE + 1) * CODON_SIZE
        if len(cds) < codon_end:
            self.add_missing_codons(EFFECT_TYPE.CODON_CHANGE, exon, cds)
            return True
        alt_offset = overlap.start - self.variant.start
        alt = self.oriented(self.variant.alt[alt_offset:alt_offset + len(overlap)])
        ref_codons = cds[codon_start:codon_end]
        alt_codons = ref_codons[:first - codon_start] + alt + ref_codons[last - codon_start + 1:]
        aa_ref = self.translate(ref_codons)
        aa_alt = self.translate(alt_codons)
        effect_type = self.classify_substitution(ref_codons, alt_codons, aa_ref, aa_alt)
        codons_ref, codons_alt = format_codons(ref_codons, alt_codons)
        self.add(effect_type, exon, codons_ref, codons_alt, aa_ref, aa_alt, self.sequence_warnings(cds))
        return True


class CodonChangeSnp(CodonChangeMnp):
    """single base substitution"""

    pass


class CodonChangeIns(CodonChange):
    """insertion of bases before the variant start position"""

    def codon_change_single(self, exon) -> bool:
        overlap = self.coding_overlap(exon)
        if overlap is None:
            return False
        index = self.transcript.cds_base_number(self.variant.start)
        if index < 0:
            return False
        if self.transcript.is_strand_minus:
            # inserted after the base in transcription order
            index += 1
        self.codon_num, self.codon_index = divmod(index, CODON_SIZE)
        inserted = self.oriented(self.variant.alt)

        if len(inserted) % CODON_SIZE != 0:
            effect_type = EFFECT_TYPE.FRAME_SHIFT
        elif self.codon_index == 0:
            effect_type = EFFECT_TYPE.CODON_INSERTION
        else:
            effect_type = EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_INSERTION

        cds = self.transcript.cds_seq()
        codon_start = self.codon_num * CODON_SIZE
        if len(cds) < codon_start + CODON_SIZE:
            self.add_missing_codons(effect_type, exon, cds)
            return True
        ref_codon = cds[codon_start:codon_start + CODON_SIZE]
        alt_codons = ref_codon[:self.codon_index] + inserted + ref_codon[self.codon_index:]
        aa_ref = self.translate(ref_codon)
        if effect_type == EFFECT_TYPE.FRAME_SHIFT:
            aa_alt = ''
        else:
            aa_alt = self.translate(alt_codons)
            if effect_type == EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_INSERTION and alt_codons.startswith(ref_codon):
                effect_type = EFFECT_TYPE.CODON_INSERTION
            effect_type = self.stop_change(aa_ref, aa_alt, effect_type)
        codons_ref = ref_codon.lower()
        codons_alt = (
            ref_codon[:self.codon_index].lower() + inserted.upper() + ref_codon[self.codon_index:].lower()
        )
        self.add(effect_type, exon, codons_ref, codons_alt, aa_ref, aa_alt, self.sequence_warnings(cds))
        return True


class CodonChangeDel(CodonChange):
    """deletion of reference bases"""

    def codon_change_single(self, exon) -> bool:
        overlap = self.coding_overlap(exon)
        if overlap is None:
            return False
        first, last = self.cds_range(overlap)
        self.codon_num, self.codon_index = divmod(first, CODON_SIZE)
        if self.variant.includes(exon):
            self.add(EFFECT_TYPE.EXON_DELETED, exon)
            return True

        deleted = last - first + 1
        if deleted % CODON_SIZE != 0:
            effect_type = EFFECT_TYPE.FRAME_SHIFT
        elif self.codon_index == 0:
            effect_type = EFFECT_TYPE.CODON_DELETION
        else:
            effect_type = EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_DELETION

        cds = self.transcript.cds_seq()
        codon_start = self.codon_num * CODON_SIZE
        codon_end = (last // CODON_SIZE + 1) * CODON_SIZE
        if len(cds) < codon_end:
            self.add_missing_codons(effect_type, exon, cds)
            return True
        ref_codons = cds[codon_start:codon_end]
        offset = first - codon_start
        alt_codons = ref_codons[:offset] + ref_codons[offset + deleted:]
        aa_ref = self.translate(ref_codons)
        if effect_type == EFFECT_TYPE.FRAME_SHIFT:
            aa_alt = ''
        else:
            aa_alt = self.translate(alt_codons)
            effect_type = self.stop_change(aa_ref, aa_alt, effect_type)
        codons_ref = (
            ref_codons[:offset].lower() + ref_codons[offset:offset + deleted].upper()
            + ref_codons[offset + deleted:].lower()
        )
        self.add(effect_type, exon, codons_ref, alt_codons.lower(), aa_ref, aa_alt, self.sequence_warnings(cds))
        return True


class CodonChangeMixed(CodonChange):
    """replacement of reference bases by a different number of alternate bases"""

    def codon_change_single(self, exon) -> bool:
        overlap = self.coding_overlap(exon)
        if overlap is None:
            return False
        first, last = self.cds_range(overlap)
        self.codon_num, self.codon_index = divmod(first, CODON_SIZE)
        net_change = self.variant.length_change()

        cds = self.transcript.cds_seq()
        codon_start = self.codon_num * CODON_SIZE
        codon_end = (last // CODON_SIZE + 1) * CODON_SIZE
        if len(cds) < codon_end:
            effect_type = EFFECT_TYPE.FRAME_SHIFT if net_change % CODON_SIZE != 0 else EFFECT_TYPE.CODON_CHANGE
            self.add_missing_codons(effect_type, exon, cds)
            return True

        ref_codons = cds[codon_start:codon_end]
        alt = self.oriented(self.variant.alt)
        alt_codons = ref_codons[:first - codon_start] + alt + ref_codons[last - codon_start + 1:]
        aa_ref = self.translate(ref_codons)
        warnings = self.sequence_warnings(cds)
        if net_change % CODON_SIZE != 0:
            self.add(EFFECT_TYPE.FRAME_SHIFT, exon, ref_codons.lower(), alt_codons.lower(), aa_ref, '', warnings)
            return True
        aa_alt = self.translate(alt_codons)
        if net_change == 0:
            effect_type = self.classify_substitution(ref_codons, alt_codons, aa_ref, aa_alt)
        elif net_change > 0:
            effect_type = self.stop_change(aa_ref, aa_alt, EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_INSERTION)
        else:
            effect_type = self.stop_change(aa_ref, aa_alt, EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_DELETION)
        if len(ref_codons) == len(alt_codons):
            codons_ref, codons_alt = format_codons(ref_codons, alt_codons)
        else:
            codons_ref, codons_alt = ref_codons.lower(), alt_codons.lower()
        self.add(effect_type, exon, codons_ref, codons_alt, aa_ref, aa_alt, warnings)
        return True
