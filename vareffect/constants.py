"""
module responsible for small utility functions and constants used throughout the vareffect package
"""
import re
from typing import Dict, List

from Bio.Data import CodonTable
from Bio.Seq import Seq


class VarEffectNamespace:
    """
    Namespace to hold a closed set of module constants

    Example:
        >>> class THING(VarEffectNamespace):
        ...     FIRST = 1
        ...     SECOND = 2
        >>> THING.values()
        [1, 2]
    """

    @classmethod
    def keys(cls) -> List[str]:
        return [
            k
            for k, v in cls.__dict__.items()
            if not k.startswith('_') and not isinstance(v, (classmethod, staticmethod))
            and not callable(v)
        ]

    @classmethod
    def values(cls) -> List:
        return [getattr(cls, k) for k in cls.keys()]

    @classmethod
    def items(cls) -> List:
        return [(k, getattr(cls, k)) for k in cls.keys()]

    @classmethod
    def enforce(cls, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist
        """
        if value not in cls.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), cls.values())
        return value

    @classmethod
    def reverse(cls, value) -> str:
        """
        for a given value, return the associated key

        Raises:
            KeyError: the value is not unique
            KeyError: the value is not assigned
        """
        result = [key for key, val in cls.items() if val == value]
        if len(result) > 1:
            raise KeyError('could not reverse, the mapping is not unique', value, result)
        elif not result:
            raise KeyError('input value is not assigned to a key', value)
        return result[0]


class STRAND(VarEffectNamespace):
    """
    holds controlled vocabulary for allowed strand values

    Attributes:
        POS: the positive/forward strand
        NEG: the negative/reverse strand
        NS: strand is not specified
    """

    POS: str = '+'
    NEG: str = '-'
    NS: str = '?'


class VARIANT_TYPE(VarEffectNamespace):
    """
    holds controlled vocabulary for the classification of sequence changes

    Attributes:
        SNP: single nucleotide substitution
        MNP: multiple adjacent nucleotides substituted (same length)
        INS: insertion of bases, no reference bases removed
        DEL: deletion of reference bases, nothing inserted
        MIXED: reference and alternate differ in length and content
        INTERVAL: a region without any sequence change
    """

    SNP: str = 'SNP'
    MNP: str = 'MNP'
    INS: str = 'INS'
    DEL: str = 'DEL'
    MIXED: str = 'MIXED'
    INTERVAL: str = 'INTERVAL'


class EFFECT_TYPE(VarEffectNamespace):
    """
    holds controlled vocabulary for the effects a variant may have on a marker
    """

    NONE: str = 'NONE'
    CHROMOSOME: str = 'CHROMOSOME'
    INTERGENIC: str = 'INTERGENIC'
    UPSTREAM: str = 'UPSTREAM'
    DOWNSTREAM: str = 'DOWNSTREAM'
    GENE: str = 'GENE'
    INTRAGENIC: str = 'INTRAGENIC'
    TRANSCRIPT: str = 'TRANSCRIPT'
    EXON: str = 'EXON'
    EXON_DELETED: str = 'EXON_DELETED'
    INTRON: str = 'INTRON'
    UTR_5_PRIME: str = 'UTR_5_PRIME'
    UTR_3_PRIME: str = 'UTR_3_PRIME'
    UTR_5_DELETED: str = 'UTR_5_DELETED'
    UTR_3_DELETED: str = 'UTR_3_DELETED'
    START_GAINED: str = 'START_GAINED'
    SPLICE_SITE_DONOR: str = 'SPLICE_SITE_DONOR'
    SPLICE_SITE_ACCEPTOR: str = 'SPLICE_SITE_ACCEPTOR'
    SPLICE_SITE_REGION: str = 'SPLICE_SITE_REGION'
    CDS: str = 'CDS'
    CODON_CHANGE: str = 'CODON_CHANGE'
    SYNONYMOUS_CODING: str = 'SYNONYMOUS_CODING'
    NON_SYNONYMOUS_CODING: str = 'NON_SYNONYMOUS_CODING'
    SYNONYMOUS_START: str = 'SYNONYMOUS_START'
    NON_SYNONYMOUS_START: str = 'NON_SYNONYMOUS_START'
    START_LOST: str = 'START_LOST'
    SYNONYMOUS_STOP: str = 'SYNONYMOUS_STOP'
    STOP_GAINED: str = 'STOP_GAINED'
    STOP_LOST: str = 'STOP_LOST'
    FRAME_SHIFT: str = 'FRAME_SHIFT'
    CODON_INSERTION: str = 'CODON_INSERTION'
    CODON_CHANGE_PLUS_CODON_INSERTION: str = 'CODON_CHANGE_PLUS_CODON_INSERTION'
    CODON_DELETION: str = 'CODON_DELETION'
    CODON_CHANGE_PLUS_CODON_DELETION: str = 'CODON_CHANGE_PLUS_CODON_DELETION'


class EFFECT_IMPACT(VarEffectNamespace):
    HIGH: str = 'HIGH'
    MODERATE: str = 'MODERATE'
    LOW: str = 'LOW'
    MODIFIER: str = 'MODIFIER'


class FUNCTIONAL_CLASS(VarEffectNamespace):
    NONE: str = 'NONE'
    SILENT: str = 'SILENT'
    MISSENSE: str = 'MISSENSE'
    NONSENSE: str = 'NONSENSE'


IMPACT_BY_EFFECT: Dict[str, str] = {
    EFFECT_TYPE.EXON_DELETED: EFFECT_IMPACT.HIGH,
    EFFECT_TYPE.FRAME_SHIFT: EFFECT_IMPACT.HIGH,
    EFFECT_TYPE.SPLICE_SITE_ACCEPTOR: EFFECT_IMPACT.HIGH,
    EFFECT_TYPE.SPLICE_SITE_DONOR: EFFECT_IMPACT.HIGH,
    EFFECT_TYPE.START_LOST: EFFECT_IMPACT.HIGH,
    EFFECT_TYPE.STOP_GAINED: EFFECT_IMPACT.HIGH,
    EFFECT_TYPE.STOP_LOST: EFFECT_IMPACT.HIGH,
    EFFECT_TYPE.CODON_CHANGE: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.CODON_INSERTION: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_INSERTION: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.CODON_DELETION: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_DELETION: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.NON_SYNONYMOUS_CODING: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.UTR_5_DELETED: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.UTR_3_DELETED: EFFECT_IMPACT.MODERATE,
    EFFECT_TYPE.NON_SYNONYMOUS_START: EFFECT_IMPACT.LOW,
    EFFECT_TYPE.SPLICE_SITE_REGION: EFFECT_IMPACT.LOW,
    EFFECT_TYPE.START_GAINED: EFFECT_IMPACT.LOW,
    EFFECT_TYPE.SYNONYMOUS_CODING: EFFECT_IMPACT.LOW,
    EFFECT_TYPE.SYNONYMOUS_START: EFFECT_IMPACT.LOW,
    EFFECT_TYPE.SYNONYMOUS_STOP: EFFECT_IMPACT.LOW,
}
"""impact of each effect type, anything missing is a modifier"""

SEQUENCE_ONTOLOGY: Dict[str, str] = {
    EFFECT_TYPE.NONE: '',
    EFFECT_TYPE.CHROMOSOME: 'chromosome',
    EFFECT_TYPE.INTERGENIC: 'intergenic_region',
    EFFECT_TYPE.UPSTREAM: 'upstream_gene_variant',
    EFFECT_TYPE.DOWNSTREAM: 'downstream_gene_variant',
    EFFECT_TYPE.GENE: 'gene_variant',
    EFFECT_TYPE.INTRAGENIC: 'intragenic_variant',
    EFFECT_TYPE.TRANSCRIPT: 'non_coding_transcript_variant',
    EFFECT_TYPE.EXON: 'non_coding_exon_variant',
    EFFECT_TYPE.EXON_DELETED: 'exon_loss_variant',
    EFFECT_TYPE.INTRON: 'intron_variant',
    EFFECT_TYPE.UTR_5_PRIME: '5_prime_UTR_variant',
    EFFECT_TYPE.UTR_3_PRIME: '3_prime_UTR_variant',
    EFFECT_TYPE.UTR_5_DELETED: '5_prime_UTR_truncation',
    EFFECT_TYPE.UTR_3_DELETED: '3_prime_UTR_truncation',
    EFFECT_TYPE.START_GAINED: '5_prime_UTR_premature_start_codon_gain_variant',
    EFFECT_TYPE.SPLICE_SITE_DONOR: 'splice_donor_variant',
    EFFECT_TYPE.SPLICE_SITE_ACCEPTOR: 'splice_acceptor_variant',
    EFFECT_TYPE.SPLICE_SITE_REGION: 'splice_region_variant',
    EFFECT_TYPE.CDS: 'coding_sequence_variant',
    EFFECT_TYPE.CODON_CHANGE: 'coding_sequence_variant',
    EFFECT_TYPE.SYNONYMOUS_CODING: 'synonymous_variant',
    EFFECT_TYPE.NON_SYNONYMOUS_CODING: 'missense_variant',
    EFFECT_TYPE.SYNONYMOUS_START: 'start_retained_variant',
    EFFECT_TYPE.NON_SYNONYMOUS_START: 'initiator_codon_variant',
    EFFECT_TYPE.START_LOST: 'start_lost',
    EFFECT_TYPE.SYNONYMOUS_STOP: 'stop_retained_variant',
    EFFECT_TYPE.STOP_GAINED: 'stop_gained',
    EFFECT_TYPE.STOP_LOST: 'stop_lost',
    EFFECT_TYPE.FRAME_SHIFT: 'frameshift_variant',
    EFFECT_TYPE.CODON_INSERTION: 'inframe_insertion',
    EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_INSERTION: 'disruptive_inframe_insertion',
    EFFECT_TYPE.CODON_DELETION: 'inframe_deletion',
    EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_DELETION: 'disruptive_inframe_deletion',
}
"""sequence ontology term used when reporting each effect type"""

FUNCTIONAL_CLASS_BY_EFFECT: Dict[str, str] = {
    EFFECT_TYPE.SYNONYMOUS_CODING: FUNCTIONAL_CLASS.SILENT,
    EFFECT_TYPE.SYNONYMOUS_START: FUNCTIONAL_CLASS.SILENT,
    EFFECT_TYPE.SYNONYMOUS_STOP: FUNCTIONAL_CLASS.SILENT,
    EFFECT_TYPE.NON_SYNONYMOUS_CODING: FUNCTIONAL_CLASS.MISSENSE,
    EFFECT_TYPE.NON_SYNONYMOUS_START: FUNCTIONAL_CLASS.MISSENSE,
    EFFECT_TYPE.START_LOST: FUNCTIONAL_CLASS.NONSENSE,
    EFFECT_TYPE.STOP_GAINED: FUNCTIONAL_CLASS.NONSENSE,
    EFFECT_TYPE.STOP_LOST: FUNCTIONAL_CLASS.MISSENSE,
}


class ERROR_WARNING(VarEffectNamespace):
    """
    holds controlled vocabulary for data quality findings raised while annotating

    Attributes:
        WARNING_SEQUENCE_NOT_AVAILABLE: the marker has no stored sequence to compare against
        WARNING_REF_DOES_NOT_MATCH_GENOME: the variant reference allele differs from the genome
        WARNING_TRANSCRIPT_INCOMPLETE: the coding sequence length is not a multiple of 3
        ERROR_OUT_OF_EXON: the variant could not be placed within the exon sequence
        ERROR_CHROMOSOME_NOT_FOUND: the variant chromosome is not part of the genome
        ERROR_OUT_OF_CHROMOSOME_RANGE: the variant lies beyond the end of the chromosome
    """

    WARNING_SEQUENCE_NOT_AVAILABLE: str = 'WARNING_SEQUENCE_NOT_AVAILABLE'
    WARNING_REF_DOES_NOT_MATCH_GENOME: str = 'WARNING_REF_DOES_NOT_MATCH_GENOME'
    WARNING_TRANSCRIPT_INCOMPLETE: str = 'WARNING_TRANSCRIPT_INCOMPLETE'
    ERROR_OUT_OF_EXON: str = 'ERROR_OUT_OF_EXON'
    ERROR_CHROMOSOME_NOT_FOUND: str = 'ERROR_CHROMOSOME_NOT_FOUND'
    ERROR_OUT_OF_CHROMOSOME_RANGE: str = 'ERROR_OUT_OF_CHROMOSOME_RANGE'


class EXON_SPLICE_TYPE(VarEffectNamespace):
    """
    classification of exons based on alternative splicing between the transcripts of a gene

    Attributes:
        NONE: not spliced or not characterized
        RETAINED: all transcripts of the gene have this exon
        SKIPPED: some transcripts skip it
        ALT_3SS: some transcripts have an alternative 3' splice site (exon start)
        ALT_5SS: some transcripts have an alternative 5' splice site (exon end)
        MUTUALLY_EXCLUSIVE: never found in a transcript with its paired exon
        ALT_PROMOTER: the first exon differs between transcripts
        ALT_POLY_A: the last exon differs between transcripts
    """

    NONE: str = 'NONE'
    RETAINED: str = 'RETAINED'
    SKIPPED: str = 'SKIPPED'
    ALT_3SS: str = 'ALT_3SS'
    ALT_5SS: str = 'ALT_5SS'
    MUTUALLY_EXCLUSIVE: str = 'MUTUALLY_EXCLUSIVE'
    ALT_PROMOTER: str = 'ALT_PROMOTER'
    ALT_POLY_A: str = 'ALT_POLY_A'


class FRAME(VarEffectNamespace):
    """
    number of bases to remove from the start of a feature to reach the first base of the next codon
    """

    UNKNOWN: int = -1
    ZERO: int = 0
    ONE: int = 1
    TWO: int = 2


SPLICE_SITE_SIZE: int = 2
""":class:`int`: number of intronic bases next to an exon making up the core donor/acceptor site"""

SPLICE_REGION_EXON_SIZE: int = 3
""":class:`int`: number of exonic bases at an exon boundary considered part of the splice region"""

SPLICE_REGION_INTRON_MIN: int = 3
""":class:`int`: first intronic offset (1-based from the exon boundary) of the splice region"""

SPLICE_REGION_INTRON_MAX: int = 8
""":class:`int`: last intronic offset (1-based from the exon boundary) of the splice region"""

CODON_SIZE: int = 3
"""the number of bases making up a codon"""

STOP_AA: str = '*'
"""the amino acid expected to end translation"""

START_CODON: str = 'ATG'

DEFAULT_CODON_TABLE: str = 'Standard'


def get_codon_table(name: str = DEFAULT_CODON_TABLE) -> CodonTable.CodonTable:
    """
    Args:
        name: the NCBI name of the table

    Raises:
        KeyError: the table name is not known to biopython
    """
    return CodonTable.unambiguous_dna_by_name[name]


def reverse_complement(s: str) -> str:
    """
    wrapper for the Bio.Seq reverse_complement method

    Args:
        s: the input DNA sequence

    Returns:
        str: the reverse complement of the input sequence

    Warning:
        assumes the input is a DNA sequence

    Example:
        >>> reverse_complement('ATCCGGT')
        'ACCGGAT'
    """
    input_string = str(s)
    if not re.match('^[A-Za-z]*$', input_string):
        raise ValueError('unexpected sequence format. cannot reverse complement', input_string)
    return str(Seq(input_string).reverse_complement())


def translate(s: str, reading_frame: int = 0, table: str = DEFAULT_CODON_TABLE) -> str:
    """
    given a DNA sequence, translates it and returns the protein amino acid sequence

    Args:
        s: the input DNA sequence
        reading_frame: where to start translating the sequence
        table: the NCBI name of the codon table to translate with

    Returns:
        the amino acid sequence
    """
    reading_frame = reading_frame % CODON_SIZE

    temp = s[reading_frame:]
    if len(temp) % 3 == 1:
        temp = temp[:-1]
    elif len(temp) % 3 == 2:
        temp = temp[:-2]
    return str(Seq(temp.upper()).translate(table=table))
