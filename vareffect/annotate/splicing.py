import itertools
from collections import Counter
from typing import Dict, List, Set, Tuple

from ..constants import EFFECT_TYPE, EXON_SPLICE_TYPE
from ..interval import Interval
from ..util import logger
from .base import Marker


class SpliceSite(Marker):
    """
    a window at an exon/intron boundary where a variant may interfere with splicing.
    Splice sites are never stored in the genome database, they are recreated from the exon and intron
    boundaries when the transcript is built
    """

    effect_type = EFFECT_TYPE.NONE

    def __repr__(self):
        cls = self.__class__.__name__
        return '{}({}:{}-{}, strand={})'.format(cls, self.chromosome_name, self.start, self.end, self.get_strand())


class SpliceSiteDonor(SpliceSite):
    """the first intronic bases following the 3' end of an exon"""

    effect_type = EFFECT_TYPE.SPLICE_SITE_DONOR


class SpliceSiteAcceptor(SpliceSite):
    """the last intronic bases before the 5' end of an exon"""

    effect_type = EFFECT_TYPE.SPLICE_SITE_ACCEPTOR


class SpliceSiteRegion(SpliceSite):
    """the bases close to (but outside of) the core donor/acceptor sites, on either side of the boundary"""

    effect_type = EFFECT_TYPE.SPLICE_SITE_REGION


def _exon_key(exon) -> Tuple[int, int]:
    return (exon.start, exon.end)


def _is_alt_3ss(exon, others) -> bool:
    # same 3' end, different 5' end (alternate acceptor)
    for other in others:
        if exon.is_strand_plus and other.end == exon.end and other.start != exon.start:
            return True
        if exon.is_strand_minus and other.start == exon.start and other.end != exon.end:
            return True
    return False


def _is_alt_5ss(exon, others) -> bool:
    # same 5' end, different 3' end (alternate donor)
    for other in others:
        if exon.is_strand_plus and other.start == exon.start and other.end != exon.end:
            return True
        if exon.is_strand_minus and other.end == exon.end and other.start != exon.start:
            return True
    return False


def _flanking_keys(transcript, key) -> Tuple:
    keys = [_exon_key(ex) for ex in transcript.exons]
    index = keys.index(key)
    previous_key = keys[index - 1] if index > 0 else None
    next_key = keys[index + 1] if index + 1 < len(keys) else None
    return (previous_key, next_key)


def characterize_exons(gene) -> Dict[Tuple[int, int], str]:
    """
    classify the exons of a gene by comparing their use across the transcripts of the gene. Sets the
    splice_type of each exon and assumes the exons have already been ranked

    Args:
        gene (Gene): the gene to characterize

    Returns:
        dict: the splice type by exon (start, end)
    """
    transcripts = gene.transcripts
    types = {}
    if len(transcripts) <= 1:
        return types

    counts = Counter()
    for transcript in transcripts:
        counts.update({_exon_key(ex) for ex in transcript.exons})
    all_exons = [ex for transcript in transcripts for ex in transcript.exons]

    for transcript in transcripts:
        for exon in transcript.exons:
            key = _exon_key(exon)
            if counts[key] == len(transcripts):
                exon.splice_type = EXON_SPLICE_TYPE.RETAINED
            elif _is_alt_3ss(exon, all_exons):
                exon.splice_type = EXON_SPLICE_TYPE.ALT_3SS
            elif _is_alt_5ss(exon, all_exons):
                exon.splice_type = EXON_SPLICE_TYPE.ALT_5SS
            elif len(transcript.exons) > 1:
                if exon.rank == 1:
                    exon.splice_type = EXON_SPLICE_TYPE.ALT_PROMOTER
                elif exon.rank == len(transcript.exons):
                    exon.splice_type = EXON_SPLICE_TYPE.ALT_POLY_A
                else:
                    exon.splice_type = EXON_SPLICE_TYPE.SKIPPED
            types[key] = exon.splice_type

    skipped: Dict[Tuple[int, int], Set] = {}
    for transcript in transcripts:
        for exon in transcript.exons:
            if exon.splice_type == EXON_SPLICE_TYPE.SKIPPED:
                skipped.setdefault(_exon_key(exon), set()).add(transcript)

    mutually_exclusive = set()
    for first, second in itertools.combinations(sorted(skipped), 2):
        if Interval.overlaps(first, second) or skipped[first] & skipped[second]:
            continue
        first_flanks = {_flanking_keys(tr, first) for tr in skipped[first]}
        second_flanks = {_flanking_keys(tr, second) for tr in skipped[second]}
        if first_flanks & second_flanks:
            mutually_exclusive.update([first, second])

    if mutually_exclusive:
        for transcript in transcripts:
            for exon in transcript.exons:
                if _exon_key(exon) in mutually_exclusive:
                    exon.splice_type = EXON_SPLICE_TYPE.MUTUALLY_EXCLUSIVE
                    types[_exon_key(exon)] = exon.splice_type
    logger.debug(f'characterized {len(types)} exons of gene {gene.id}')
    return types


def splice_types_by_exon(exons: List) -> Dict[str, int]:
    """count exons by their splice type"""
    return dict(Counter([ex.splice_type for ex in exons]))
