import pytest

from vareffect.annotate.codon_change import CodonChange, CodonChangeDel, CodonChangeSnp, format_codons
from vareffect.annotate.effects import VariantEffects
from vareffect.constants import EFFECT_TYPE, ERROR_WARNING, STRAND
from vareffect.variant import Variant

from ..mock import build_genome, plus_to_minus


@pytest.fixture(params=[STRAND.POS, STRAND.NEG])
def strand(request):
    return request.param


def codon_effects(strand, pos, ref, alt, **kwargs):
    """annotate a variant given in plus strand coordinates on the (mirrored) transcript of the given strand"""
    n = build_genome(strand, **kwargs)
    n.transcript.build()
    if strand == STRAND.NEG:
        pos, ref, alt = plus_to_minus((pos, ref, alt))
    effects = VariantEffects()
    CodonChange.factory(Variant('1', pos, ref, alt), n.transcript, effects).codon_change()
    return effects


class TestFormatCodons:
    def test_single_change(self):
        assert format_codons('GCT', 'ACT') == ('Gct', 'Act')

    def test_no_change(self):
        assert format_codons('GCT', 'gct') == ('gct', 'gct')

    def test_multiple_codons(self):
        assert format_codons('GCTGCT', 'GCAGCG') == ('gcTgcT', 'gcAgcG')


class TestFactory:
    def test_types(self):
        n = build_genome()
        effects = VariantEffects()
        assert isinstance(CodonChange.factory(Variant('1', 114, 'G', 'A'), n.transcript, effects), CodonChangeSnp)
        assert isinstance(CodonChange.factory(Variant('1', 114, 'GC', ''), n.transcript, effects), CodonChangeDel)

    def test_interval(self):
        n = build_genome()
        with pytest.raises(ValueError):
            CodonChange.factory(Variant('1', 114, end=120), n.transcript, VariantEffects())


class TestSubstitution:
    def test_missense(self, strand):
        effects = codon_effects(strand, 114, 'G', 'A')
        assert effects.effect_types() == [EFFECT_TYPE.NON_SYNONYMOUS_CODING]
        effect = effects[0]
        assert effect.codon_change == 'Gct/Act'
        assert effect.aa_change == 'A2T'
        assert effect.hgvs_p == 'p.Ala2Thr'
        assert (effect.codon_num, effect.codon_index) == (1, 0)

    def test_synonymous(self, strand):
        effects = codon_effects(strand, 116, 'T', 'C')
        assert effects.effect_types() == [EFFECT_TYPE.SYNONYMOUS_CODING]
        assert effects[0].aa_change == 'A2'
        assert effects[0].codon_index == 2

    def test_start_lost(self, strand):
        effects = codon_effects(strand, 112, 'T', 'C')
        assert effects.effect_types() == [EFFECT_TYPE.START_LOST]

    def test_alternative_start(self, strand):
        effects = codon_effects(strand, 111, 'A', 'C')
        assert effects.effect_types() == [EFFECT_TYPE.NON_SYNONYMOUS_START]

    def test_stop_gained(self, strand):
        effects = codon_effects(strand, 314, 'A', 'T')
        assert effects.effect_types() == [EFFECT_TYPE.STOP_GAINED]
        assert effects[0].aa_change == 'K22*'

    def test_stop_lost(self, strand):
        effects = codon_effects(strand, 317, 'T', 'C')
        assert effects.effect_types() == [EFFECT_TYPE.STOP_LOST]

    def test_synonymous_stop(self, strand):
        effects = codon_effects(strand, 319, 'A', 'G')
        assert effects.effect_types() == [EFFECT_TYPE.SYNONYMOUS_STOP]

    def test_mnp_two_codons(self, strand):
        effects = codon_effects(strand, 116, 'TG', 'CA')
        assert effects.effect_types() == [EFFECT_TYPE.NON_SYNONYMOUS_CODING]
        assert effects[0].codon_change == 'gcTGct/gcCAct'
        assert effects[0].aa_ref == 'AA'
        assert effects[0].aa_alt == 'AT'

    def test_across_exon_boundary(self, strand):
        # codon 7 is split between exon 1 and exon 2
        effects = codon_effects(strand, 130, 'C', 'A')
        assert effects.effect_types() == [EFFECT_TYPE.NON_SYNONYMOUS_CODING]
        assert effects[0].codon_change == 'gCt/gAt'
        assert effects[0].aa_change == 'A7D'
        assert effects[0].codon_num == 6

    def test_no_sequence(self):
        effects = codon_effects(STRAND.POS, 114, 'G', 'A', with_seq=False)
        assert effects.effect_types() == [EFFECT_TYPE.CODON_CHANGE]
        assert effects[0].errors == (ERROR_WARNING.WARNING_SEQUENCE_NOT_AVAILABLE,)

    def test_outside_cds(self):
        effects = codon_effects(STRAND.POS, 105, 'C', 'A')
        assert not len(effects)

    def test_incomplete_trailing_codon(self, strand):
        n = build_genome(strand)
        pos, ref, alt = 318, 'A', 'G'
        if strand == STRAND.NEG:
            n.transcript.cds_start += 1
            pos, ref, alt = plus_to_minus((pos, ref, alt))
        else:
            n.transcript.cds_end -= 1
        n.transcript.build()
        assert len(n.transcript.cds_seq()) == 68
        effects = VariantEffects()
        CodonChange.factory(Variant('1', pos, ref, alt), n.transcript, effects).codon_change()
        assert effects.effect_types() == [EFFECT_TYPE.CODON_CHANGE]
        assert effects[0].errors == (ERROR_WARNING.WARNING_TRANSCRIPT_INCOMPLETE,)


class TestInsertion:
    def test_frame_shift(self, strand):
        effects = codon_effects(strand, 120, '', 'A')
        assert effects.effect_types() == [EFFECT_TYPE.FRAME_SHIFT]
        assert effects[0].aa_change == 'A4fs'

    def test_codon_insertion(self, strand):
        effects = codon_effects(strand, 117, '', 'GCT')
        assert effects.effect_types() == [EFFECT_TYPE.CODON_INSERTION]
        assert effects[0].codon_change == 'gct/GCTgct'
        assert effects[0].aa_alt == 'AA'

    def test_codon_change_plus_insertion(self, strand):
        effects = codon_effects(strand, 118, '', 'AAA')
        assert effects.effect_types() == [EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_INSERTION]
        assert effects[0].codon_change == 'gct/gAAAct'

    def test_insertion_keeping_codon(self, strand):
        effects = codon_effects(strand, 118, '', 'CTG')
        assert effects.effect_types() == [EFFECT_TYPE.CODON_INSERTION]

    def test_stop_gained(self, strand):
        effects = codon_effects(strand, 117, '', 'TAG')
        assert effects.effect_types() == [EFFECT_TYPE.STOP_GAINED]

    @pytest.mark.parametrize('pos', [111, 320])
    def test_next_to_cds_edge(self, strand, pos):
        # before the start codon or after the stop codon
        assert not len(codon_effects(strand, pos, '', 'T'))

    def test_after_first_coding_base(self, strand):
        effects = codon_effects(strand, 112, '', 'T')
        assert effects.effect_types() == [EFFECT_TYPE.FRAME_SHIFT]
        assert (effects[0].codon_num, effects[0].codon_index) == (0, 1)
        assert effects[0].codon_change == 'atg/aTtg'

    def test_before_last_coding_base(self, strand):
        effects = codon_effects(strand, 319, '', 'T')
        assert effects.effect_types() == [EFFECT_TYPE.FRAME_SHIFT]
        assert (effects[0].codon_num, effects[0].codon_index) == (22, 2)
        assert effects[0].codon_change == 'taa/taTa'


class TestDeletion:
    def test_frame_shift(self, strand):
        effects = codon_effects(strand, 117, 'GC', '')
        assert effects.effect_types() == [EFFECT_TYPE.FRAME_SHIFT]
        assert effects[0].aa_alt == ''

    def test_codon_deletion(self, strand):
        effects = codon_effects(strand, 117, 'GCT', '')
        assert effects.effect_types() == [EFFECT_TYPE.CODON_DELETION]
        assert effects[0].codon_change == 'GCT/-'

    def test_codon_change_plus_deletion(self, strand):
        effects = codon_effects(strand, 118, 'CTG', '')
        assert effects.effect_types() == [EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_DELETION]
        assert effects[0].codon_change == 'gCTGct/gct'

    def test_exon_deleted(self):
        n = build_genome()
        n.transcript.build()
        effects = VariantEffects()
        variant = Variant('1', 199, 'C' * 34, '')
        CodonChange.factory(variant, n.transcript, effects, exon=n.exons[1]).codon_change()
        assert effects.effect_types() == [EFFECT_TYPE.EXON_DELETED]


class TestMixed:
    def test_frame_shift(self, strand):
        effects = codon_effects(strand, 117, 'GC', 'T')
        assert effects.effect_types() == [EFFECT_TYPE.FRAME_SHIFT]

    def test_in_frame_insertion(self, strand):
        effects = codon_effects(strand, 117, 'G', 'AAAA')
        assert effects.effect_types() == [EFFECT_TYPE.CODON_CHANGE_PLUS_CODON_INSERTION]
        assert effects[0].aa_ref == 'A'
        assert effects[0].aa_alt == 'KT'
