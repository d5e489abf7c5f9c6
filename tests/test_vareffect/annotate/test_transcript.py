import pytest

from vareffect.annotate.effects import VariantEffects
from vareffect.annotate.genomic import Downstream, Intron, Transcript, Upstream, Utr3prime, Utr5prime
from vareffect.annotate.splicing import SpliceSiteDonor
from vareffect.config import Config
from vareffect.constants import EFFECT_TYPE, STRAND
from vareffect.variant import Variant

from ..mock import CDS, build_genome, mirror, plus_to_minus


@pytest.fixture
def plus():
    n = build_genome(STRAND.POS)
    n.transcript.build()
    return n


@pytest.fixture
def minus():
    n = build_genome(STRAND.NEG)
    n.transcript.build()
    return n


def spans(markers):
    return [(m.start, m.end) for m in markers]


class TestCodingSequence:
    def test_cds_seq(self, plus, minus):
        assert plus.transcript.cds_seq() == CDS
        assert minus.transcript.cds_seq() == CDS

    def test_protein(self, plus, minus):
        assert plus.transcript.protein() == 'M' + 'A' * 20 + 'K*'
        assert minus.transcript.protein() == plus.transcript.protein()

    def test_cdna_seq(self, plus, minus):
        assert len(plus.transcript.cdna_seq()) == 90
        assert minus.transcript.cdna_seq() == plus.transcript.cdna_seq()

    def test_cds_base_number(self, plus):
        assert plus.transcript.cds_base_number(111) == 0
        assert plus.transcript.cds_base_number(130) == 19
        assert plus.transcript.cds_base_number(201) == 20
        assert plus.transcript.cds_base_number(319) == 68
        assert plus.transcript.cds_base_number(150) == -1
        assert plus.transcript.cds_base_number(105) == -1

    def test_cds_base_number_minus(self, minus):
        assert minus.transcript.cds_base_number(mirror(111)) == 0
        assert minus.transcript.cds_base_number(mirror(201)) == 20

    def test_base_number(self, plus, minus):
        assert plus.transcript.base_number(101) == 0
        assert plus.transcript.base_number(201) == 30
        assert plus.transcript.base_number(200) == -1
        assert minus.transcript.base_number(mirror(201)) == 30

    def test_cds_ends(self, plus, minus):
        assert plus.transcript.cds_five_prime() == 111
        assert plus.transcript.cds_three_prime() == 319
        assert minus.transcript.cds_five_prime() == mirror(111)
        assert minus.transcript.cds_three_prime() == mirror(319)

    def test_is_cds_insertion(self, plus, minus):
        for pos, coding in [(111, False), (112, True), (319, True), (320, False)]:
            assert plus.transcript.is_cds(Variant('1', pos, '', 'T')) is coding
            minus_pos, ref, alt = plus_to_minus((pos, '', 'T'))
            assert minus.transcript.is_cds(Variant('1', minus_pos, ref, alt)) is coding

    def test_cds_defaults_to_exons(self):
        n = build_genome()
        n.transcript.cds_start = None
        n.transcript.cds_end = None
        bounds = n.transcript.cds_bounds()
        assert (bounds.start, bounds.end) == (101, 330)

    def test_cds_start_after_end(self):
        n = build_genome()
        with pytest.raises(AttributeError):
            Transcript(n.gene, 1, 100, cds_start=50, cds_end=40)

    def test_aa_indexes(self, plus, minus):
        for n in [plus, minus]:
            assert [(e.aa_idx_start, e.aa_idx_end) for e in n.exons] == [(0, 6), (6, 16), (16, 22)]

    def test_no_sequence(self):
        n = build_genome(with_seq=False)
        assert n.transcript.cds_seq() == ''
        assert n.transcript.cdna_seq() == ''


class TestBuild:
    def test_ranks(self, minus):
        assert [e.rank for e in minus.exons] == [1, 2, 3]
        assert minus.exons[0].start == mirror(130)

    def test_introns(self, plus):
        assert spans(plus.transcript.introns) == [(131, 200), (231, 300)]
        assert [i.id for i in plus.transcript.introns] == ['T1_intron_1', 'T1_intron_2']
        assert [i.rank for i in plus.transcript.introns] == [1, 2]

    def test_introns_minus(self, minus):
        assert spans(minus.transcript.introns) == [(mirror(200), mirror(131)), (mirror(300), mirror(231))]

    def test_utrs(self, plus):
        utrs = plus.transcript.utrs
        assert spans(utrs) == [(101, 110), (320, 330)]
        assert isinstance(utrs[0], Utr5prime)
        assert isinstance(utrs[1], Utr3prime)
        assert utrs[0].parent is plus.exons[0]

    def test_utrs_minus(self, minus):
        utrs = minus.transcript.utrs
        assert spans(utrs) == [(mirror(110), mirror(101)), (mirror(330), mirror(320))]
        assert isinstance(utrs[0], Utr5prime)
        assert isinstance(utrs[1], Utr3prime)

    def test_no_utrs_for_non_coding(self):
        n = build_genome(protein_coding=False)
        n.transcript.build()
        assert n.transcript.utrs == []

    def test_up_down_stream(self, plus):
        assert isinstance(plus.transcript.upstream, Upstream)
        assert isinstance(plus.transcript.downstream, Downstream)
        assert spans([plus.transcript.upstream, plus.transcript.downstream]) == [(1, 100), (331, 1000)]

    def test_up_down_stream_minus(self, minus):
        assert spans([minus.transcript.upstream, minus.transcript.downstream]) == [(901, 1000), (1, 670)]

    def test_up_down_stream_sizes(self):
        n = build_genome(config=Config(upstream_size=10, downstream_size=0))
        n.transcript.build()
        assert spans([n.transcript.upstream]) == [(91, 100)]
        assert n.transcript.downstream is None

    def test_query(self, plus):
        found = plus.transcript.query(Variant('1', 131, 'A', 'C'))
        assert [type(m) for m in found] == [Intron, SpliceSiteDonor]


class TestFrameCorrection:
    def test_plus(self):
        n = build_genome()
        n.transcript.cds_start = 101
        n.exons[0].frame = 1
        assert n.transcript.frame_correction()
        assert (n.exons[0].start, n.exons[0].frame) == (102, 0)
        assert n.transcript.cds_start == 102
        assert len(n.exons[0].seq) == n.exons[0].size()

    def test_minus(self):
        n = build_genome(STRAND.NEG)
        n.transcript.cds_end = mirror(101)
        n.exons[0].frame = 2
        assert n.transcript.frame_correction()
        assert n.exons[0].end == mirror(101) - 2
        assert n.transcript.cds_end == mirror(101) - 2

    def test_cds_not_at_exon_start(self):
        n = build_genome()
        n.exons[0].frame = 1
        assert not n.transcript.frame_correction()
        assert n.exons[0].start == 101

    def test_frame_zero(self):
        n = build_genome()
        n.transcript.cds_start = 101
        assert not n.transcript.frame_correction()


class TestTranscriptVariantEffect:
    def effects(self, n, pos, ref, alt):
        if n.transcript.is_strand_minus:
            pos, ref, alt = plus_to_minus((pos, ref, alt))
        effects = VariantEffects()
        n.transcript.variant_effect(Variant('1', pos, ref, alt), effects)
        return effects

    @pytest.mark.parametrize('strand', [STRAND.POS, STRAND.NEG])
    def test_utr5(self, strand):
        n = build_genome(strand)
        n.transcript.build()
        effects = self.effects(n, 103, 'C', 'A')
        assert effects.effect_types() == [EFFECT_TYPE.UTR_5_PRIME]
        assert effects[0].detail == '8'

    @pytest.mark.parametrize('strand', [STRAND.POS, STRAND.NEG])
    def test_start_gained(self, strand):
        n = build_genome(strand)
        n.transcript.build()
        effects = self.effects(n, 105, 'C', 'A')
        assert effects.effect_types() == [EFFECT_TYPE.UTR_5_PRIME, EFFECT_TYPE.START_GAINED]
        assert effects[0].detail == '6'
        assert effects[1].detail == 'ATG'

    @pytest.mark.parametrize('strand', [STRAND.POS, STRAND.NEG])
    def test_utr3(self, strand):
        n = build_genome(strand)
        n.transcript.build()
        effects = self.effects(n, 325, 'G', 'A')
        assert effects.effect_types() == [EFFECT_TYPE.UTR_3_PRIME]
        assert effects[0].detail == '6'

    def test_utr_deleted(self, plus):
        effects = self.effects(plus, 319, 'A' + 'G' * 11, '')
        assert effects.effect_types()[0] == EFFECT_TYPE.UTR_3_DELETED

    def test_intron(self, plus):
        effects = self.effects(plus, 150, 'C', 'A')
        assert effects.effect_types() == [EFFECT_TYPE.INTRON]

    def test_not_built(self):
        n = build_genome()
        effects = VariantEffects()
        n.transcript.variant_effect(Variant('1', 150, 'C', 'A'), effects)
        assert effects.effect_types() == [EFFECT_TYPE.TRANSCRIPT]

    def test_outside(self, plus):
        effects = VariantEffects()
        assert not plus.transcript.variant_effect(Variant('1', 50, 'C', 'A'), effects)
        assert not len(effects)

    def test_intragenic(self, plus):
        plus.gene.start = 50
        effects = VariantEffects()
        assert plus.gene.variant_effect(Variant('1', 60, 'C', 'A'), effects)
        assert effects.effect_types() == [EFFECT_TYPE.INTRAGENIC]

    def test_upstream_distance(self, plus):
        effects = VariantEffects()
        assert plus.transcript.upstream.variant_effect(Variant('1', 50, 'C', 'A'), effects)
        assert effects.effect_types() == [EFFECT_TYPE.UPSTREAM]
        assert effects[0].detail == '51'
