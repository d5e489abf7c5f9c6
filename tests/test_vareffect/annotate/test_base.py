import pytest

from vareffect.annotate.base import DEFAULT_CONFIG, Marker, MarkerSeq, ReferenceName
from vareffect.annotate.genomic import Chromosome, Genome
from vareffect.config import Config
from vareffect.constants import STRAND
from vareffect.variant import Variant


@pytest.fixture
def marker():
    return Marker(None, 100, 200, STRAND.POS, 'm1')


class TestReferenceName:
    def test_equal(self):
        assert ReferenceName('chr1') == '1'
        assert ReferenceName('1') == 'chr1'
        assert ReferenceName('1') != '2'

    def test_hash(self):
        assert hash(ReferenceName('chr1')) == hash(ReferenceName('1'))


class TestMarker:
    def test_start_after_end(self):
        with pytest.raises(AttributeError):
            Marker(None, 10, 9)

    def test_size(self, marker):
        assert marker.size() == 101
        assert len(Marker(None, 5)) == 1

    def test_parent_is_weak(self):
        genome = Genome('g')
        chromosome = Chromosome(genome, '1', 1, 1000)
        assert chromosome.parent is genome
        del genome
        assert chromosome.parent is None

    def test_inherits_parent_strand(self):
        parent = Marker(None, 1, 1000, STRAND.NEG)
        child = Marker(parent, 10, 20)
        assert child.get_strand() == STRAND.NEG
        assert child.is_strand_minus
        assert Marker(None, 1, 2).get_strand() == STRAND.NS

    def test_config(self):
        config = Config(upstream_size=10)
        genome = Genome('g', config)
        chromosome = Chromosome(genome, '1', 1, 1000)
        child = Marker(chromosome, 10, 20)
        assert child.config is config
        assert Marker(None, 1, 2).config is DEFAULT_CONFIG

    def test_chromosome_name(self):
        genome = Genome('g')
        chromosome = Chromosome(genome, 'chr1', 1, 1000)
        intermediate = Marker(chromosome, 1, 500)
        child = Marker(intermediate, 10, 20)
        assert child.chromosome_name == '1'

    def test_intersects(self, marker):
        assert marker.intersects(Variant('1', 200, 'A', 'T'))
        assert marker.intersects(Marker(None, 50, 100))
        assert not marker.intersects(Marker(None, 201, 300))

    def test_intersects_other_chromosome(self):
        genome = Genome('g')
        chromosome = Chromosome(genome, '1', 1, 1000)
        marker = Marker(chromosome, 100, 200)
        assert marker.intersects(Variant('chr1', 150, 'A', 'T'))
        assert not marker.intersects(Variant('2', 150, 'A', 'T'))
        assert marker.distance(Variant('2', 150, 'A', 'T')) == -1

    def test_includes(self, marker):
        assert marker.includes(Marker(None, 100, 200))
        assert not marker.includes(Marker(None, 99, 150))

    def test_intersect(self, marker):
        result = marker.intersect(Marker(None, 150, 300))
        assert (result.start, result.end) == (150, 200)
        assert result.id == 'm1'
        assert marker.intersect(Marker(None, 300, 400)) is None
        assert marker.intersect_size(Marker(None, 150, 300)) == 51
        assert marker.intersect_size(Marker(None, 300, 400)) == 0

    def test_distance(self, marker):
        assert marker.distance(Marker(None, 250)) == 50
        assert marker.distance(Marker(None, 50)) == 50
        assert marker.distance(Marker(None, 150)) == 0


class TestMarkerApply:
    def apply(self, marker, *args):
        result = marker.apply(Variant('1', *args))
        assert (marker.start, marker.end) == (100, 200)
        return result

    def test_snp_copy(self, marker):
        result = self.apply(marker, 150, 'A', 'T')
        assert result is not marker
        assert (result.start, result.end) == (100, 200)

    def test_after_end(self, marker):
        result = self.apply(marker, 201, '', 'AAA')
        assert result is not marker
        assert (result.start, result.end) == (100, 200)

    def test_insertion_before(self, marker):
        result = self.apply(marker, 50, '', 'AA')
        assert (result.start, result.end) == (102, 202)

    def test_insertion_at_start(self, marker):
        result = self.apply(marker, 100, '', 'AA')
        assert (result.start, result.end) == (100, 202)

    def test_insertion_inside(self, marker):
        result = self.apply(marker, 150, '', 'AAA')
        assert (result.start, result.end) == (100, 203)

    def test_deletion_before(self, marker):
        result = self.apply(marker, 10, 'ACG', '')
        assert (result.start, result.end) == (97, 197)

    def test_deletion_covering(self, marker):
        assert self.apply(marker, 90, 'A' * 121, '') is None

    def test_deletion_overlapping_start(self, marker):
        result = self.apply(marker, 95, 'A' * 10, '')
        assert (result.start, result.end) == (95, 190)

    def test_deletion_inside(self, marker):
        result = self.apply(marker, 150, 'A' * 10, '')
        assert (result.start, result.end) == (100, 190)

    def test_deletion_overlapping_end(self, marker):
        result = self.apply(marker, 195, 'A' * 10, '')
        assert (result.start, result.end) == (100, 194)

    def test_mixed(self, marker):
        result = self.apply(marker, 50, 'AC', 'TTTT')
        assert (result.start, result.end) == (102, 202)

    def test_minus_strand_shifts_genomic_start(self):
        marker = Marker(None, 100, 200, STRAND.NEG)
        result = self.apply(marker, 50, '', 'AA')
        assert (result.start, result.end) == (102, 202)
        assert result.strand == STRAND.NEG


class TestMarkerSeq:
    def test_upper_case(self):
        assert MarkerSeq(None, 1, 4, seq='acgt').seq == 'ACGT'
        assert not MarkerSeq(None, 1, 4).has_seq()

    def test_bases_at_plus(self):
        marker = MarkerSeq(None, 100, 103, STRAND.POS, seq='AACG')
        assert marker.bases_at(0, 2) == 'AA'
        assert marker.bases_at(2, 2) == 'CG'

    def test_bases_at_minus(self):
        marker = MarkerSeq(None, 100, 103, STRAND.NEG, seq='AACG')
        assert marker.forward_seq == 'CGTT'
        assert marker.bases_at(0, 2) == 'CG'
        assert marker.bases_at(2, 2) == 'TT'

    def test_apply_snp(self):
        marker = MarkerSeq(None, 100, 103, STRAND.POS, seq='ACGT')
        result = marker.apply(Variant('1', 101, 'C', 'G'))
        assert result.seq == 'AGGT'
        assert marker.seq == 'ACGT'

    def test_apply_insertion(self):
        marker = MarkerSeq(None, 100, 103, STRAND.POS, seq='ACGT')
        result = marker.apply(Variant('1', 102, '', 'TT'))
        assert result.seq == 'ACTTGT'
        assert len(result.seq) == result.size()

    def test_apply_deletion(self):
        marker = MarkerSeq(None, 100, 103, STRAND.POS, seq='ACGT')
        result = marker.apply(Variant('1', 101, 'CG', ''))
        assert result.seq == 'AT'
        assert (result.start, result.end) == (100, 101)

    def test_apply_minus_strand(self):
        marker = MarkerSeq(None, 100, 103, STRAND.NEG, seq='AACG')
        result = marker.apply(Variant('1', 100, 'C', 'A'))
        assert result.forward_seq == 'AGTT'
        assert result.seq == 'AACT'
