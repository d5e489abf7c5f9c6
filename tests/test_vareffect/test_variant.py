import pytest

from vareffect.constants import VARIANT_TYPE
from vareffect.interval import Interval
from vareffect.variant import Variant, classify_variant


class TestClassify:
    def test_types(self):
        assert classify_variant('A', 'T') == VARIANT_TYPE.SNP
        assert classify_variant('AC', 'TG') == VARIANT_TYPE.MNP
        assert classify_variant('', 'AC') == VARIANT_TYPE.INS
        assert classify_variant('AC', '') == VARIANT_TYPE.DEL
        assert classify_variant('AC', 'T') == VARIANT_TYPE.MIXED
        assert classify_variant('', '') == VARIANT_TYPE.INTERVAL


class TestVariant:
    def test_snp(self):
        variant = Variant('1', 100, 'a', 't')
        assert variant.is_snp()
        assert variant.ref == 'A'
        assert variant.alt == 'T'
        assert (variant.start, variant.end) == (100, 100)
        assert str(variant) == '1:100_A/T'

    def test_end_coordinates(self):
        assert Variant('1', 100, 'ACG', 'TTA').end == 102
        assert Variant('1', 100, '', 'ACG').end == 100
        assert Variant('1', 100, 'ACG', '').end == 102
        assert Variant('1', 100, 'ACG', 'T').end == 102
        assert Variant('1', 100, end=150).end == 150

    def test_interval(self):
        variant = Variant('1', 100, end=200)
        assert variant.is_interval()
        assert not variant.is_variant()
        assert str(variant) == '1:100-200'

    def test_not_a_variant(self):
        assert not Variant('1', 100, 'A', 'A').is_variant()
        assert Variant('1', 100, 'A', 'C').is_variant()

    def test_flanks(self):
        assert Variant('1', 101, '', 'T').flanks() == Interval(100, 101)
        assert Variant('1', 101, 'AC', '').flanks() == Interval(101, 102)

    def test_length_change(self):
        assert Variant('1', 100, '', 'ACG').length_change() == 3
        assert Variant('1', 100, 'AC', '').length_change() == -2
        assert Variant('1', 100, 'A', 'T').length_change() == 0

    def test_chromosome_object(self):
        class Named:
            name = 'chr2'

        variant = Variant(Named(), 1, 'A', 'C')
        assert variant.chromosome_name == '2'

    @pytest.mark.parametrize('ref,alt', [('G', '*'), ('G', '<DEL>'), ('G-', 'A'), ('', 'A.')])
    def test_non_nucleotide_allele(self, ref, alt):
        with pytest.raises(ValueError):
            Variant('1', 114, ref, alt)

    def test_ambiguous_base(self):
        assert Variant('1', 114, 'g', 'n').alt == 'N'


class TestFromVcf:
    def test_insertion(self):
        variant = Variant.from_vcf('1', 100, 'A', 'AT')
        assert variant.is_ins()
        assert variant.start == 101
        assert variant.alt == 'T'

    def test_deletion(self):
        variant = Variant.from_vcf('1', 100, 'ATG', 'A')
        assert variant.is_del()
        assert (variant.start, variant.end) == (101, 102)
        assert variant.ref == 'TG'

    def test_shared_suffix(self):
        variant = Variant.from_vcf('1', 100, 'CAGT', 'CT')
        assert variant.is_del()
        assert variant.ref == 'AG'
        assert variant.start == 101

    def test_snp_unchanged(self):
        variant = Variant.from_vcf('1', 100, 'A', 'G')
        assert variant.is_snp()
        assert variant.start == 100

    def test_spanning_deletion_allele(self):
        with pytest.raises(ValueError):
            Variant.from_vcf('1', 114, 'G', '*')


class TestDecompose:
    def test_mixed(self):
        parts = Variant('1', 100, 'ACG', 'T').decompose()
        assert [p.variant_type for p in parts] == [VARIANT_TYPE.SNP, VARIANT_TYPE.DEL]
        assert parts[1].start == 101
        assert parts[1].ref == 'CG'

    def test_mixed_insertion(self):
        parts = Variant('1', 100, 'AC', 'TTTT').decompose()
        assert [p.variant_type for p in parts] == [VARIANT_TYPE.MNP, VARIANT_TYPE.INS]
        assert parts[1].start == 102
        assert parts[1].alt == 'TT'

    def test_not_mixed(self):
        variant = Variant('1', 100, 'A', 'T')
        assert variant.decompose() == [variant]
