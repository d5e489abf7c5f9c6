from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from Bio.SeqUtils import seq3

from ..constants import (
    EFFECT_IMPACT,
    EFFECT_TYPE,
    ERROR_WARNING,
    FUNCTIONAL_CLASS,
    FUNCTIONAL_CLASS_BY_EFFECT,
    IMPACT_BY_EFFECT,
    SEQUENCE_ONTOLOGY,
)
from .genomic import Exon, Gene, Transcript


class ErrorWarning(NamedTuple):
    """a data quality finding for a variant, optionally tied to the marker it was found on"""

    variant: object
    marker: object
    code: str


class VariantEffect:
    """
    a single consequence of a variant on a single marker. Immutable once created
    """

    def __init__(
        self,
        variant,
        marker,
        effect_type: str,
        detail: str = '',
        codons_ref: str = '',
        codons_alt: str = '',
        aa_ref: str = '',
        aa_alt: str = '',
        codon_num: int = -1,
        codon_index: int = -1,
        errors: Tuple[str, ...] = (),
    ):
        """
        Args:
            variant (Variant): the variant causing the effect
            marker (Marker): the marker affected
            effect_type (EFFECT_TYPE): the type of effect
            detail: free text detail (distances, new start codons, etc.)
            codons_ref: reference codon(s), bases changed are upper case
            codons_alt: alternate codon(s), bases changed are upper case
            aa_ref: reference amino acid(s)
            aa_alt: alternate amino acid(s)
            codon_num: 0-based index of the (first) codon affected in the coding sequence
            codon_index: 0-based position of the change within the codon
            errors: error/warning codes attached to this effect
        """
        self._variant = variant
        self._marker = marker
        self._effect_type = EFFECT_TYPE.enforce(effect_type)
        self._detail = detail or ''
        self._codons_ref = codons_ref or ''
        self._codons_alt = codons_alt or ''
        self._aa_ref = aa_ref or ''
        self._aa_alt = aa_alt or ''
        self._codon_num = codon_num
        self._codon_index = codon_index
        self._errors = tuple([ERROR_WARNING.enforce(e) for e in errors])

    variant = property(lambda self: self._variant)
    marker = property(lambda self: self._marker)
    effect_type = property(lambda self: self._effect_type)
    detail = property(lambda self: self._detail)
    codons_ref = property(lambda self: self._codons_ref)
    codons_alt = property(lambda self: self._codons_alt)
    aa_ref = property(lambda self: self._aa_ref)
    aa_alt = property(lambda self: self._aa_alt)
    codon_num = property(lambda self: self._codon_num)
    codon_index = property(lambda self: self._codon_index)
    errors = property(lambda self: self._errors)

    @property
    def impact(self) -> str:
        return IMPACT_BY_EFFECT.get(self.effect_type, EFFECT_IMPACT.MODIFIER)

    @property
    def functional_class(self) -> str:
        return FUNCTIONAL_CLASS_BY_EFFECT.get(self.effect_type, FUNCTIONAL_CLASS.NONE)

    @property
    def so_term(self) -> str:
        return SEQUENCE_ONTOLOGY.get(self.effect_type, '')

    @property
    def codon_change(self) -> str:
        """
        Example:
            >>> effect.codon_change
            'Gct/Act'
        """
        if not self.codons_ref and not self.codons_alt:
            return ''
        return '{}/{}'.format(self.codons_ref or '-', self.codons_alt or '-')

    @property
    def aa_change(self) -> str:
        """
        the amino acid change in single letter codes using a 1-based codon number

        Example:
            >>> effect.aa_change
            'A12T'
        """
        if not self.aa_ref and not self.aa_alt:
            return ''
        number = self.codon_num + 1
        if self.effect_type == EFFECT_TYPE.FRAME_SHIFT:
            return '{}{}fs'.format(self.aa_ref, number)
        if self.aa_ref == self.aa_alt:
            return '{}{}'.format(self.aa_ref, number)
        return '{}{}{}'.format(self.aa_ref, number, self.aa_alt or '-')

    @property
    def hgvs_p(self) -> str:
        """
        the protein change using three letter amino acid codes

        Example:
            >>> effect.hgvs_p
            'p.Ala12Thr'
        """
        if not self.aa_ref:
            return ''
        number = self.codon_num + 1
        ref = seq3(self.aa_ref[0], custom_map={'*': 'Ter'})
        if self.effect_type == EFFECT_TYPE.FRAME_SHIFT:
            return 'p.{}{}fs'.format(ref, number)
        if self.aa_ref == self.aa_alt:
            return 'p.{}{}='.format(ref, number)
        if len(self.aa_ref) == 1 and len(self.aa_alt) == 1:
            return 'p.{}{}{}'.format(ref, number, seq3(self.aa_alt, custom_map={'*': 'Ter'}))
        return ''

    def _nearest(self, cls):
        if isinstance(self.marker, cls):
            return self.marker
        if self.marker is None:
            return None
        return self.marker.find_parent(cls)

    @property
    def gene(self) -> Optional[Gene]:
        return self._nearest(Gene)

    @property
    def transcript(self) -> Optional[Transcript]:
        return self._nearest(Transcript)

    @property
    def exon(self) -> Optional[Exon]:
        return self._nearest(Exon)

    def to_dict(self) -> Dict[str, object]:
        """flat representation used for tabbed output"""
        gene = self.gene
        transcript = self.transcript
        exon = self.exon
        return {
            'variant': str(self.variant),
            'chromosome': str(self.variant.chromosome),
            'position': self.variant.start,
            'ref': self.variant.ref,
            'alt': self.variant.alt,
            'effect': self.effect_type,
            'so_term': self.so_term,
            'impact': self.impact,
            'functional_class': self.functional_class,
            'gene_id': gene.id if gene else None,
            'gene_name': gene.name if gene else None,
            'transcript_id': transcript.id if transcript else None,
            'biotype': transcript.biotype if transcript else None,
            'exon_rank': exon.rank if exon else None,
            'codon_change': self.codon_change,
            'aa_change': self.aa_change,
            'hgvs_p': self.hgvs_p,
            'detail': self.detail,
            'errors': ';'.join(self.errors),
        }

    def __repr__(self):
        return 'VariantEffect({}, {}, {}{})'.format(
            self.variant, self.effect_type, repr(self.marker), ', ' + self.aa_change if self.aa_change else ''
        )


class VariantEffects:
    """
    the ordered collection of effects (and data quality findings) for a variant. Effects are kept in
    the order they are added
    """

    def __init__(self):
        self._effects: List[VariantEffect] = []
        self._errors_warnings: List[ErrorWarning] = []

    def add(self, variant, marker, effect_type: str, detail: str = '', **kwargs) -> VariantEffect:
        """create and append a new effect"""
        effect = VariantEffect(variant, marker, effect_type, detail, **kwargs)
        self._effects.append(effect)
        return effect

    def add_effect(self, effect: VariantEffect):
        self._effects.append(effect)

    def add_error_warning(self, variant, marker, code: str):
        """record a data quality finding"""
        self._errors_warnings.append(ErrorWarning(variant, marker, ERROR_WARNING.enforce(code)))

    @property
    def errors_warnings(self) -> List[ErrorWarning]:
        return list(self._errors_warnings)

    def has_effect(self, effect_type: str) -> bool:
        return any([e.effect_type == effect_type for e in self._effects])

    def effect_types(self) -> List[str]:
        return [e.effect_type for e in self._effects]

    def get(self, effect_type: str) -> List[VariantEffect]:
        return [e for e in self._effects if e.effect_type == effect_type]

    def to_rows(self) -> List[Dict]:
        rows = []
        for effect in self._effects:
            row = effect.to_dict()
            findings = [ew.code for ew in self._errors_warnings if ew.variant is effect.variant]
            if findings:
                row['errors'] = ';'.join([e for e in [row['errors']] + findings if e])
            rows.append(row)
        return rows

    def __iter__(self) -> Iterator[VariantEffect]:
        return iter(self._effects)

    def __len__(self):
        return len(self._effects)

    def __getitem__(self, index):
        return self._effects[index]

    def __repr__(self):
        return 'VariantEffects({})'.format(self._effects)
