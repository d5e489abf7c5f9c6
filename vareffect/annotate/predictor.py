from typing import Iterable, List

from ..constants import EFFECT_TYPE, ERROR_WARNING
from ..util import logger
from .effects import VariantEffects
from .genomic import Genome
from .splicing import characterize_exons


class EffectPredictor:
    """
    annotates variants against a genome. The genome must be built (:meth:`EffectPredictor.build`) before
    any variants are annotated and is not changed afterwards
    """

    def __init__(self, genome: Genome):
        self.genome = genome
        self.built = False

    @property
    def config(self):
        return self.genome.config

    def build(self):
        """create the derived markers (introns, UTRs, splice sites, etc.) of every transcript"""
        config = self.config
        config.validate()
        transcripts = 0
        for gene in self.genome.genes:
            for transcript in gene.transcripts:
                transcript.build(config)
                transcripts += 1
            characterize_exons(gene)
        logger.info(f'built {transcripts} transcripts of {len(self.genome.genes)} genes')
        self.built = True

    def sanity_check(self, variant, gene, effects: VariantEffects):
        """attach a finding for every exon whose sequence disagrees with the reference allele"""
        for transcript in gene.transcripts:
            for exon in transcript.exons:
                finding = exon.sanity_check(variant)
                if finding is not None:
                    logger.debug(f'{finding} for variant {variant} on exon {exon!r}')
                    effects.add_error_warning(variant, exon, finding)

    def variant_effect(self, variant) -> VariantEffects:
        """
        Returns:
            VariantEffects: the effects of the variant in the order they were found
        """
        if not self.built:
            logger.warning('annotating variants against a genome which has not been built')
        effects = VariantEffects()
        chromosome = self.genome.chromosome(variant.chromosome_name)
        if chromosome is None:
            logger.warning(f'chromosome not found: {variant.chromosome_name}')
            effects.add_error_warning(variant, None, ERROR_WARNING.ERROR_CHROMOSOME_NOT_FOUND)
            return effects
        if variant.start > chromosome.end or variant.end < chromosome.start:
            logger.warning(f'variant {variant} is outside chromosome {chromosome.name} ({chromosome.end} bp)')
            effects.add_error_warning(variant, chromosome, ERROR_WARNING.ERROR_OUT_OF_CHROMOSOME_RANGE)
            return effects

        for gene in chromosome.genes:
            if not gene.intersects(variant):
                continue
            if variant.is_snp() or variant.is_mnp():
                self.sanity_check(variant, gene, effects)
            gene.variant_effect(variant, effects)

        # windows around transcripts are reported even when the variant is inside another gene
        for transcript in chromosome.transcripts:
            for region in [transcript.upstream, transcript.downstream]:
                if region is not None and region.intersects(variant):
                    region.variant_effect(variant, effects)
        if not len(effects):
            effects.add(variant, chromosome, EFFECT_TYPE.INTERGENIC)
        return effects

    def variant_effects(self, variants: Iterable) -> List[VariantEffects]:
        return [self.variant_effect(variant) for variant in variants]
