import os
from dataclasses import dataclass, field, fields
from typing import Dict, Tuple

from .constants import (
    DEFAULT_CODON_TABLE,
    SPLICE_REGION_EXON_SIZE,
    SPLICE_REGION_INTRON_MAX,
    SPLICE_REGION_INTRON_MIN,
    SPLICE_SITE_SIZE,
    get_codon_table,
)
from .util import ENV_VAR_PREFIX, cast, logger


def _cast_names(value) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple([v.strip() for v in value.replace(';', ',').split(',') if v.strip()])
    return tuple(value)


@dataclass
class Config:
    """
    settings queried by the annotation core

    Attributes:
        treat_all_as_protein_coding: annotate every transcript as if it were protein coding
        splice_site_size: number of intronic bases making up the core donor/acceptor sites
        splice_region_exon_size: number of exonic bases in each splice region
        splice_region_intron_min: first intronic offset of the splice region
        splice_region_intron_max: last intronic offset of the splice region
        upstream_size: length of the window upstream of each transcript
        downstream_size: length of the window downstream of each transcript
        codon_table: NCBI codon table name for nuclear chromosomes
        mt_codon_table: NCBI codon table name for mitochondrial chromosomes
        mt_chromosome_names: chromosome names translated with the mitochondrial table
    """

    treat_all_as_protein_coding: bool = False
    splice_site_size: int = SPLICE_SITE_SIZE
    splice_region_exon_size: int = SPLICE_REGION_EXON_SIZE
    splice_region_intron_min: int = SPLICE_REGION_INTRON_MIN
    splice_region_intron_max: int = SPLICE_REGION_INTRON_MAX
    upstream_size: int = 5000
    downstream_size: int = 5000
    codon_table: str = DEFAULT_CODON_TABLE
    mt_codon_table: str = 'Vertebrate Mitochondrial'
    mt_chromosome_names: Tuple[str, ...] = field(default=('M', 'MT', 'chrM', 'chrMT'))

    @classmethod
    def _cast_field(cls, name: str, value):
        if name == 'mt_chromosome_names':
            return _cast_names(value)
        try:
            return cast(value, cls.__dataclass_fields__[name].type)
        except ValueError as err:
            raise TypeError('could not cast configuration value', name, value) from err

    @classmethod
    def from_dict(cls, mapping: Dict) -> 'Config':
        """
        create a configuration from a dictionary of values. Unrecognized keys are ignored
        """
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            if key not in names:
                logger.debug(f'ignoring unrecognized configuration option: {key}')
                continue
            kwargs[key] = cls._cast_field(key, value)
        config = cls(**kwargs)
        config.validate()
        return config

    @classmethod
    def from_env(cls, **overrides) -> 'Config':
        """
        create a configuration from the VAREFFECT_<OPTION> environment variables. Keyword arguments take
        precedence over the environment
        """
        values = {}
        for f in fields(cls):
            env_name = ENV_VAR_PREFIX + f.name.upper()
            if env_name in os.environ and os.environ[env_name].strip():
                values[f.name] = os.environ[env_name].strip()
        values.update(overrides)
        return cls.from_dict(values)

    def validate(self):
        """
        Raises:
            ValueError: a size is negative, the splice region offsets are reversed or a codon table is unknown
        """
        for name in [
            'splice_site_size',
            'splice_region_exon_size',
            'splice_region_intron_min',
            'splice_region_intron_max',
            'upstream_size',
            'downstream_size',
        ]:
            if getattr(self, name) < 0:
                raise ValueError('size options must not be negative', name, getattr(self, name))
        if self.splice_region_intron_min > self.splice_region_intron_max:
            raise ValueError(
                'splice_region_intron_min cannot be larger than splice_region_intron_max',
                self.splice_region_intron_min,
                self.splice_region_intron_max,
            )
        for table in [self.codon_table, self.mt_codon_table]:
            try:
                get_codon_table(table)
            except KeyError:
                raise ValueError('unknown codon table', table)

    def codon_table_for(self, chromosome_name: str) -> str:
        """the name of the codon table used to translate genes on a given chromosome"""
        if chromosome_name in self.mt_chromosome_names:
            return self.mt_codon_table
        return self.codon_table
