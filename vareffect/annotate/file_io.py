"""
module which holds all functions relating to loading and saving reference files
"""
import gzip
import re
from typing import Dict, Iterable, List, Optional

from Bio import SeqIO

from ..error import SerializationError
from ..util import cast_boolean, logger, output_tabbed_file
from .effects import VariantEffects
from .genomic import Chromosome, Exon, Gene, Genome, Transcript

SERIALIZABLE_TYPES = {cls.__name__: cls for cls in [Genome, Chromosome, Gene, Transcript, Exon]}
"""the marker types written to the genome database, derived markers are rebuilt after loading"""


def _open(filename: str, mode: str):
    if filename.endswith('.gz'):
        return gzip.open(filename, mode + 't')
    return open(filename, mode)


class MarkerSerializer:
    """
    reads and writes the genome database. One tab delimited line per marker, parents are always written
    before their children and referenced by number
    """

    def __init__(self):
        self._numbers: Dict[int, int] = {}
        self._markers: Dict[int, object] = {}
        self._fields: List[str] = []
        self._field_index = 0
        self._next_number = 1

    def number(self, marker) -> int:
        """the number assigned to a marker while saving (0 for no marker)"""
        if marker is None:
            return 0
        key = id(marker)
        if key not in self._numbers:
            self._numbers[key] = self._next_number
            self._next_number += 1
        return self._numbers[key]

    def register(self, number: int, marker):
        if number in self._markers:
            raise SerializationError('duplicate marker number', number)
        self._markers[number] = marker

    def marker(self, number: int):
        """
        Raises:
            SerializationError: if the number was not loaded (yet)
        """
        if number == 0:
            return None
        try:
            return self._markers[number]
        except KeyError:
            raise SerializationError('reference to a marker which has not been loaded', number)

    def next_field(self) -> str:
        if self._field_index >= len(self._fields):
            raise SerializationError('record has too few fields', self._fields)
        value = self._fields[self._field_index]
        self._field_index += 1
        return value

    def next_field_int(self) -> int:
        value = self.next_field()
        try:
            return int(value)
        except ValueError:
            raise SerializationError('expected an integer field', value)

    def next_field_int_or_none(self) -> Optional[int]:
        value = self.next_field()
        if not value:
            return None
        try:
            return int(value)
        except ValueError:
            raise SerializationError('expected an integer field', value)

    def next_field_bool(self) -> bool:
        value = self.next_field()
        try:
            return cast_boolean(value)
        except TypeError:
            raise SerializationError('expected a boolean field', value)

    def _markers_to_save(self, genome: Genome) -> Iterable:
        yield genome
        for chromosome in genome.chromosomes.values():
            yield chromosome
            for gene in chromosome.genes:
                yield gene
                for transcript in gene.transcripts:
                    yield transcript
                    for exon in transcript.exons:
                        yield exon

    def save(self, genome: Genome, filename: str) -> int:
        """
        Returns:
            int: the number of markers written
        """
        count = 0
        logger.info(f'writing: {filename}')
        with _open(filename, 'w') as fh:
            for marker in self._markers_to_save(genome):
                fh.write(marker.serialize_save(self) + '\n')
                count += 1
        return count

    def parse_line(self, line: str):
        self._fields = line.rstrip('\n').split('\t')
        self._field_index = 0
        type_name = self.next_field()
        if type_name not in SERIALIZABLE_TYPES:
            raise SerializationError('unknown marker type', type_name)
        marker = SERIALIZABLE_TYPES[type_name]()
        marker.serialize_parse(self)
        if self._field_index != len(self._fields):
            raise SerializationError('unexpected extra fields in record', type_name, self._fields)
        return marker

    def load(self, filename: str) -> Genome:
        """
        read a genome database. The transcripts are not built (see
        :meth:`~vareffect.annotate.predictor.EffectPredictor.build`)

        Raises:
            SerializationError: the file is malformed
        """
        genome = None
        # parents are held weakly so the loaded markers need a strong reference until they are attached
        loaded = []
        logger.info(f'loading: {filename}')
        with _open(filename, 'r') as fh:
            for line_number, line in enumerate(fh, start=1):
                if not line.strip() or line.startswith('#'):
                    continue
                try:
                    marker = self.parse_line(line)
                except SerializationError as err:
                    raise SerializationError(f'error parsing line {line_number} of {filename}: {err}') from err
                loaded.append(marker)
                if isinstance(marker, Genome):
                    if genome is not None:
                        raise SerializationError('multiple genome records', filename)
                    genome = marker
                    continue
                parent = marker.parent
                if parent is None:
                    raise SerializationError(f'marker on line {line_number} has no parent', filename)
                parent.add(marker)
        if genome is None:
            raise SerializationError('no genome record found', filename)
        logger.info(f'loaded {len(genome.genes)} genes and {len(genome.transcripts)} transcripts')
        return genome


def save_genome(genome: Genome, filename: str) -> int:
    return MarkerSerializer().save(genome, filename)


def load_genome(filename: str) -> Genome:
    return MarkerSerializer().load(filename)


def load_reference_genome(*filepaths) -> Dict:
    """
    Args:
        filepaths (list of str): the paths to the files containing the input fasta genomes

    Returns:
        :class:`dict` of :class:`Bio.SeqRecord` by :class:`str`: a dictionary representing the sequences in the fasta file
    """
    reference_genome = {}
    for filename in filepaths:
        with _open(filename, 'r') as fh:
            for chrom, seq in SeqIO.to_dict(SeqIO.parse(fh, 'fasta')).items():
                if chrom in reference_genome:
                    raise KeyError('Duplicate chromosome name', chrom, filename)
                reference_genome[chrom] = seq

    names = list(reference_genome.keys())

    # hg19 and hg38 style names refer to the same sequence
    for template_name in names:
        if template_name.startswith('chr'):
            alternate = re.sub('^chr', '', template_name)
        else:
            alternate = 'chr' + template_name
        if alternate in names:
            raise KeyError(
                'template names {} and {} are considered equal but both have been defined in the reference '
                'loaded'.format(template_name, alternate)
            )
        reference_genome[template_name] = reference_genome[template_name].upper()
        reference_genome.setdefault(alternate, reference_genome[template_name])
    return reference_genome


def write_effects(effects: Iterable[VariantEffects], filename: str):
    """write the effects of one or more variants to a tab delimited file"""
    rows = []
    for variant_effects in effects:
        rows.extend(variant_effects.to_rows())
    output_tabbed_file(rows, filename)
