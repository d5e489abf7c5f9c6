from typing import Dict, List, Optional, Tuple

from ..config import Config
from ..constants import (
    CODON_SIZE,
    EFFECT_TYPE,
    ERROR_WARNING,
    EXON_SPLICE_TYPE,
    FRAME,
    START_CODON,
    STRAND,
    reverse_complement,
    translate,
)
from ..error import InvalidFrameError, NotSpecifiedError
from ..interval import Interval
from ..util import logger
from .base import Marker, MarkerSeq, ReferenceName
from .codon_change import CodonChange
from .splicing import SpliceSiteAcceptor, SpliceSiteDonor, SpliceSiteRegion


class Genome:
    """
    the root of the marker tree. Owns the chromosomes and the configuration used to build and annotate them
    """

    def __init__(self, name: str = '', config: Optional[Config] = None):
        self.name = name
        self.config = config if config is not None else Config()
        self.chromosomes: Dict[str, 'Chromosome'] = {}
        self.parent = None
        self.strand = None

    def add(self, chromosome: 'Chromosome'):
        chromosome.parent = self
        self.chromosomes[str(chromosome.name)] = chromosome

    def chromosome(self, name) -> Optional['Chromosome']:
        """
        Example:
            >>> genome.chromosome('chr1') is genome.chromosome('1')
            True
        """
        if name is None:
            return None
        name = str(name)
        if name in self.chromosomes:
            return self.chromosomes[name]
        for chromosome in self.chromosomes.values():
            if chromosome.name == name:
                return chromosome
        return None

    @property
    def genes(self) -> List['Gene']:
        return [gene for chromosome in self.chromosomes.values() for gene in chromosome.genes]

    @property
    def transcripts(self) -> List['Transcript']:
        return [transcript for gene in self.genes for transcript in gene.transcripts]

    def set_sequences(self, reference_genome: Dict):
        """
        fill the chromosome and exon sequences from a reference genome

        Args:
            reference_genome (:class:`dict` of :class:`Bio.SeqRecord` by :class:`str`): dict of reference sequence by
                template/chr name
        """
        if reference_genome is None:
            raise NotSpecifiedError('reference genome is required to set the sequences')
        for chromosome in self.chromosomes.values():
            record = None
            for name in [str(chromosome.name), 'chr' + str(chromosome.name), str(chromosome.name)[3:]]:
                if name in reference_genome:
                    record = reference_genome[name]
                    break
            if record is None:
                logger.warning(f'no reference sequence for chromosome: {chromosome.name}')
                continue
            chromosome.seq = str(record.seq).upper()
            if chromosome.end < len(chromosome.seq):
                chromosome.end = len(chromosome.seq)
            for transcript in chromosome.transcripts:
                for exon in transcript.exons:
                    seq = chromosome.seq[exon.start - 1:exon.end]
                    if len(seq) != exon.size():
                        logger.warning(f'exon is outside the reference sequence: {exon!r}')
                        continue
                    exon.seq = reverse_complement(seq) if exon.is_strand_minus else seq

    def serialize_save(self, serializer) -> str:
        return '\t'.join([self.__class__.__name__, str(serializer.number(self)), '0', self.name])

    def serialize_parse(self, serializer):
        serializer.register(serializer.next_field_int(), self)
        serializer.next_field_int()
        self.name = serializer.next_field()

    def __repr__(self):
        return 'Genome({}, chromosomes={})'.format(self.name, len(self.chromosomes))


class Chromosome(Marker):
    effect_type = EFFECT_TYPE.CHROMOSOME

    def __init__(self, genome=None, name: str = '', start: int = 1, end: Optional[int] = None, seq=None):
        """
        Args:
            genome (Genome): the genome this chromosome belongs to
            name: the name of the chromosome
            start: the first position
            end: the last position, defaults to the length of the sequence
            seq: the chromosome sequence (forward strand)
        """
        if end is None:
            end = len(seq) if seq else start
        Marker.__init__(self, genome, start, end, STRAND.POS, str(name))
        self.name = ReferenceName(name)
        self.seq = str(seq).upper() if seq else ''
        self.genes: List['Gene'] = []

    @property
    def chromosome_name(self):
        return self.name

    @property
    def codon_table(self) -> str:
        """the NCBI name of the codon table used to translate genes on this chromosome"""
        return self.config.codon_table_for(str(self.name))

    def add(self, gene: 'Gene'):
        gene.parent = self
        self.genes.append(gene)
        self.genes.sort(key=lambda g: (g.start, g.end))
        if gene.end > self.end:
            self.end = gene.end

    @property
    def transcripts(self) -> List['Transcript']:
        return [transcript for gene in self.genes for transcript in gene.transcripts]

    def query(self, marker) -> List[Marker]:
        return [gene for gene in self.genes if gene.intersects(marker)]

    def serialize_parse(self, serializer):
        Marker.serialize_parse(self, serializer)
        self.name = ReferenceName(self.id)


class Gene(Marker):
    effect_type = EFFECT_TYPE.GENE

    def __init__(
        self,
        chromosome=None,
        start: int = 0,
        end: Optional[int] = None,
        strand=None,
        gene_id: str = '',
        name: Optional[str] = None,
        biotype: Optional[str] = None,
    ):
        """
        Args:
            chromosome (Chromosome): the chromosome the gene is on
            start: the genomic start position
            end: the genomic end position
            strand (STRAND): the genomic strand '+' or '-'
            gene_id: the gene id i.e. ENSG0001
            name: the gene name, for example the hugo name
            biotype: the gene biotype, i.e. protein_coding

        Example:
            >>> Gene(chromosome, 1, 1000, '+', 'ENSG0001', 'KRAS')
        """
        Marker.__init__(self, chromosome, start, end, strand, gene_id)
        self.name = name if name else gene_id
        self.biotype = biotype if biotype else ''
        self.transcripts: List['Transcript'] = []

    def add(self, transcript: 'Transcript'):
        transcript.parent = self
        self.transcripts.append(transcript)

    def is_protein_coding(self) -> bool:
        return any([tr.is_protein_coding() for tr in self.transcripts])

    def variant_effect(self, variant, effects) -> bool:
        if not self.intersects(variant):
            return False
        hit_transcript = False
        for transcript in self.transcripts:
            if transcript.intersects(variant):
                hit_transcript = True
                transcript.variant_effect(variant, effects)
        if not hit_transcript:
            effects.add(variant, self, EFFECT_TYPE.INTRAGENIC)
        return True

    def query(self, marker) -> List[Marker]:
        return [tr for tr in self.transcripts if tr.intersects(marker)]

    def serialize_save(self, serializer) -> str:
        return '\t'.join([Marker.serialize_save(self, serializer), self.name, self.biotype])

    def serialize_parse(self, serializer):
        Marker.serialize_parse(self, serializer)
        self.name = serializer.next_field()
        self.biotype = serializer.next_field()


class Transcript(Marker):
    effect_type = EFFECT_TYPE.TRANSCRIPT

    def __init__(
        self,
        gene=None,
        start: int = 0,
        end: Optional[int] = None,
        strand=None,
        transcript_id: str = '',
        protein_coding: bool = True,
        biotype: Optional[str] = None,
        cds_start: Optional[int] = None,
        cds_end: Optional[int] = None,
    ):
        """
        Args:
            gene (Gene): the gene this transcript belongs to
            start: the genomic start position
            end: the genomic end position
            strand (STRAND): the strand, inherited from the gene when not given
            transcript_id: the transcript id i.e. ENST0001
            protein_coding: this transcript is translated
            biotype: the transcript biotype
            cds_start: the genomic start of the coding region (lowest position regardless of strand)
            cds_end: the genomic end of the coding region (highest position regardless of strand)

        Raises:
            AttributeError: if the cds start is greater than the cds end
        """
        Marker.__init__(self, gene, start, end, strand, transcript_id)
        if cds_start is not None and cds_end is not None and cds_start > cds_end:
            raise AttributeError('cds_start cannot be greater than cds_end', cds_start, cds_end)
        self.protein_coding = protein_coding
        self.biotype = biotype if biotype else ''
        self.cds_start = cds_start
        self.cds_end = cds_end
        self.exons: List['Exon'] = []
        self.introns: List['Intron'] = []
        self.utrs: List['Utr'] = []
        self.upstream: Optional['Upstream'] = None
        self.downstream: Optional['Downstream'] = None

    @property
    def gene(self):
        return self.parent

    def add(self, exon: 'Exon'):
        exon.parent = self
        self.exons.append(exon)
        self.exons.sort(key=lambda e: (e.start, e.end))

    def sorted_strand(self) -> List['Exon']:
        """the exons in transcription order"""
        if self.is_strand_minus:
            return list(reversed(self.exons))
        return list(self.exons)

    def rank_exons(self):
        for rank, exon in enumerate(self.sorted_strand(), start=1):
            exon.rank = rank

    def is_protein_coding(self) -> bool:
        return self.protein_coding

    @property
    def codon_table(self) -> str:
        chromosome = self.find_parent(Chromosome)
        if chromosome is None:
            return self.config.codon_table
        return chromosome.codon_table

    def cds_bounds(self) -> Optional[Interval]:
        """the genomic span of the coding region. Defaults to the span of the exons"""
        if self.cds_start is not None and self.cds_end is not None:
            return Interval(self.cds_start, self.cds_end)
        if not self.exons:
            return None
        return Interval(self.exons[0].start, self.exons[-1].end)

    def cds_five_prime(self) -> Optional[int]:
        bounds = self.cds_bounds()
        if bounds is None:
            return None
        return bounds.end if self.is_strand_minus else bounds.start

    def cds_three_prime(self) -> Optional[int]:
        bounds = self.cds_bounds()
        if bounds is None:
            return None
        return bounds.start if self.is_strand_minus else bounds.end

    def is_cds(self, variant) -> bool:
        """
        True if the transcript is coding and the variant intersects the coding region. An insertion is coding only
        when the bases on both sides of it are coding
        """
        if not (self.is_protein_coding() or self.config.treat_all_as_protein_coding):
            return False
        bounds = self.cds_bounds()
        if bounds is None:
            return False
        if variant.is_ins():
            return bounds.start < variant.start <= bounds.end
        return Interval.overlaps(bounds, variant)

    def coding_parts(self) -> List[Tuple['Exon', Interval]]:
        """the coding part of each exon, in transcription order"""
        bounds = self.cds_bounds()
        if bounds is None:
            return []
        parts = []
        for exon in self.sorted_strand():
            part = Interval.intersection(bounds, exon)
            if part is not None:
                parts.append((exon, part))
        return parts

    def cds_base_number(self, pos: int) -> int:
        """
        Args:
            pos: a genomic position

        Returns:
            int: the 0-based index of the position in the coding sequence or -1 if the position is not coding
        """
        offset = 0
        for exon, part in self.coding_parts():
            if pos in part:
                if self.is_strand_minus:
                    return offset + part.end - pos
                return offset + pos - part.start
            offset += len(part)
        return -1

    def base_number(self, pos: int) -> int:
        """
        Returns:
            int: the 0-based index of the position in the spliced transcript or -1 if the position is not exonic
        """
        offset = 0
        for exon in self.sorted_strand():
            if exon.start <= pos <= exon.end:
                if self.is_strand_minus:
                    return offset + exon.end - pos
                return offset + pos - exon.start
            offset += exon.size()
        return -1

    def cdna_seq(self) -> str:
        """the spliced sequence of the transcript. Empty if any exon is missing its sequence"""
        seqs = []
        for exon in self.sorted_strand():
            if not exon.has_seq():
                return ''
            seqs.append(exon.seq)
        return ''.join(seqs)

    def cds_seq(self) -> str:
        """the coding sequence in transcription order. Empty if any coding exon is missing its sequence"""
        seqs = []
        for exon, part in self.coding_parts():
            if not exon.has_seq():
                return ''
            if self.is_strand_minus:
                seqs.append(exon.seq[exon.end - part.end:exon.end - part.start + 1])
            else:
                seqs.append(exon.seq[part.start - exon.start:part.end - exon.start + 1])
        return ''.join(seqs)

    def frame_correction(self) -> bool:
        """
        trim the first coding exon when its frame is not zero and the coding region starts at the exon
        boundary, so that the coding sequence starts at a codon boundary
        """
        parts = self.coding_parts()
        if not parts:
            return False
        exon, part = parts[0]
        if exon.frame <= 0:
            return False
        if self.is_strand_minus and part.end != exon.end:
            return False
        if self.is_strand_plus and part.start != exon.start:
            return False
        delta = exon.frame
        if not exon.frame_correction(delta):
            return False
        if self.cds_start is not None and self.cds_end is not None:
            if self.is_strand_minus:
                self.cds_end = exon.end
            else:
                self.cds_start = exon.start
        logger.debug(f'corrected frame of transcript {self.id} by {delta}')
        return True

    def create_introns(self) -> List['Intron']:
        self.introns = []
        exons = self.sorted_strand()
        for rank, (previous_exon, next_exon) in enumerate(zip(exons, exons[1:]), start=1):
            start = min(previous_exon.end, next_exon.end) + 1
            end = max(previous_exon.start, next_exon.start) - 1
            if start > end:
                continue
            self.introns.append(Intron(self, start, end, intron_id='{}_intron_{}'.format(self.id, rank), rank=rank))
        return self.introns

    def create_utrs(self) -> List['Utr']:
        self.utrs = []
        if not self.is_protein_coding() or self.cds_start is None or self.cds_end is None:
            return self.utrs
        for exon in self.sorted_strand():
            regions = []
            if exon.start < self.cds_start:
                regions.append(Interval(exon.start, min(exon.end, self.cds_start - 1)))
            if exon.end > self.cds_end:
                regions.append(Interval(max(exon.start, self.cds_end + 1), exon.end))
            for region in regions:
                upstream_of_cds = region.end < self.cds_start
                five_prime = upstream_of_cds if self.is_strand_plus else not upstream_of_cds
                cls = Utr5prime if five_prime else Utr3prime
                self.utrs.append(cls(exon, region.start, region.end, marker_id=exon.id))
        return self.utrs

    def create_up_down_stream(self, upstream_size: int, downstream_size: int):
        self.upstream = None
        self.downstream = None
        before, after = (downstream_size, upstream_size) if self.is_strand_minus else (upstream_size, downstream_size)
        left = None
        if before > 0 and self.start > 1:
            left = Interval(max(1, self.start - before), self.start - 1)
        end = self.end + after
        chromosome = self.find_parent(Chromosome)
        if chromosome is not None and chromosome.seq:
            end = min(end, len(chromosome.seq))
        right = Interval(self.end + 1, end) if end > self.end else None
        upstream, downstream = (right, left) if self.is_strand_minus else (left, right)
        if upstream is not None:
            self.upstream = Upstream(self, upstream.start, upstream.end, marker_id=self.id)
        if downstream is not None:
            self.downstream = Downstream(self, downstream.start, downstream.end, marker_id=self.id)

    def create_splice_sites(
        self, splice_site_size: int, splice_region_exon_size: int, splice_region_intron_min: int,
        splice_region_intron_max: int,
    ):
        exons = self.sorted_strand()
        for index, exon in enumerate(exons):
            exon.splice_sites = []
            if index > 0:
                exon.create_splice_site_region_start(splice_region_exon_size)
            if index < len(exons) - 1:
                exon.create_splice_site_region_end(splice_region_exon_size)
        for intron in self.introns:
            intron.splice_sites = []
            intron.create_splice_site_donor(splice_site_size)
            intron.create_splice_site_acceptor(splice_site_size)
            intron.create_splice_site_region_start(splice_region_intron_min, splice_region_intron_max)
            intron.create_splice_site_region_end(splice_region_intron_min, splice_region_intron_max)

    def assign_aa_indexes(self):
        offset = 0
        for exon in self.exons:
            exon.set_aa_idx(-1, -1)
        for exon, part in self.coding_parts():
            exon.set_aa_idx(offset // CODON_SIZE, (offset + len(part) - 1) // CODON_SIZE)
            offset += len(part)

    def build(self, config: Optional[Config] = None):
        """
        create the markers derived from the exons. Must be called (single threaded) before annotating variants
        """
        config = config if config is not None else self.config
        self.rank_exons()
        self.frame_correction()
        self.create_introns()
        self.create_utrs()
        self.create_up_down_stream(config.upstream_size, config.downstream_size)
        self.create_splice_sites(
            config.splice_site_size,
            config.splice_region_exon_size,
            config.splice_region_intron_min,
            config.splice_region_intron_max,
        )
        self.assign_aa_indexes()

    def protein(self) -> str:
        """translation of the coding sequence"""
        return translate(self.cds_seq(), table=self.codon_table)

    def variant_effect(self, variant, effects) -> bool:
        if not self.intersects(variant):
            return False
        annotated = False
        for utr in self.utrs:
            if utr.intersects(variant.flanks()):
                annotated = utr.variant_effect(variant, effects) or annotated
        for exon in self.exons:
            if exon.intersects(variant):
                annotated = exon.variant_effect(variant, effects) or annotated
        for intron in self.introns:
            if intron.intersects(variant):
                annotated = intron.variant_effect(variant, effects) or annotated
        if not annotated:
            effects.add(variant, self, EFFECT_TYPE.TRANSCRIPT)
        return True

    def query(self, marker) -> List[Marker]:
        result = []
        for child in self.exons + self.introns + self.utrs:
            if child.intersects(marker):
                result.append(child)
                result.extend(child.query(marker))
        for child in [self.upstream, self.downstream]:
            if child is not None and child.intersects(marker):
                result.append(child)
        return result

    def serialize_save(self, serializer) -> str:
        return '\t'.join(
            [
                Marker.serialize_save(self, serializer),
                str(self.protein_coding),
                self.biotype,
                str(self.cds_start) if self.cds_start is not None else '',
                str(self.cds_end) if self.cds_end is not None else '',
            ]
        )

    def serialize_parse(self, serializer):
        Marker.serialize_parse(self, serializer)
        self.protein_coding = serializer.next_field_bool()
        self.biotype = serializer.next_field()
        self.cds_start = serializer.next_field_int_or_none()
        self.cds_end = serializer.next_field_int_or_none()


class Exon(MarkerSeq):
    """
    an exon of a transcript. Knows the frame of its first coding base, its rank in the transcript, the
    range of amino acids it codes for and the splice sites at its boundaries
    """

    effect_type = EFFECT_TYPE.EXON

    def __init__(
        self,
        transcript=None,
        start: int = 0,
        end: Optional[int] = None,
        strand=None,
        exon_id: str = '',
        rank: int = 0,
        seq=None,
        frame: int = FRAME.UNKNOWN,
    ):
        """
        Args:
            transcript (Transcript): the transcript this exon belongs to
            start: the genomic start position
            end: the genomic end position
            strand (STRAND): the strand, inherited from the transcript when not given
            exon_id: the exon id
            rank: 1-based position of the exon in the transcript (transcription order)
            seq: the exon sequence wrt the exon strand
            frame: -1 (unknown), 0, 1 or 2

        Raises:
            AttributeError: if the exon start > the exon end
            InvalidFrameError: if the frame is not one of the allowed values

        Example:
            >>> Exon(transcript, 15, 78)
        """
        MarkerSeq.__init__(self, transcript, start, end, strand, exon_id, seq)
        self.rank = rank
        self.frame = frame
        self.aa_idx_start = -1
        self.aa_idx_end = -1
        self._splice_type = EXON_SPLICE_TYPE.NONE
        self.splice_sites: List[Marker] = []

    @property
    def transcript(self):
        return self.parent

    @property
    def frame(self) -> int:
        return self._frame

    @frame.setter
    def frame(self, frame):
        frame = int(frame)
        if frame not in FRAME.values():
            raise InvalidFrameError('frame must be one of -1, 0, 1 or 2', frame)
        self._frame = frame

    @property
    def splice_type(self) -> str:
        return self._splice_type

    @splice_type.setter
    def splice_type(self, splice_type):
        self._splice_type = EXON_SPLICE_TYPE.enforce(splice_type)

    def set_aa_idx(self, start: int, end: int):
        self.aa_idx_start = start
        self.aa_idx_end = end

    def add(self, splice_site: Marker):
        splice_site.parent = self
        self.splice_sites.append(splice_site)

    def clone(self) -> 'Exon':
        exon = MarkerSeq.clone(self)
        exon.splice_sites = []
        for splice_site in self.splice_sites:
            exon.add(splice_site.clone())
        return exon

    def _apply_content(self, variant, marker):
        MarkerSeq._apply_content(self, variant, marker)
        marker.splice_sites = []
        for splice_site in self.splice_sites:
            new_splice_site = splice_site.apply(variant)
            if new_splice_site is not None:
                marker.add(new_splice_site)

    def create_splice_site_region_start(self, size: int) -> Optional[SpliceSiteRegion]:
        """
        create the splice region covering the first (5') bases of the exon

        Args:
            size: number of exonic bases, clamped to the size of the exon
        """
        size = min(size, self.size())
        if size <= 0:
            return None
        if self.is_strand_minus:
            start, end = self.end - size + 1, self.end
        else:
            start, end = self.start, self.start + size - 1
        region = SpliceSiteRegion(self, start, end, self.strand, self.id)
        self.add(region)
        return region

    def create_splice_site_region_end(self, size: int) -> Optional[SpliceSiteRegion]:
        """
        create the splice region covering the last (3') bases of the exon

        Args:
            size: number of exonic bases, clamped to the size of the exon
        """
        size = min(size, self.size())
        if size <= 0:
            return None
        if self.is_strand_minus:
            start, end = self.start, self.start + size - 1
        else:
            start, end = self.end - size + 1, self.end
        region = SpliceSiteRegion(self, start, end, self.strand, self.id)
        self.add(region)
        return region

    def frame_correction(self, delta: int) -> bool:
        """
        remove bases from the 5' end of the exon so that it starts at a codon boundary

        Args:
            delta: number of bases to remove

        Returns:
            bool: False if the exon is too short to be corrected
        """
        if delta <= 0:
            return True
        if self.size() <= delta:
            logger.debug(f'exon too short (size: {self.size()}), cannot correct frame: {self!r}')
            return False
        if self.is_strand_minus:
            self.end -= delta
        else:
            self.start += delta
        self.frame = (self.frame - delta) % CODON_SIZE
        if len(self.seq) >= delta:
            self.seq = self.seq[delta:]
        return True

    def variant_effect(self, variant, effects) -> bool:
        if not self.intersects(variant):
            return False
        transcript = self.transcript
        coding = transcript is not None and (
            transcript.is_protein_coding() or self.config.treat_all_as_protein_coding
        )
        annotated = False
        if not coding or variant.is_interval() or not variant.is_variant():
            effects.add(variant, self, EFFECT_TYPE.EXON)
            annotated = True
        elif transcript.is_cds(variant):
            CodonChange.factory(variant, transcript, effects, exon=self).codon_change()
            annotated = True
        for splice_site in self.splice_sites:
            if splice_site.intersects(variant):
                splice_site.variant_effect(variant, effects)
        return annotated

    def sanity_check(self, variant) -> Optional[str]:
        """
        check that the reference allele of a substitution matches the exon sequence

        Returns:
            ERROR_WARNING: the problem found or None when the variant is consistent with the exon
        """
        if not self.intersects(variant):
            return None
        if not (variant.is_snp() or variant.is_mnp()):
            return None
        overlap_start = max(variant.start, self.start)
        index = overlap_start - self.start
        if not self.seq:
            return ERROR_WARNING.WARNING_SEQUENCE_NOT_AVAILABLE
        if index >= len(self.seq):
            return ERROR_WARNING.ERROR_OUT_OF_EXON
        overlap_end = min(variant.end, self.end)
        real_reference = self.bases_at(index, overlap_end - overlap_start + 1).upper()
        ref_end = overlap_end - variant.start
        if ref_end >= len(variant.ref):
            return ERROR_WARNING.ERROR_OUT_OF_EXON
        ref_start = overlap_start - variant.start
        if ref_start < 0:
            return ERROR_WARNING.ERROR_OUT_OF_EXON
        if real_reference != variant.ref[ref_start:ref_end + 1].upper():
            return ERROR_WARNING.WARNING_REF_DOES_NOT_MATCH_GENOME
        return None

    def query(self, marker) -> List[Marker]:
        return [splice_site for splice_site in self.splice_sites if splice_site.intersects(marker)]

    def serialize_save(self, serializer) -> str:
        return '\t'.join(
            [Marker.serialize_save(self, serializer), str(self.frame), str(self.rank), self.seq, self.splice_type]
        )

    def serialize_parse(self, serializer):
        Marker.serialize_parse(self, serializer)
        self.frame = serializer.next_field_int()
        self.rank = serializer.next_field_int()
        self.seq = serializer.next_field().upper()
        splice_type = serializer.next_field()
        self.splice_type = splice_type if splice_type else EXON_SPLICE_TYPE.NONE
        self.splice_sites = []

    def __str__(self):
        return '{}:{}-{} {!r} rank: {}, frame: {}, sequence: {}'.format(
            self.chromosome_name, self.start, self.end, self.id, self.rank, self.frame, self.seq
        )

    def __repr__(self):
        return 'Exon({}:{}-{}, rank={}, frame={})'.format(
            self.chromosome_name, self.start, self.end, self.rank, self.frame
        )


class Intron(Marker):
    effect_type = EFFECT_TYPE.INTRON

    def __init__(self, transcript=None, start: int = 0, end: Optional[int] = None, strand=None, intron_id='', rank=0):
        Marker.__init__(self, transcript, start, end, strand, intron_id)
        self.rank = rank
        self.splice_sites: List[Marker] = []

    def add(self, splice_site: Marker):
        splice_site.parent = self
        self.splice_sites.append(splice_site)

    def clone(self) -> 'Intron':
        intron = Marker.clone(self)
        intron.splice_sites = []
        for splice_site in self.splice_sites:
            intron.add(splice_site.clone())
        return intron

    def _apply_content(self, variant, marker):
        marker.splice_sites = []
        for splice_site in self.splice_sites:
            new_splice_site = splice_site.apply(variant)
            if new_splice_site is not None:
                marker.add(new_splice_site)

    def _create(self, cls, start: int, end: int):
        if start > end:
            return None
        site = cls(self, start, end, self.strand, self.id)
        self.add(site)
        return site

    def create_splice_site_donor(self, size: int) -> Optional[SpliceSiteDonor]:
        """the core site at the 5' end of the intron"""
        size = min(size, self.size())
        if size <= 0:
            return None
        if self.is_strand_minus:
            return self._create(SpliceSiteDonor, self.end - size + 1, self.end)
        return self._create(SpliceSiteDonor, self.start, self.start + size - 1)

    def create_splice_site_acceptor(self, size: int) -> Optional[SpliceSiteAcceptor]:
        """the core site at the 3' end of the intron"""
        size = min(size, self.size())
        if size <= 0:
            return None
        if self.is_strand_minus:
            return self._create(SpliceSiteAcceptor, self.start, self.start + size - 1)
        return self._create(SpliceSiteAcceptor, self.end - size + 1, self.end)

    def _near_start(self, offset_min: int, offset_max: int) -> Tuple[int, int]:
        return self.start + offset_min - 1, min(self.start + offset_max - 1, self.end)

    def _near_end(self, offset_min: int, offset_max: int) -> Tuple[int, int]:
        return max(self.end - offset_max + 1, self.start), self.end - offset_min + 1

    def create_splice_site_region_start(self, offset_min: int, offset_max: int) -> Optional[SpliceSiteRegion]:
        """the splice region following the donor site (5' end of the intron)"""
        if offset_min <= 0 or offset_max < offset_min:
            return None
        if self.is_strand_minus:
            start, end = self._near_end(offset_min, offset_max)
        else:
            start, end = self._near_start(offset_min, offset_max)
        return self._create(SpliceSiteRegion, start, end)

    def create_splice_site_region_end(self, offset_min: int, offset_max: int) -> Optional[SpliceSiteRegion]:
        """the splice region preceding the acceptor site (3' end of the intron)"""
        if offset_min <= 0 or offset_max < offset_min:
            return None
        if self.is_strand_minus:
            start, end = self._near_start(offset_min, offset_max)
        else:
            start, end = self._near_end(offset_min, offset_max)
        return self._create(SpliceSiteRegion, start, end)

    def variant_effect(self, variant, effects) -> bool:
        if not self.intersects(variant):
            return False
        effects.add(variant, self, EFFECT_TYPE.INTRON)
        for splice_site in self.splice_sites:
            if splice_site.intersects(variant):
                splice_site.variant_effect(variant, effects)
        return True

    def query(self, marker) -> List[Marker]:
        return [splice_site for splice_site in self.splice_sites if splice_site.intersects(marker)]


class Utr(Marker):
    """the untranslated part of an exon"""

    deleted_effect_type = EFFECT_TYPE.NONE

    @property
    def transcript(self) -> Optional[Transcript]:
        return self.find_parent(Transcript)

    def _cds_boundary(self, transcript) -> Optional[int]:
        raise NotImplementedError('abstract method')

    def _closest_position(self, overlap: Interval) -> int:
        raise NotImplementedError('abstract method')

    def distance_to_cds(self, variant) -> int:
        """number of exonic bases between the variant and the coding region, -1 if it cannot be computed"""
        transcript = self.transcript
        overlap = Interval.intersection(self, variant.flanks())
        if transcript is None or overlap is None:
            return -1
        boundary = self._cds_boundary(transcript)
        if boundary is None:
            return -1
        position = transcript.base_number(self._closest_position(overlap))
        cds = transcript.base_number(boundary)
        if position < 0 or cds < 0:
            return -1
        return abs(cds - position)

    def variant_effect(self, variant, effects) -> bool:
        if not self.intersects(variant.flanks()):
            return False
        if variant.is_del() and variant.includes(self):
            effects.add(variant, self, self.deleted_effect_type)
            return True
        distance = self.distance_to_cds(variant)
        effects.add(variant, self, self.effect_type, str(distance) if distance >= 0 else '')
        return True


class Utr5prime(Utr):
    effect_type = EFFECT_TYPE.UTR_5_PRIME
    deleted_effect_type = EFFECT_TYPE.UTR_5_DELETED

    def _cds_boundary(self, transcript):
        return transcript.cds_five_prime()

    def _closest_position(self, overlap):
        return overlap.start if self.is_strand_minus else overlap.end

    def start_gained(self, variant) -> str:
        """
        Returns:
            str: the new start codon created by a SNP in the 5' UTR or an empty string
        """
        if not variant.is_snp():
            return ''
        transcript = self.transcript
        if transcript is None:
            return ''
        cdna = transcript.cdna_seq()
        cds_index = transcript.base_number(transcript.cds_five_prime())
        index = transcript.base_number(variant.start)
        if not cdna or cds_index < 0 or index < 0 or index >= cds_index:
            return ''
        utr = cdna[:cds_index]
        alt = reverse_complement(variant.alt) if self.is_strand_minus else variant.alt
        new_utr = utr[:index] + alt + utr[index + 1:]
        for i in range(max(0, index - 2), index + 1):
            if new_utr[i:i + 3] == START_CODON and utr[i:i + 3] != START_CODON:
                return new_utr[i:i + 3]
        return ''

    def variant_effect(self, variant, effects) -> bool:
        if not Utr.variant_effect(self, variant, effects):
            return False
        codon = self.start_gained(variant)
        if codon:
            effects.add(variant, self, EFFECT_TYPE.START_GAINED, codon)
        return True


class Utr3prime(Utr):
    effect_type = EFFECT_TYPE.UTR_3_PRIME
    deleted_effect_type = EFFECT_TYPE.UTR_3_DELETED

    def _cds_boundary(self, transcript):
        return transcript.cds_three_prime()

    def _closest_position(self, overlap):
        return overlap.end if self.is_strand_minus else overlap.start


class Upstream(Marker):
    """window of a given size before the 5' end of a transcript"""

    effect_type = EFFECT_TYPE.UPSTREAM

    def variant_effect(self, variant, effects) -> bool:
        if not self.intersects(variant):
            return False
        transcript = self.parent
        distance = transcript.distance(variant) if transcript is not None else self.distance(variant)
        effects.add(variant, self, self.effect_type, str(distance))
        return True


class Downstream(Upstream):
    """window of a given size after the 3' end of a transcript"""

    effect_type = EFFECT_TYPE.DOWNSTREAM
