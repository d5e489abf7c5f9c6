"""
the genome marker model (chromosomes, genes, transcripts, exons, introns, UTRs and splice sites) and the
calculation of variant effects against it
"""
