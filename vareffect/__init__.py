"""
predicts the effects of sequence variants on the genes, transcripts and exons of a genome
"""
__version__ = '1.0.0'
