"""
Core engine components: models, lexicon, mapping, validation, deduplication and scoring.
"""
