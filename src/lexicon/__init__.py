"""
Lexicon Module.

Word polarity reference data shared by the review and word aggregators.
"""
