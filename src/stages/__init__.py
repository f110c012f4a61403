"""
Pipeline stages for review sentiment analysis.

Contains all stage modules that process reviews through the pipeline:
- Record Filter and length cutoff
- Rating Normalizer
- Tokenizer / Stopword Filter
- Review Aggregator
- Word Aggregator
- Descriptive statistics
"""
