"""
Utility modules for the review sentiment pipeline.

Cross-cutting concerns:
- Language: Best-effort language detection for scraped text
- Storage: Corpus loading and output persistence
"""
