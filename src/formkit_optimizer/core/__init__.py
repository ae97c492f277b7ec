"""
Core Package.

Contains the analysis-and-rewrite logic:
- Import Registry (deduplicated import injection)
- Call-Site Classifier and Config Synthesizer
- Config-File Property Extractor
- Rewrite Driver
"""
