"""
Field mapping and data quality engine for CRM-to-CRM migrations.

Provides:
- Field mapping suggestions (exact, lexicon pattern, and fuzzy similarity matching)
- Configurable record validation with remediation suggestions
- Job-scoped duplicate detection
- Data quality scoring
- Checkpointed cleansing job lifecycle
"""

__version__ = "0.1.0"
