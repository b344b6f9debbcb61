"""
Review core for SNAFLEShub.

Pure functions over review collections:
- Aggregation Engine (summary statistics)
- Filter/Sort Pipeline (listing views and paging)
- Reaction Ledger (like/dislike toggles)
- Lifecycle helpers (new reviews and author edits)
"""
