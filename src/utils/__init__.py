"""
Utility modules for SNAFLEShub Reviews.

Cross-cutting concerns:
- Storage: JSON-file review store
- Reporting: CSV/JSON export of stats and listings
- Sample data: demo reviews for seeding
"""
