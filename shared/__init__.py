"""Shared package for the Snap-to-Report application.

This package contains code used by the Flask backend, its CLI commands and the
dashboard templates. It includes:

- Database models (models.py) - SQLAlchemy model for the reported locations table
- Enums (enums.py) - Outcome kinds and storage providers
- Schemas (schemas.py) - Pydantic models for API payloads and dashboard statistics
- Report parsing (report_parser.py) - Extraction of generated reports from backend replies
- Aggregation (aggregation.py) - Dashboard statistics over loaded locations
- Validation and utility helpers (validation.py, utils.py)
"""
