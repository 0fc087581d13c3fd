"""
Database Models

This package defines the database models for the lm04-stats service using SQLAlchemy ORM.

Key Models:
- base.py: Base SQLAlchemy model with common type definitions, including a
  timestamp type that always round-trips as UTC
- spotify_token.py: The Spotify access/refresh token record

The service acts for a single Spotify account. The table may hold more than one
row over time; the most recently updated row is authoritative.
"""
