"""
lm04-stats Application Layer

Key Components:
- cli.py: Logging configuration shared by the command line entry points
- config.py: Configuration management using Pydantic settings
- util/: Administrative command line (create schema, seed, show and refresh tokens)
"""
