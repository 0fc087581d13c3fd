"""
lm04-stats

Keeps the Spotify credentials the lm04 stats service uses to call the Spotify
Web API.

Key Components:
- model: SQLAlchemy model for the spotify_token table
- credentials: The credential store (read current record, upsert, expiry check)
- spotify: Refresh-token exchange against the Spotify accounts service
- app: Configuration, logging setup and the administrative command line

Token Management:
   - The refresh exchange (or an administrator) writes tokens with upsert
   - API consumers read the current record and refresh it once it has expired
   - The most recently updated row in spotify_token is authoritative
"""
