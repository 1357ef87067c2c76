"""
Chessmate Central - Chess Tournament Management

Organizers publish tournaments, take registrations, record round-by-round
scores and post news; players browse tournaments and follow standings.

Main components:
- db: SQLAlchemy models and session management
- results: score tracking, roster reconciliation and standings
- services: tournaments, registrations, blog, uploads, AI descriptions
- web: FastAPI JSON API
"""

__version__ = "1.0.0"
