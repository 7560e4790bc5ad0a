"""Adapters for the portfolio bounded context (SQLAlchemy, SMTP, clock)."""
