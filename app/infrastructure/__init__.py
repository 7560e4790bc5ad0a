"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: the SQL record store, the SMTP
relay and the system clock.
"""
