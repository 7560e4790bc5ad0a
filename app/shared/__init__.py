"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error taxonomy, normalization and the error terminal
- Security middleware and rate limiting
- Request context, logging configuration and metrics
- Error tracking and the process supervisor
"""
