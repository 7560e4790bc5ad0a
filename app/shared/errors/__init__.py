"""
Shared error handling package.

Every failure is normalized into one taxonomy and rendered by a single
terminal, so all error responses share one envelope.
"""
