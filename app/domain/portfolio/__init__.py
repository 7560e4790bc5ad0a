"""
Portfolio bounded context — domain layer.

This module contains all domain logic for the portfolio site:
- Contact form submissions
- Profile ("about me") and skills catalog
- The day-of-week utility check
"""
