"""
Customers module - Customer records.

This module handles:
- Customer entity and domain logic
- Customer persistence
- Creating and looking up customers that licenses are issued to
"""
