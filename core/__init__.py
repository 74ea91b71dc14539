"""
Core module shared by the customers, licenses and activations apps.

This module contains:
- Value objects, domain exceptions and events
- The in-process event bus and the audit trail handler
- Operator auth, rate limiting, logging and metrics middleware
- Health, readiness and metrics views
"""
