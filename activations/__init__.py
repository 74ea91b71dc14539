"""
Activations module - Activation slots and capacity enforcement.

This module handles:
- LicenseActivation entity and domain logic
- Capacity checks against a license's activation cap
- Claiming and releasing slots under a license row lock
"""
