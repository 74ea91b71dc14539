"""
Licenses module - License issuing and lifecycle.

This module handles:
- License entity and domain logic
- License key generation, hashing and rotation
- License lifecycle (issue, reissue, suspend, resume, revoke, delete)
- The audit trail
"""
