"""
Authentication microservice.

This module provides:
- User registration with a role
- Credential authentication
- Signed access token issuance
"""
