"""
Authentication application.

Identity store and auth gate for the chat backend.

Key components:
    - User model: Email-based user with profile, addresses and MFA settings
    - TokenService: Issues and verifies bearer tokens
    - BearerTokenAuthentication: DRF authentication class for the REST API
    - AuthService / UserService: Business logic behind the endpoints

Usage:
    from authentication.models import User, Profile
    from authentication.services import AuthService
    from authentication.tokens import TokenService
"""
