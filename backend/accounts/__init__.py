# accounts/__init__.py
"""
Accounts app - Authentication and multi-tenancy.

This app provides:
- Company: Tenant/organization model
- UserGroup: Role (access level) plus per-group extra-field schema
- User: Company-scoped user model
- OTP: Email verification codes
- ActorContext: Authorization context utilities
"""
