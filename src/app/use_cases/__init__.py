"""
Use Cases

Organized by area:
- access/: Request access context and API key authentication
- tenants/: Organizations, memberships and invitations
- api_keys/: Machine credential management
- billing/: Plans, checkout and webhook processing
"""
