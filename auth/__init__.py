"""
auth — User authentication module.

Provides:
  • Password hashing (PBKDF2-HMAC-SHA256, salted, fixed-time verify)
  • JWT issuance & bearer validation
  • Login / current-user API routes
  • ``get_current_user`` FastAPI dependency
"""
