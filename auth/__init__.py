"""
auth — User authentication module.

Provides:
  • Session token issuance & verification (HMAC-SHA256)
  • Password hashing (bcrypt)
  • Session cookie adapter
  • Register / Login / Logout / Me API routes
  • ``get_current_user`` FastAPI dependency
"""
