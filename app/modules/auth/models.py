# Identities are owned by the backend's auth provider (Supabase Auth users or
# Firebase Auth users). This module additionally stores one credential per
# identity so that password checks never depend on the provider's own login.

"""
Expected credential record:

credentials:
- user_id: identity id (primary key / document id)
- email: text (unique)
- password_hash: bcrypt hash, cost factor 12

Created once at signup, read at signin, never updated.
"""
