# Backend collection/table: profiles
# This file documents the expected record shape
# Actual operations go through the storage port (app/database/store.py)

"""
profiles:
- id: profile id (Postgres uuid, or the owner's user id on Firestore)
- user_id: identity id (unique) - at most one profile per identity
- first_name, last_name: text (1-50 chars; last_name is "" for default profiles)
- email: text (nullable) - copied from the identity for default profiles
- bio: text (nullable, <= 500)
- location: text (nullable, <= 100)
- website: text (nullable)
- github, linkedin: text (nullable, <= 100)
- skills: list of text (nullable)
- avatar: text (nullable)
- created_at: timestamp

Profiles are only ever mutated by their owner.
"""
