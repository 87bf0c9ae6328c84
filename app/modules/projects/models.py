# Backend collection/table: projects
# This file documents the expected record shape
# Actual operations go through the storage port (app/database/store.py)

"""
projects:
- id: project id
- owner_profile_id: profile id of the creator (older documents use ownerId)
- title: text (not null)
- description: text (default "")
- tags: list of text (optional)
- status: text (optional) - planning, in-progress, completed, looking-for-members
- max_members: int (optional)
- current_members: int (default 1)
- repository_url: text (optional)
- contact_info: text (optional)
- created_at: timestamp (set by the backend)

Status is a plain label; any value may change to any other. Updates and
deletes are restricted to the owner by backend rules, not by this service.
"""
