# Table: permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

permissions:
- id: bigint identity (primary key)
- key: text (not null, unique) - "<module>.<action>", e.g. "materials.view", "admin.manage_users"
- name: text (not null)
- description: text (nullable)
- module: text (not null) - e.g. "materials", "admin", "ai_agents"
- category: text (nullable) - groups related permissions in the admin UI
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())

Group assignments live in group_permissions (see groups/models.py).
"""
