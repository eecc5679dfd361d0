# Tables: user_groups, group_permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

user_groups:
- id: bigint identity (primary key)
- name: text (not null, unique) - role string, e.g. "BASIC", "ALUNO", "SUPORTE", "ADM"
- display_name: text (not null)
- description: text (nullable)
- color: text (not null, default: '#6b7280') - tag color in the admin UI
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())

group_permissions:
- id: bigint identity (primary key)
- group_id: bigint (foreign key to user_groups.id, not null)
- permission_id: bigint (foreign key to permissions.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (group_id, permission_id)
"""
