# Tables: users, auth_tokens, user_sessions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# DDL lives in supabase/migrations/0001_initial_schema.sql

"""
Expected table structure:

users:
- id: bigint identity (primary key)
- email: text (unique, not null)
- password: text (nullable) - bcrypt hash; null for Google-only accounts
- full_name: text (not null)
- group_id: bigint (foreign key to user_groups.id) - the group name is the user's role
- status: text (not null, default: 'active') - active, inactive, pending
- ai_credits: integer (not null, default: 0)
- is_active: boolean (not null, default: true)
- cpf, phone: text (nullable)
- google_id: text (nullable, unique)
- profile_image: text (nullable)
- stripe_customer_id: text (nullable)
- last_login_at: timestamp (nullable)
- created_at, updated_at: timestamp (default: now())

auth_tokens:
- id: bigint identity (primary key)
- user_id: bigint (foreign key to users.id, not null)
- token: text (unique, not null)
- type: text (not null) - reset_password
- expires_at: timestamp (not null)
- used: boolean (not null, default: false)
- created_at: timestamp (default: now())

user_sessions (only with SESSION_BACKEND=supabase):
- id: text (primary key) - random session id, signed in the cookie
- user_id: bigint (nullable) - null while an OAuth login is pending
- data: jsonb (not null)
- expires_at: timestamp (not null)
"""
