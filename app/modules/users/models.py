# Table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

users:
- id: bigint identity (primary key)
- email: text (unique, not null) - stored lower-case
- password: text (nullable) - bcrypt hash; null for Google-only accounts
- full_name: text (not null)
- group_id: bigint (nullable, references user_groups.id) - the group name is the user's role
- status: text (not null, default: 'active') - active, inactive, pending
- ai_credits: integer (not null, default: 0, check >= 0)
- is_active: boolean (not null, default: true)
- cpf: text (nullable)
- phone: text (nullable)
- google_id: text (nullable, unique)
- profile_image: text (nullable)
- stripe_customer_id: text (nullable)
- last_login_at: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Deleting a user removes the rows the user owns (products, my_suppliers with
their branches and contacts, tickets with their messages) and their sessions.
"""
