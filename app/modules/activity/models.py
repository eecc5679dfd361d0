# Table: user_activity_log
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

user_activity_log:
- id: bigint identity (primary key)
- user_id: bigint (foreign key to users.id, not null, on delete cascade)
- action: text (not null) - e.g. "login", "register", "ai_credits_purchased", "ticket_created"
- details: jsonb (nullable)
- ip_address: text (nullable)
- user_agent: text (nullable)
- created_at: timestamp (default: now())
"""
