# Tables: tickets, ticket_messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

tickets:
- id: bigint identity (primary key)
- user_id: bigint (not null, references users.id) - the ticket owner
- title: text (not null)
- category: text (not null) - e.g. course question, technical problem, billing, suggestion
- description: text (not null)
- status: text (not null, default: 'open') - open, in_progress, responded, closed
- priority: text (not null, default: 'normal') - low, normal, high, urgent
- assigned_to: bigint (nullable, references users.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

ticket_messages:
- id: bigint identity (primary key)
- ticket_id: bigint (not null, references tickets.id)
- user_id: bigint (not null, references users.id)
- message: text (not null)
- is_internal: boolean (not null, default: false) - support-only notes
- created_at: timestamp (default: now())
"""
