# Table: templates
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

templates (ready-made message templates students copy and adapt):
- id: bigint identity (primary key)
- title: text (not null)
- category: text (not null) - e.g. suppliers, Amazon, tools, negotiation, marketing
- purpose: text (not null) - short description shown in listings
- usage_instructions: text (not null) - when and how to use the template
- content: text (not null) - template body with [PLACEHOLDER] variables
- variable_tips: text (nullable) - hints about the placeholders
- status: text (not null, default: 'published') - published, draft
- copy_count: integer (not null, default: 0)
- language: text (not null, default: 'pt')
- tags: text[] (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
