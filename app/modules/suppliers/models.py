# Table: suppliers
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

suppliers (public directory curated by admins):
- id: bigint identity (primary key)
- name: text (not null)
- description: text (not null)
- product_type: text (not null)
- country: text (not null)
- website: text (nullable)
- logo: text (nullable)
- is_verified: boolean (not null, default: false)
- discount_info: text (nullable)
- created_at: timestamp (default: now())
"""
