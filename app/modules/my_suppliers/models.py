# Tables: my_suppliers, my_supplier_branches, my_supplier_contacts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure (a personal supplier CRM; every row is owned by one user):

my_suppliers:
- id: bigint identity (primary key)
- user_id: bigint (not null, references users.id)
- name: text (not null)
- email, phone, website, notes: text (nullable)
- created_at: timestamp (default: now())

my_supplier_branches:
- id, my_supplier_id (not null, references my_suppliers.id)
- name (not null), address, city, state, country, phone, email

my_supplier_contacts:
- id, my_supplier_id (references my_suppliers.id)
- branch_id (nullable, references my_supplier_branches.id)
- name (not null), position, email, phone, whatsapp

Branches and contacts carry no user_id; ownership is checked through the parent row.
"""
