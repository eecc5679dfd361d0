# Table: products
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

products (owned by one user):
- id: bigint identity (primary key)
- user_id: bigint (not null, references users.id)
- name: text (not null)
- description, asin, sku, image: text (nullable)
- cost_price, sale_price: numeric(10,2) (nullable)
- fba_fee, fbm_fee, dba_fee: numeric(10,2) (nullable) - marketplace fulfilment fees
- commission, taxes, prep_center_fee: numeric(10,2) (nullable)
- custom_costs: jsonb (nullable) - [{"name": str, "value": number, "type": "fixed" | "percentage"}]
- created_at: timestamp (default: now())

total_cost, profit and margin are not stored; they are computed for every response.
Only fba_fee counts towards total_cost (FBA is the default fulfilment channel); percentage
custom costs are taken from the sale price.
"""
