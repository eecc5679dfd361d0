# Table: credit_purchases
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected table structure:

credit_purchases:
- id: bigint identity (primary key)
- payment_intent_id: text (not null, unique) - Stripe PaymentIntent id; makes confirmation idempotent
- user_id: bigint (not null, references users.id)
- credits: integer (not null)
- amount: integer (not null) - charged amount in the currency's minor unit
- currency: text (not null)
- created_at: timestamp (default: now())
"""
