# payments/infrastructure/external/__init__.py
"""HTTP clients for the invoicing (iFirma) and payment (Stripe) providers."""
