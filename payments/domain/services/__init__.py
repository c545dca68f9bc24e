# payments/domain/services/__init__.py
"""Pure domain services: reference tables, validation, invoice routing, webhooks."""
