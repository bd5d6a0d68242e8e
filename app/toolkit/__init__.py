"""
Toolkit - Shared services and helpers.

Key components:
    - services/email.py: EmailService (template emails)
    - helpers.py: PII helpers (mask_email)

Note:
    This app has no models. For model-layer and service-layer base
    classes, see core/.
"""
