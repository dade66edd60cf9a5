"""Cancellation parts; prefer ``knowlex_providers.base.cancellation``."""
