"""Model parts package; prefer ``knowlex_providers.base.models``."""
