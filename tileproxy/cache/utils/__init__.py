"""Cache utilities."""

from .keys import KEY_DELIMITER, TemplateKeyGenerator, derive_cache_key

__all__ = ["KEY_DELIMITER", "TemplateKeyGenerator", "derive_cache_key"]
