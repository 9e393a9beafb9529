"""Cache key derivation for endpoint templates."""

import hashlib
import logging
from typing import Optional

logger = logging.getLogger(__name__)

KEY_DELIMITER = ":"


def derive_cache_key(imagery_set: str, credential: str) -> str:
    """Derive the store key for an (imagery set, credential) pair.

    The credential is reduced to its SHA-1 hex digest so the raw key never
    reaches the store and the key length stays bounded.

    Args:
        imagery_set: Imagery set identifier (e.g. "Aerial", "Road")
        credential: Provider API key

    Returns:
        Key of the form ``{imagery_set}:{sha1(credential)}``
    """
    digest = hashlib.sha1(credential.encode("utf-8")).hexdigest()
    return f"{imagery_set}{KEY_DELIMITER}{digest}"


class TemplateKeyGenerator:
    """Generate namespaced cache keys for endpoint templates.

    Keys are laid out as ``namespace:imagery_set:digest`` so a store shared
    with other applications can be scanned or invalidated per namespace.
    """

    def __init__(self, namespace: Optional[str] = None):
        """Initialize key generator.

        Args:
            namespace: Application namespace prepended to every key (optional)
        """
        self.namespace = namespace

    def from_credential(self, imagery_set: str, credential: str) -> str:
        """Generate the cache key for an imagery set and credential."""
        cache_key = derive_cache_key(imagery_set, credential)
        if self.namespace:
            cache_key = f"{self.namespace}{KEY_DELIMITER}{cache_key}"

        logger.debug(f"Generated cache key: {cache_key}")
        return cache_key
