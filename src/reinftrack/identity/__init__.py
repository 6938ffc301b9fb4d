"""Identity layer: credentials and bearer tokens."""

from reinftrack.identity.base import IdentityProvider
from reinftrack.identity.factories import create_identity_provider
from reinftrack.identity.local import LocalIdentityProvider

__all__ = ["IdentityProvider", "LocalIdentityProvider", "create_identity_provider"]
