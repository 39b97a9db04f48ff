"""
Source implementations package, one module per upstream platform.
"""

from storefront.adapters.implementations.fourthwall import FourthwallSource
from storefront.adapters.implementations.gumroad import GumroadSource
from storefront.adapters.implementations.lemonsqueezy import LemonSqueezySource
from storefront.adapters.implementations.patreon import PatreonSource

__all__ = [
    "FourthwallSource",
    "GumroadSource",
    "LemonSqueezySource",
    "PatreonSource",
]
