"""
In-memory provider pool and customer directory.

In production, these would query the provider_profiles and
customer_profiles tables joined with the users table.
"""

import logging
from typing import Iterable, Optional

from cleanconnect.schemas.customer_schema import Customer
from cleanconnect.schemas.provider_schema import ProviderCandidate

logger = logging.getLogger(__name__)


class InMemoryProviderPool:
    """Holds provider projections; returns the verified and active ones."""

    def __init__(self, providers: Optional[Iterable[ProviderCandidate]] = None) -> None:
        self._providers: dict[str, ProviderCandidate] = {
            p.provider_id: p for p in (providers or [])
        }

    async def get_verified_active_providers(self) -> list[ProviderCandidate]:
        return [p for p in self._providers.values() if p.is_eligible]

    def get_provider(self, provider_id: str) -> Optional[ProviderCandidate]:
        return self._providers.get(provider_id)

    def upsert_provider(self, provider: ProviderCandidate) -> None:
        self._providers[provider.provider_id] = provider
        logger.debug("Provider stored: %s", provider.provider_id)


class InMemoryCustomerDirectory:
    def __init__(self, customers: Optional[Iterable[Customer]] = None) -> None:
        self._customers: dict[str, Customer] = {
            c.customer_id: c for c in (customers or [])
        }

    async def get_customer(self, customer_id: str) -> Optional[Customer]:
        """Look up a customer by id. Returns None if not found."""
        return self._customers.get(customer_id)

    def add_customer(self, customer: Customer) -> None:
        self._customers[customer.customer_id] = customer
