"""
Customer snapshot test factory.

Generates the customer block that estimates and invoices carry.
"""

import factory
from faker import Faker

fake = Faker()


class CustomerSnapshotFactory(factory.Factory):
    """
    Factory for customer snapshot payloads.

    Usage:
        customer = CustomerSnapshotFactory()
        customer = CustomerSnapshotFactory(name="Jordan Lee")
    """

    class Meta:
        model = dict

    name = factory.LazyFunction(fake.name)
    phone = factory.LazyFunction(lambda: fake.numerify("05########"))
    email = factory.LazyFunction(lambda: fake.unique.email().lower())
    job_address = factory.LazyFunction(lambda: f"{fake.street_address()}, {fake.city()}")
