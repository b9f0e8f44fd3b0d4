"""
Estimate test factories.

Room sets and create-estimate payloads.
"""

import factory
from faker import Faker
from datetime import date, timedelta

from .customer import CustomerSnapshotFactory

fake = Faker()


class BedroomFactory(factory.Factory):
    class Meta:
        model = dict

    beds = factory.LazyFunction(lambda: fake.random_int(min=1, max=6))


class RoomsFactory(factory.Factory):
    """
    Factory for room configurations.

    Usage:
        rooms = RoomsFactory()
        rooms = RoomsFactory(kitchen_qty=2, bedrooms=[{"beds": 3}])
    """

    class Meta:
        model = dict

    kitchen_qty = factory.LazyFunction(lambda: fake.random_int(min=0, max=1))
    dining_room_qty = factory.LazyFunction(lambda: fake.random_int(min=0, max=1))
    living_room_qty = factory.LazyFunction(lambda: fake.random_int(min=0, max=1))
    bathrooms_qty = factory.LazyFunction(lambda: fake.random_int(min=0, max=3))
    master_bathrooms_qty = factory.LazyFunction(lambda: fake.random_int(min=0, max=1))

    @factory.lazy_attribute
    def bedrooms(self):
        return [BedroomFactory() for _ in range(fake.random_int(min=0, max=4))]


class EstimatePayloadFactory(factory.Factory):
    """
    Factory for POST /estimates/ bodies.

    Usage:
        payload = EstimatePayloadFactory()
        payload = EstimatePayloadFactory(customer={"name": "Riley Cohen", ...})
    """

    class Meta:
        model = dict

    customer = factory.LazyFunction(CustomerSnapshotFactory)
    rooms = factory.LazyFunction(RoomsFactory)
    notes = None

    @factory.lazy_attribute
    def moving_date(self):
        return (date.today() + timedelta(days=fake.random_int(min=3, max=30))).isoformat()
