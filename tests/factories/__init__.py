"""
Test factories for generating realistic test data.

Uses factory_boy for declarative test data generation.
"""

from .customer import CustomerSnapshotFactory
from .estimate import BedroomFactory, RoomsFactory, EstimatePayloadFactory
from .invoice import LineItemFactory, InvoicePayloadFactory
from .employee import EmployeeFactory, ManagerFactory

__all__ = [
    "CustomerSnapshotFactory",
    "BedroomFactory",
    "RoomsFactory",
    "EstimatePayloadFactory",
    "LineItemFactory",
    "InvoicePayloadFactory",
    "EmployeeFactory",
    "ManagerFactory",
]
