"""
Mapping layer: gateways, mappers and their collaborators.
"""

from .accessors import AttributeAccessor, FieldAccessor, MappingAccessor
from .changes import is_numeric, row_data, values_equal
from .factory import EntityFactory, Record
from .filters import EntityFilter, NullFilter, RequiredFieldsFilter
from .gateway import Gateway, WriteResult
from .locator import MapperFactory, MapperLocator
from .mapper import Mapper

__all__ = [
    "AttributeAccessor",
    "EntityFactory",
    "EntityFilter",
    "FieldAccessor",
    "Gateway",
    "Mapper",
    "MapperFactory",
    "MapperLocator",
    "MappingAccessor",
    "NullFilter",
    "Record",
    "RequiredFieldsFilter",
    "WriteResult",
    "is_numeric",
    "row_data",
    "values_equal",
]
