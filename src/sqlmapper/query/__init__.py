"""
Statement builder used by gateways.
"""

from .statements import Delete, Insert, QueryFactory, Select, Statement, Update, is_sequence_value, row_to_dict

__all__ = [
    "Delete",
    "Insert",
    "QueryFactory",
    "Select",
    "Statement",
    "Update",
    "is_sequence_value",
    "row_to_dict",
]
