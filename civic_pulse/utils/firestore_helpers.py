"""
Firestore query helpers.

Uses the keyword filter API so queries do not emit positional-argument
deprecation warnings.
"""

from google.cloud.firestore_v1.base_query import FieldFilter


def where_filter(query, field_path: str, op_string: str, value):
    """
    Usage:
        query = where_filter(collection, "category", "==", "Water Supply")
        query = where_filter(query, "created_at", ">=", cutoff)
    """
    return query.where(filter=FieldFilter(field_path, op_string, value))
