"""DynamoDB type conversion utilities.

DynamoDB stores every number as Decimal and rejects Python floats. Response
maps and field validation rules carry ints and floats, so items are
converted on the way in and out of a table.
"""

from decimal import Decimal
from typing import Any


def decimal_to_python(obj: Any) -> Any:
    """
    Recursively convert Decimal values back to int or float.

    Whole numbers come back as int so a stored rating of 5 stays 5, not 5.0.
    """
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    if isinstance(obj, dict):
        return {key: decimal_to_python(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [decimal_to_python(item) for item in obj]
    return obj


def python_to_decimal(obj: Any) -> Any:
    """
    Recursively convert int and float values to Decimal.

    Booleans are left alone (bool is an int subclass) so toggle answers
    round-trip as booleans.
    """
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, float):
        # Via str to avoid binary float artefacts such as 0.1 -> 0.1000000000000000055
        return Decimal(str(obj))
    if isinstance(obj, int):
        return Decimal(obj)
    if isinstance(obj, dict):
        return {key: python_to_decimal(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [python_to_decimal(item) for item in obj]
    return obj


def prepare_for_dynamodb(item: dict[str, Any]) -> dict[str, Any]:
    """Prepare a dictionary for put_item, dropping None values."""
    return python_to_decimal({k: v for k, v in item.items() if v is not None})


def parse_from_dynamodb(item: dict[str, Any]) -> dict[str, Any]:
    """Parse a DynamoDB item to Python-native types."""
    return decimal_to_python(item)


def parse_items_from_dynamodb(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Parse a list of DynamoDB items to Python-native types."""
    return [parse_from_dynamodb(item) for item in items]
