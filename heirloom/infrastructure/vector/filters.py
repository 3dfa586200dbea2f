"""
Metadata predicate language shared by the vector index adapters.

Pinecone-style operators: $and, $or, $eq, $ne, $in, $nin, $gt, $gte,
$lt, $lte, $exists. A bare value is shorthand for $eq.
"""

from typing import Any

from heirloom.core.entities import FilterExpression

CONTENT_TYPE_FIELD = "contentType"
TAGS_FIELD = "tags"


def translate_filter(
    expression: FilterExpression,
    timestamp_field: str = "timestamp",
) -> dict[str, Any]:
    """
    Render a FilterExpression as a metadata predicate.

    Clause order is fixed (visibility, content type, tags, time range)
    and set members are sorted, so equal expressions render identically.
    """
    clauses: list[dict[str, Any]] = []

    if expression.visibility:
        clauses.append(expression.visibility)

    if expression.content_types:
        clauses.append({CONTENT_TYPE_FIELD: {"$in": sorted(expression.content_types)}})

    if expression.tags_any:
        clauses.append({TAGS_FIELD: {"$in": sorted(expression.tags_any)}})

    if expression.time_start is not None or expression.time_end is not None:
        bounds: dict[str, float] = {}
        if expression.time_start is not None:
            bounds["$gte"] = expression.time_start
        if expression.time_end is not None:
            bounds["$lte"] = expression.time_end
        clauses.append({timestamp_field: bounds})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _compare(value: Any, op: str, operand: Any) -> bool:
    # List-valued metadata matches when any element satisfies the operator
    if isinstance(value, list) and op in ("$eq", "$in"):
        return any(_compare(v, op, operand) for v in value)
    if isinstance(value, list) and op in ("$ne", "$nin"):
        return all(_compare(v, op, operand) for v in value)

    if op == "$eq":
        return value == operand
    if op == "$ne":
        return value != operand
    if op == "$in":
        return value in operand
    if op == "$nin":
        return value not in operand

    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if op == "$gt":
        return value > operand
    if op == "$gte":
        return value >= operand
    if op == "$lt":
        return value < operand
    if op == "$lte":
        return value <= operand

    raise ValueError(f"Unsupported filter operator: {op}")


def _matches_field(metadata: dict[str, Any], field: str, condition: Any) -> bool:
    if not isinstance(condition, dict):
        condition = {"$eq": condition}

    for op, operand in condition.items():
        if op == "$exists":
            if (field in metadata) != bool(operand):
                return False
            continue
        if field not in metadata:
            if op in ("$ne", "$nin"):
                continue
            return False
        if not _compare(metadata[field], op, operand):
            return False

    return True


def matches_filter(metadata: dict[str, Any], predicate: dict[str, Any]) -> bool:
    """Evaluate a metadata predicate against one record's metadata."""
    for key, condition in predicate.items():
        if key == "$and":
            if not all(matches_filter(metadata, clause) for clause in condition):
                return False
        elif key == "$or":
            if not any(matches_filter(metadata, clause) for clause in condition):
                return False
        elif key.startswith("$"):
            raise ValueError(f"Unsupported filter operator: {key}")
        elif not _matches_field(metadata, key, condition):
            return False

    return True
