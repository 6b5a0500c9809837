# ==============================================
# TypeDetector
# ==============================================
#
# PURPOSE:
#   Classify a raw document value into one of a small, closed set
#   of shape categories (TypeTag), and build hashable identity keys
#   so values can be compared by deep value equality.
#
# WHY THIS CLASS EXISTS:
#   Documents sampled from MongoDB carry Python builtins plus BSON
#   scalars (ObjectId, Decimal128, Binary, datetime ...). The inference
#   engine needs one coarse tag per value, and the detector needs to
#   know whether a value is a simple comparable scalar.
#
# ENUM: TypeTag
# -------------
#   null, boolean, number, string, array, object, date, binary, undefined
#
# CLASS: TypeDetector
# -------------------
#   Stateless, all classmethods.
#
#   - detect(value=MISSING) -> TypeTag
#       Pure and total. Anything not recognised falls back to OBJECT.
#
#   - value_key(value) -> Hashable
#       Structural identity key. Two values share a key iff they are
#       equal by value. Booleans never collide with numbers.
#
# ==============================================

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Hashable

from bson.binary import Binary
from bson.decimal128 import Decimal128
from bson.int64 import Int64


class _Missing:
    """Sentinel for a field that is absent from a document."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


class TypeTag(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    DATE = "date"
    BINARY = "binary"
    UNDEFINED = "undefined"

    @property
    def is_scalar(self) -> bool:
        """True for simple comparable values that can act as a discriminator."""
        return self in (TypeTag.BOOLEAN, TypeTag.NUMBER, TypeTag.STRING)


class TypeDetector:
    NUMBER_TYPES = (int, float, Decimal, Decimal128, Int64)
    DATE_TYPES = (datetime.datetime, datetime.date)
    BINARY_TYPES = (bytes, bytearray, Binary)

    @classmethod
    def detect(cls, value: Any = MISSING) -> TypeTag:
        if value is MISSING:
            return TypeTag.UNDEFINED

        if value is None:
            return TypeTag.NULL

        # bool must be checked before int
        if isinstance(value, bool):
            return TypeTag.BOOLEAN

        if isinstance(value, cls.NUMBER_TYPES):
            return TypeTag.NUMBER

        if isinstance(value, str):
            return TypeTag.STRING

        if isinstance(value, (list, tuple)):
            return TypeTag.ARRAY

        if isinstance(value, cls.DATE_TYPES):
            return TypeTag.DATE

        if isinstance(value, cls.BINARY_TYPES):
            return TypeTag.BINARY

        return TypeTag.OBJECT

    @classmethod
    def value_key(cls, value: Any) -> Hashable:
        """
        Build a hashable key that identifies a value by its contents.

        Examples:
            value_key(1) == value_key(1.0)
            value_key(True) != value_key(1)
            value_key({"a": [1, 2]}) == value_key({"a": [1, 2]})

        Args:
            value: Any document value (possibly nested)

        Returns:
            A hashable key usable for set membership and grouping
        """
        tag = cls.detect(value)

        if tag is TypeTag.ARRAY:
            return (tag.value, tuple(cls.value_key(item) for item in value))

        if tag is TypeTag.OBJECT and isinstance(value, dict):
            items = [(str(k), cls.value_key(v)) for k, v in value.items()]
            return (tag.value, tuple(sorted(items, key=lambda item: item[0])))

        if tag is TypeTag.NUMBER and isinstance(value, (Decimal, Decimal128)):
            number = value.to_decimal() if isinstance(value, Decimal128) else value
            if number.is_nan():
                # NaN never equals itself and a signaling NaN cannot be hashed
                return (tag.value, "nan", str(number))
            return (tag.value, number)

        if tag is TypeTag.BINARY:
            return (tag.value, bytes(value))

        try:
            hash(value)
        except TypeError:
            # Unhashable custom object, fall back to its text form
            return (tag.value, type(value).__name__, repr(value))
        return (tag.value, value)
