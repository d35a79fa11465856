from cdt_express.schemas.fields import (
    ArrayField,
    AtLeastOneOf,
    EnumField,
    FieldSchema,
    NumberField,
    RequiredWhen,
    StringField,
    ValidatedInput,
    validate_input,
)

__all__ = [
    "ArrayField",
    "AtLeastOneOf",
    "EnumField",
    "FieldSchema",
    "NumberField",
    "RequiredWhen",
    "StringField",
    "ValidatedInput",
    "validate_input",
]
