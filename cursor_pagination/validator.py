from collections.abc import Mapping

from pydantic import BaseModel


def has_from_attributes(schema: type[BaseModel]) -> bool:
    conf = getattr(schema, 'model_config', None)
    if conf is None:
        return False
    if isinstance(conf, Mapping):
        return bool(conf.get('from_attributes', False))
    return bool(getattr(conf, 'from_attributes', False))


def validate_mapping_schema(schema: type[BaseModel]) -> None:
    """Window items are converted with `schema.model_validate(row)`, which needs from_attributes."""
    if not isinstance(schema, type) or not issubclass(schema, BaseModel):
        raise TypeError('mapping_schema must be a subclass of pydantic.BaseModel.')
    if not has_from_attributes(schema):
        raise TypeError('mapping_schema.model_config.from_attributes must be set to True.')
