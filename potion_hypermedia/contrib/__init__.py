from .hal import HalExtension
from .siren import SirenExtension
from .collection_json import CollectionJsonExtension, CollectionJsonItemExtension

__all__ = (
    'HalExtension',
    'SirenExtension',
    'CollectionJsonExtension',
    'CollectionJsonItemExtension',
)
