from .json_store import COLLECTIONS, JsonStore, StoreDocument

__all__ = ['COLLECTIONS', 'JsonStore', 'StoreDocument']
