from repairshop.store.base import OrderStore, OrderWriteResult, StoreError
from repairshop.store.memory import InMemoryOrderStore
from repairshop.store.supabase import SupabaseOrderStore

__all__ = [
    "OrderStore",
    "OrderWriteResult",
    "StoreError",
    "InMemoryOrderStore",
    "SupabaseOrderStore",
]
