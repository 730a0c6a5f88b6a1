from keystore.base import KeystoreBase
from keystore.keystore import DEFAULT_KEYSTORE_TYPE, InMemoryKeystore
from keystore.password import check_password_change
from keystore.state import KeystoreState
from keystore.types import KeystoreType, keystore_type_of, normalize_alias

__all__ = [
    "DEFAULT_KEYSTORE_TYPE",
    "KeystoreBase",
    "InMemoryKeystore",
    "KeystoreState",
    "KeystoreType",
    "check_password_change",
    "keystore_type_of",
    "normalize_alias",
]
