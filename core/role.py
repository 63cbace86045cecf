# core/role.py
from enum import Enum


# Role names used by the storefront's auth layer
_ROLE_ALIASES = {
    "portal": "customer",
    "internal": "admin",
}


class Role(str, Enum):
    """
    Who is talking to the assistant. Privilege grows customer < vendor < admin.
    """

    CUSTOMER = "customer"
    VENDOR = "vendor"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: object) -> "Role":
        """
        Resolve a role from a resolved auth role or an alias.
        Unknown or missing roles get the least privilege.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.CUSTOMER
        key = value.strip().lower()
        key = _ROLE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.CUSTOMER
