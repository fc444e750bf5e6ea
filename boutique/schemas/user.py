# boutique/schemas/user.py
import uuid

from sqlmodel import SQLModel


class AuthUser(SQLModel):
    """
    Identity resolved from a Supabase access token.

    Profiles live in Supabase Auth; the shop keeps no users table of its own.
    Carts and orders are keyed by `id`, notifications go to `email`.
    """

    id: uuid.UUID
    email: str
    name: str
    is_admin: bool = False
