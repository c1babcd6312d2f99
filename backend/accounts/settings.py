"""Account engine settings read from ACCOUNTS_* environment variables."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from accounts.models import DEFAULT_PRODUCT


class AccountsSettings(BaseSettings):
    model_config = {"env_prefix": "ACCOUNTS_"}

    # "file" keeps accounts in a JSON file shared by every process using it,
    # "memory" keeps them for the life of the process only.
    storage_backend: Literal["file", "memory"] = "file"
    storage_path: str = Field(default="backend/data/storage.json", min_length=1)

    # "plain" stores raw passwords (demo behaviour); "bcrypt" hashes them.
    password_hasher: Literal["plain", "bcrypt"] = "plain"

    # Product name attached to every redeemed key
    product_name: str = Field(default=DEFAULT_PRODUCT, min_length=1)

    # Directory for a datetime-stamped log file; stdout only when unset
    log_dir: str | None = None
