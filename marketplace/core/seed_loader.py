import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from marketplace.core.config import settings
from marketplace.core.logger import logger
from marketplace.models.domain import Merchant, User, Role

BUNDLED_SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def resolve_seed_path(path: Optional[str] = None) -> Path:
    """SEED_DATA_PATH wins over the bundled file when set."""
    chosen = path or settings.SEED_DATA_PATH
    return Path(chosen) if chosen else BUNDLED_SEED_PATH


def load_seed_file(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads the raw seed document (merchants + users) from JSON.
    Raises FileNotFoundError if the file is missing, ValueError on bad JSON.
    """
    seed_path = resolve_seed_path(path)
    if not os.path.exists(seed_path):
        logger.critical(f"❌ Seed file '{seed_path}' not found, cannot start the directory.")
        raise FileNotFoundError(f"Seed file not found at {seed_path}")

    try:
        with open(seed_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.critical(f"❌ Invalid JSON in seed file {seed_path}: {e}")
        raise ValueError(f"Invalid JSON in seed file: {e}")

    logger.info(f"✅ Seed loaded from {seed_path}")
    return data


def parse_seed(data: Dict[str, Any]) -> Tuple[List[Merchant], List[User]]:
    """
    Validates the raw seed into models.
    A Merchant-role user must point at a seeded merchant; other roles must not
    carry a merchantId.
    """
    try:
        merchants = [Merchant.model_validate(m) for m in data.get("merchants", [])]
        users = [User.model_validate(u) for u in data.get("users", [])]
    except SchemaError as e:
        logger.critical(f"❌ Seed records failed validation: {e}")
        raise ValueError(f"Invalid seed records: {e}")

    merchant_ids = [m.id for m in merchants]
    if len(set(merchant_ids)) != len(merchant_ids):
        raise ValueError("Duplicate merchant id in seed data")
    user_ids = [u.id for u in users]
    if len(set(user_ids)) != len(user_ids):
        raise ValueError("Duplicate user id in seed data")

    for user in users:
        if user.role == Role.MERCHANT:
            if user.merchant_id not in merchant_ids:
                raise ValueError(f"User {user.id} references unknown merchant {user.merchant_id!r}")
        elif user.merchant_id is not None:
            raise ValueError(f"User {user.id} has role {user.role.value} but carries a merchantId")

    return merchants, users


def load_seed(path: Optional[str] = None) -> Tuple[List[Merchant], List[User]]:
    return parse_seed(load_seed_file(path))
