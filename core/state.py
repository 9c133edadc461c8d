import json
import logging
import os
from typing import Any, Dict, List

import streamlit as st

from unitgrid.models import Bank

logger = logging.getLogger(__name__)

SESSION_FILE = "session_data.json"

# Only persist a curated subset of ``st.session_state`` keys. Widgets inject
# their own keys (e.g. ``toggle_floor_btn``) into ``session_state`` and
# assigning to those on the next run raises ``StreamlitAPIException``.  The
# open targeting session is deliberately absent: a cancelled edit must not
# survive a reload.
PERSISTED_KEYS = {
    "banks",
    "active_bank_id",
    "active_program_id",
    "ui_prefs",
}


def _serializable(value: Any) -> bool:
    return isinstance(value, (int, float, str, bool, list, dict))


def load_state() -> None:
    """Restore Streamlit session state from ``SESSION_FILE`` if it exists."""
    if not os.path.exists(SESSION_FILE):
        return
    try:
        with open(SESSION_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s: %s", SESSION_FILE, exc)
        return
    for key, val in data.items():
        if key in PERSISTED_KEYS:
            st.session_state.setdefault(key, val)


def save_state() -> None:
    """Persist serializable session state to ``SESSION_FILE``."""
    data = {
        k: v
        for k, v in st.session_state.items()
        if k in PERSISTED_KEYS and _serializable(v)
    }
    try:
        with open(SESSION_FILE, "w", encoding="utf-8") as f:
            json.dump(data, f)
    except (OSError, TypeError) as exc:
        logger.warning("Could not write %s: %s", SESSION_FILE, exc)


def get_banks() -> List[Bank]:
    return [Bank.model_validate(b) for b in st.session_state.get("banks", [])]


def put_bank(bank: Bank) -> None:
    """Insert or replace ``bank`` in the persisted bank list."""
    banks: List[Dict[str, Any]] = list(st.session_state.get("banks", []))
    payload = bank.model_dump()
    for i, existing in enumerate(banks):
        if existing.get("id") == bank.id:
            banks[i] = payload
            break
    else:
        banks.append(payload)
    st.session_state["banks"] = banks
