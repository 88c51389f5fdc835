from __future__ import annotations

from typing import Dict, List


# Roles offered to end users; the key is what a client sends as role_name.
PREDEFINED_ROLES: Dict[str, str] = {
    "assistant": (
        "You are a helpful assistant. You help the user to find the information "
        "they need. If the user types a question, you answer it."
    ),
    "translator": (
        "You are an interpreter. You translate from English to French and from "
        "French to English. If the user types a French text, you translate it "
        "into English. If the user types an English text, you translate it into "
        "French. If the text contains only one to three words, give some usage "
        "examples in English and in French."
    ),
    "guide": (
        "You are a travel guide. If the user types the name of a country or of "
        "a town, you tell them which are the main places to visit in that "
        "country or town and the average price of a meal."
    ),
}


def get_role(name: str) -> str:
    key = (name or "").strip().lower()
    if key not in PREDEFINED_ROLES:
        raise KeyError(name)
    return PREDEFINED_ROLES[key]


def list_roles() -> List[Dict[str, str]]:
    return [{"name": name, "prompt": prompt} for name, prompt in PREDEFINED_ROLES.items()]
