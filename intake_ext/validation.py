import re
from typing import Any, Dict, Optional, Tuple

from intake_ext.errors import ValidationError

SUBMITTER_ID_RE = re.compile(r"[0-9]{17,20}")

CUSTOM_BUDGET = "Custom — DM me"
CUSTOM_BUDGET_DISPLAY = "Custom (to discuss)"

# keys match the "Server Type" options on the website form
CATEGORY_META: Dict[str, Dict[str, str]] = {
    "ERLC / Roblox RP":  {"emoji": "🚔"},
    "Gaming Community":  {"emoji": "🎮"},
    "Study / Education": {"emoji": "📚"},
    "Business / Brand":  {"emoji": "💼"},
    "General Community": {"emoji": "🌐"},
    "Other":             {"emoji": "❓"},
}
DEFAULT_CATEGORY_META = {"emoji": "📥"}

# website camelCase -> stored field
FIELD_ALIASES = {
    "discordUsername": "submitter_name",
    "clientDiscordId": "submitter_id",
    "serverName": "subject_name",
    "serverInvite": "subject_reference",
    "serverType": "category",
    "paymentMethod": "payment_method",
    "projectDetails": "details",
}

INQUIRY_REQUIRED = ("submitter_name", "submitter_id", "subject_name", "category",
                    "budget", "payment_method", "details")
CONTACT_REQUIRED = ("submitter_name", "submitter_id", "message")


def category_meta(category: str) -> Dict[str, str]:
    return CATEGORY_META.get(category, DEFAULT_CATEGORY_META)


def is_valid_submitter_id(value: Any) -> bool:
    return bool(value) and bool(SUBMITTER_ID_RE.fullmatch(str(value)))


def is_custom_budget(budget: str) -> bool:
    return budget in (CUSTOM_BUDGET, CUSTOM_BUDGET_DISPLAY)


def normalize_payload(payload: Dict[str, Any]) -> Dict[str, Optional[str]]:
    out: Dict[str, Optional[str]] = {}
    for key, value in (payload or {}).items():
        name = FIELD_ALIASES.get(key, key)
        if value is None:
            out.setdefault(name, None)
            continue
        out[name] = str(value).strip()
    return out


def _require(fields: Dict[str, Optional[str]], required: Tuple[str, ...]) -> None:
    missing = [k for k in required if not fields.get(k)]
    if missing:
        raise ValidationError(
            "Missing required fields. Please fill in all required inputs: " + ", ".join(missing),
            code="missing_field",
        )
    if not is_valid_submitter_id(fields["submitter_id"]):
        raise ValidationError(
            "Invalid Discord ID. Must be 17–20 digits. Enable Developer Mode in Discord "
            "Settings > Advanced to copy your ID.",
            code="invalid_identifier",
        )


def validate_inquiry(payload: Dict[str, Any]) -> Dict[str, Optional[str]]:
    fields = normalize_payload(payload)
    _require(fields, INQUIRY_REQUIRED)
    budget = fields["budget"]
    return {
        "submitter_name": fields["submitter_name"],
        "submitter_id": fields["submitter_id"],
        "subject_name": fields["subject_name"],
        "subject_reference": fields.get("subject_reference") or None,
        "category": fields["category"],
        "budget": CUSTOM_BUDGET_DISPLAY if is_custom_budget(budget) else budget,
        "payment_method": fields["payment_method"],
        "details": fields["details"],
    }


def validate_contact(payload: Dict[str, Any]) -> Dict[str, str]:
    fields = normalize_payload(payload)
    _require(fields, CONTACT_REQUIRED)
    return {k: fields[k] for k in CONTACT_REQUIRED}
