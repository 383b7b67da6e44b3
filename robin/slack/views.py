"""
Slack Views
===========

Block Kit payloads for the App Home tab and the two modals.

IDs used by the handlers:
- Home buttons:      view_knowledge_bank, start_discussion
- Setup modal:       knowledge_bank_modal
    blocks/actions:  ai_assistant_name/name, links/links,
                     additional_info/additional_info
- Discussion modal:  discussion_modal
    blocks/actions:  users/users, message/message
"""

from typing import Any

SETUP_ACTION_ID = "view_knowledge_bank"
DISCUSSION_ACTION_ID = "start_discussion"
SETUP_MODAL_ID = "knowledge_bank_modal"
DISCUSSION_MODAL_ID = "discussion_modal"


def _plain(text: str, emoji: bool = True) -> dict:
    return {"type": "plain_text", "text": text, "emoji": emoji}


def _section(markdown: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": markdown}}


def _divider() -> dict:
    return {"type": "divider"}


def _button(text: str, action_id: str) -> dict:
    return {
        "type": "actions",
        "elements": [
            {
                "type": "button",
                "text": _plain(text),
                "style": "primary",
                "action_id": action_id,
            }
        ],
    }


def _text_input(
    block_id: str,
    action_id: str,
    label: str,
    placeholder: str,
    initial_value: str = "",
    multiline: bool = False
) -> dict:
    element: dict[str, Any] = {
        "type": "plain_text_input",
        "action_id": action_id,
        "placeholder": {"type": "plain_text", "text": placeholder},
    }
    if multiline:
        element["multiline"] = True
    if initial_value:
        element["initial_value"] = initial_value

    return {
        "type": "input",
        "block_id": block_id,
        "element": element,
        "label": _plain(label),
    }


def home_view() -> dict:
    """App Home tab with the setup and discussion buttons."""
    return {
        "type": "home",
        "blocks": [
            {"type": "header", "text": _plain("Setup your AI Assistant!")},
            _divider(),
            _section("Click on the button below to help us train your AI Assistant."),
            _button("Let's get started!", SETUP_ACTION_ID),
            _divider(),
            _section("Start a discussion with your team members."),
            _button("Start Discussion", DISCUSSION_ACTION_ID),
        ],
    }


def knowledge_modal(existing: dict | None = None) -> dict:
    """
    Setup form for a user's AI assistant.

    Args:
        existing: The user's stored record, used to prefill the inputs
    """
    existing = existing or {}

    return {
        "type": "modal",
        "callback_id": SETUP_MODAL_ID,
        "title": _plain("Setup your AI Assistant"),
        "submit": _plain("Save"),
        "close": _plain("Close"),
        "blocks": [
            _section("Help us train your AI Assistant by providing some information about yourself."),
            _divider(),
            _text_input(
                "ai_assistant_name", "name",
                label="What would you like to call your AI Assistant?",
                placeholder="Robin",
                initial_value=existing.get("assistant_name") or "",
            ),
            _text_input(
                "links", "links",
                label="Add any links or documents that will help us know you better",
                placeholder="Paste your links here",
                initial_value=existing.get("links") or "",
                multiline=True,
            ),
            _text_input(
                "additional_info", "additional_info",
                label="Add any additional information that will help us train your AI Assistant",
                placeholder="Write anything noteworthy about yourself",
                initial_value=existing.get("additional_info") or "",
                multiline=True,
            ),
        ],
    }


def discussion_modal() -> dict:
    """Form for picking discussion participants and an agenda."""
    return {
        "type": "modal",
        "callback_id": DISCUSSION_MODAL_ID,
        "title": _plain("Start a Discussion"),
        "submit": _plain("Start Discussion"),
        "close": _plain("Cancel"),
        "blocks": [
            _section("Select users to include in the discussion and enter your agenda."),
            _divider(),
            {
                "type": "input",
                "block_id": "users",
                "element": {
                    "type": "multi_users_select",
                    "action_id": "users",
                    "placeholder": _plain("Select users"),
                },
                "label": _plain("Select Users"),
            },
            _text_input(
                "message", "message",
                label="Agenda",
                placeholder="Enter your agenda in the form of a list here",
                multiline=True,
            ),
        ],
    }


def read_knowledge_submission(view: dict) -> dict[str, str]:
    """Extract the setup form values from a view_submission payload."""
    values = view["state"]["values"]
    return {
        "assistant_name": values["ai_assistant_name"]["name"].get("value") or "",
        "links": values["links"]["links"].get("value") or "",
        "additional_info": values["additional_info"]["additional_info"].get("value") or "",
    }


def read_discussion_submission(view: dict) -> tuple[list[str], str]:
    """Extract (selected user IDs, agenda) from a discussion submission."""
    values = view["state"]["values"]
    users = values["users"]["users"].get("selected_users") or []
    agenda = values["message"]["message"].get("value") or ""
    return list(users), agenda
