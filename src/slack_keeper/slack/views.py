"""Block Kit view for the create-task modal.

Block and action ids here are the ones ``handlers.parse_submission`` reads
back from ``view.state.values``.
"""

CREATE_TASK_CALLBACK = "create_keeper_task"
CLIENT_ACTION = "client_action"
ASSIGNEE_ACTION = "assignee_action"

# Slack rejects plain_text_input initial values over 3000 characters.
MAX_INITIAL_VALUE = 3000


def _plain(text: str) -> dict:
    return {"type": "plain_text", "text": text}


def _input(block_id: str, label: str, element: dict, optional: bool = False) -> dict:
    block = {"type": "input", "block_id": block_id, "label": _plain(label), "element": element}
    if optional:
        block["optional"] = True
    return block


def build_task_modal(description: str, private_metadata: str) -> dict:
    """Build the "Send to Keeper" modal with the description prefilled.

    Client and assignee pickers are external selects served by the
    block_suggestion handler.
    """
    return {
        "type": "modal",
        "callback_id": CREATE_TASK_CALLBACK,
        "private_metadata": private_metadata,
        "title": _plain("Send to Keeper"),
        "submit": _plain("Create Task"),
        "close": _plain("Cancel"),
        "blocks": [
            _input(
                "client_block",
                "Select Client",
                {
                    "type": "external_select",
                    "action_id": CLIENT_ACTION,
                    "min_query_length": 0,
                    "placeholder": _plain("Pick a client"),
                },
            ),
            _input(
                "assignee_block",
                "Assign To",
                {
                    "type": "external_select",
                    "action_id": ASSIGNEE_ACTION,
                    "min_query_length": 0,
                    "placeholder": _plain("Pick a user"),
                },
                optional=True,
            ),
            _input(
                "task_title_block",
                "Task Title",
                {"type": "plain_text_input", "action_id": "task_title_action"},
                optional=True,
            ),
            _input(
                "description_block",
                "Description",
                {
                    "type": "plain_text_input",
                    "action_id": "description_action",
                    "multiline": True,
                    "initial_value": description[:MAX_INITIAL_VALUE],
                },
                optional=True,
            ),
            _input(
                "due_date_block",
                "Due Date",
                {
                    "type": "datepicker",
                    "action_id": "due_date_action",
                    "placeholder": _plain("Select a date"),
                },
                optional=True,
            ),
        ],
    }
