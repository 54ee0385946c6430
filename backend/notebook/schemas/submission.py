"""
Notebook Backend — Form Submissions
====================================

What:  Parses a posted form against a Pydantic schema into a `Submission`.
Who:   Every action (profile edit, note editor, login).

A submission is what an action sends back when it does not redirect:

    {
        "intent": "submit",
        "payload": {"username": "Kody", "email": "not-an-email"},
        "error": {"email": ["Email is invalid"]},
        "value": null
    }

Rules:
    - `__intent__` selects the intent; anything other than "submit"
      (for example "validate/username") only validates.
    - Empty strings are treated as missing fields, so optional inputs left
      blank validate as absent and required ones report "Required".
    - `error` keys are the form field names; "" holds form-level messages.
    - `value` is the normalized data, or None as soon as any error exists.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

INTENT_FIELD = "__intent__"
SUBMIT_INTENT = "submit"
FORM_ERROR = ""

# pydantic error types whose default wording is replaced for form display
_MESSAGES = {
    "missing": "Required",
    "string_type": "Expected string",
}

FormModel = TypeVar("FormModel", bound=BaseModel)


class Submission(BaseModel):
    intent: str = Field(default=SUBMIT_INTENT, description="Submit or a validate/<field> intent")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Fields as submitted")
    error: Dict[str, List[str]] = Field(
        default_factory=dict, description="Field name → messages; '' for form-level"
    )
    value: Optional[Dict[str, Any]] = Field(
        default=None, description="Validated data, null when the submission has errors"
    )

    @property
    def is_submit(self) -> bool:
        return self.intent == SUBMIT_INTENT

    def add_error(self, field: str, message: str) -> None:
        self.error.setdefault(field, []).append(message)
        self.value = None

    def drop_fields(self, *names: str, from_payload: bool = True, from_value: bool = True) -> None:
        """Removes fields (passwords, mostly) before the submission is echoed back."""
        for name in names:
            if from_payload:
                self.payload.pop(name, None)
            if from_value and self.value is not None:
                self.value.pop(name, None)


class ActionResponse(BaseModel):
    """Body of a non-redirect action response: idle (200) or error (400)."""
    status: Literal["idle", "error"]
    submission: Submission


@dataclass
class ActionResult:
    """
    Outcome of an action, before it is turned into an HTTP response.

    status:       "idle" (validate-only round trip), "error" or "success"
    redirect_to:  set only on success
    """
    status: Literal["idle", "error", "success"]
    submission: Submission
    redirect_to: Optional[str] = None


def parse_submission(
    form: Mapping[str, Any],
    schema: Type[FormModel],
) -> Tuple[Submission, Optional[FormModel]]:
    """
    Validates `form` against `schema`.

    Returns the submission together with the parsed model instance, which
    is None when the base schema rejected the input. Callers run their
    database refinements only when the model is present.
    """
    intent = form.get(INTENT_FIELD) or SUBMIT_INTENT
    payload = {
        key: value
        for key, value in form.items()
        if key != INTENT_FIELD and isinstance(value, str)
    }
    data = {key: value for key, value in payload.items() if value != ""}

    submission = Submission(intent=str(intent), payload=payload)
    try:
        model = schema.model_validate(data)
    except PydanticValidationError as exc:
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else FORM_ERROR
            submission.add_error(field, _MESSAGES.get(err["type"], err["msg"]))
        return submission, None

    submission.value = model.model_dump(by_alias=True, mode="json", exclude_none=True)
    return submission, model
