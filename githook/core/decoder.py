"""RequestDecoder — pulls the repository name out of a webhook body.

The body is URL-encoded form data whose ``payload`` field holds the JSON push
event.  Decoding is pure: the same bytes always give the same name.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs

from pydantic import ValidationError

from githook.core.errors import InvalidJSON, MalformedQuery, MissingPayload
from githook.models.payloads import PushPayload

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_form(body: bytes) -> dict[str, list[str]]:
    """Parse URL-encoded form data strictly.

    Rejects non UTF-8 bodies, invalid percent escapes and ``;`` separators,
    all of which ``parse_qs`` would otherwise accept silently.

    Raises
    ------
    MalformedQuery
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedQuery(f"Unable to parse req: body is not UTF-8 ({exc})") from exc

    match = _BAD_ESCAPE.search(text)
    if match:
        raise MalformedQuery(
            f"Unable to parse req: {text} - invalid URL escape "
            f"{text[match.start():match.start() + 3]!r}"
        )
    if ";" in text:
        raise MalformedQuery(
            f"Unable to parse req: {text} - invalid semicolon separator in query"
        )

    try:
        return parse_qs(text, keep_blank_values=True, errors="strict")
    except (ValueError, UnicodeDecodeError) as exc:
        raise MalformedQuery(f"Unable to parse req: {text} - {exc}") from exc


class RequestDecoder:
    """Decodes webhook bodies into repository names."""

    payload_field = "payload"

    def decode(self, body: bytes) -> str:
        """Return the repository name carried by *body*.

        Raises
        ------
        MalformedQuery
            The body is not URL-encoded form data.
        MissingPayload
            There is no non-empty ``payload`` field.
        InvalidJSON
            The payload is not JSON of the expected shape.
        """
        values = parse_form(body)

        raw = values.get(self.payload_field, [""])[0]
        if not raw:
            raise MissingPayload(
                f"request missing '{self.payload_field}' param: "
                f"{body.decode('utf-8', errors='replace')}"
            )

        try:
            payload = PushPayload.model_validate_json(raw)
        except ValidationError as exc:
            raise InvalidJSON(f"Unable to decode payload json: {raw} - {exc}") from exc

        return payload.repository.name
