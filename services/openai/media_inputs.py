"""Utilities to build multimodal input payloads for the Responses API."""

from typing import Any, Dict, List, Sequence

from services.openai.prompts import EMPTY_REQUEST_PLACEHOLDER


def to_image_data_url(base64_payload: str, mime_type: str) -> str:
    """Rebuild a data URL suitable for vision input from a bare payload."""
    if not base64_payload:
        raise ValueError("Image payload must not be empty.")
    return f"data:{mime_type};base64,{base64_payload}"


def build_user_content(notes: str, images: Sequence[Dict[str, str]]) -> List[Dict[str, Any]]:
    """Compose the user content: every image in order, then the notes.

    Falls back to a placeholder text when there are neither notes nor images,
    so the model never receives an empty request.
    """
    content: List[Dict[str, Any]] = []
    for image in images:
        content.append(
            {
                "type": "input_image",
                "image_url": to_image_data_url(image["base64"], image["mimeType"]),
            }
        )

    if notes:
        content.append({"type": "input_text", "text": notes})
    elif not content:
        content.append({"type": "input_text", "text": EMPTY_REQUEST_PLACEHOLDER})
    return content


def build_inputs(system_prompt: str, notes: str, images: Sequence[Dict[str, str]]) -> List[Dict[str, Any]]:
    """Build the Responses API input array."""
    return [
        {
            "type": "message",
            "role": "system",
            "content": [{"type": "input_text", "text": system_prompt}],
        },
        {"type": "message", "role": "user", "content": build_user_content(notes, images)},
    ]
