#!/usr/bin/env python3
"""
Label Processor - Extract structured label records from images and PDFs using Claude.

The document is sent together with a fixed instruction prompt and a strict
output schema. Claude is forced to answer through the ``record_labels``
tool, whose input schema is the label list, so the response arrives as
structured JSON rather than free text.

Usage:
    from label_lens.extraction.processor import create_client, extract_label_data

    client = create_client()
    labels = await extract_label_data(staged.data, staged.mime_type, client)
"""

import json
import logging
from typing import Any, List, Optional

import anthropic
from anthropic import AsyncAnthropic

from label_lens.core import config
from label_lens.core.errors import ConfigurationError, ExtractionError
from label_lens.core.schema import LabelRecord
from label_lens.extraction.prompts import LABEL_EXTRACTION_PROMPT, RECORD_LABELS_TOOL

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_MESSAGE = "The AI was unable to parse text from this file."

_CREDENTIAL_MARKERS = ("api_key", "api key", "x-api-key", "authentication")


# =============================================================================
# Client Setup
# =============================================================================

def create_client(api_key: Optional[str] = None) -> AsyncAnthropic:
    """
    Create the async Anthropic client.

    Raises:
        ConfigurationError: If no API key is configured
    """
    api_key = api_key or config.ANTHROPIC_API_KEY
    if not api_key:
        raise ConfigurationError()
    return AsyncAnthropic(api_key=api_key)


# =============================================================================
# Request Building
# =============================================================================

def build_content_block(data: str, mime_type: str) -> dict:
    """Wrap a base64 payload as a document (PDF) or image content block."""
    block_type = "document" if mime_type == "application/pdf" else "image"
    return {
        "type": block_type,
        "source": {
            "type": "base64",
            "media_type": mime_type,
            "data": data,
        },
    }


# =============================================================================
# Response Parsing
# =============================================================================

def extract_json_from_response(response_text: str) -> Any:
    """
    Extract JSON from Claude's response, handling code blocks if present.

    Args:
        response_text: Raw response text from Claude

    Returns:
        Parsed JSON value

    Raises:
        ExtractionError: If JSON cannot be extracted/parsed
    """
    response_text = response_text.strip()

    # If response starts with ```, try to extract JSON from code block
    if response_text.startswith("```"):
        lines = response_text.split("\n")
        json_lines = []
        in_json = False
        for line in lines:
            if line.startswith("```") and not in_json:
                in_json = True
                continue
            elif line.startswith("```") and in_json:
                break
            elif in_json:
                json_lines.append(line)
        response_text = "\n".join(json_lines)

    try:
        return json.loads(response_text)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Failed to parse JSON: {e}")


def parse_label_list(payload: Any) -> List[LabelRecord]:
    """
    Validate the declared array-of-labels structure.

    An empty list is a valid result meaning "no labels found".

    Raises:
        ExtractionError: If the payload is not a list or any entry is invalid
    """
    if isinstance(payload, dict) and "labels" in payload:
        payload = payload["labels"]
    if not isinstance(payload, list):
        raise ExtractionError(
            f"Expected a list of labels, got {type(payload).__name__}"
        )
    return [LabelRecord.from_dict(entry) for entry in payload]


def _response_payload(response: Any) -> Any:
    """Pull the label list out of a Messages API response."""
    if getattr(response, "stop_reason", None) == "max_tokens":
        raise ExtractionError("The response was cut off before all labels were returned.")

    text_parts = []
    for block in response.content:
        if block.type == "tool_use" and block.name == RECORD_LABELS_TOOL["name"]:
            return block.input
        if block.type == "text":
            text_parts.append(block.text)

    response_text = "".join(text_parts)
    if not response_text.strip():
        raise ExtractionError(EMPTY_RESPONSE_MESSAGE)
    return extract_json_from_response(response_text)


def _is_credential_failure(error: Exception) -> bool:
    if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _CREDENTIAL_MARKERS)


# =============================================================================
# Core Processing
# =============================================================================

async def extract_label_data(
    data: str,
    mime_type: str,
    client: AsyncAnthropic,
    model: Optional[str] = None,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
) -> List[LabelRecord]:
    """
    Send one encoded document to Claude and return its labels in order.

    No retries happen here; retrying means calling this again.

    Args:
        data: Base64-encoded file content
        mime_type: Declared media type of the content
        client: Async Anthropic client
        model: Claude model to use (default: config.MODEL_ID)
        max_tokens: Maximum response tokens (default: config.MAX_TOKENS)
        temperature: Sampling temperature (default: config.EXTRACTION_TEMPERATURE)

    Returns:
        Label records, possibly empty

    Raises:
        ConfigurationError: If the service rejects the credentials
        ExtractionError: For any other service failure or unusable response
    """
    logger.info(f"Extracting labels from {mime_type} payload ({len(data)} base64 chars)")

    try:
        response = await client.messages.create(
            model=model or config.MODEL_ID,
            max_tokens=max_tokens or config.MAX_TOKENS,
            temperature=config.EXTRACTION_TEMPERATURE if temperature is None else temperature,
            system=LABEL_EXTRACTION_PROMPT,
            tools=[RECORD_LABELS_TOOL],
            tool_choice={"type": "tool", "name": RECORD_LABELS_TOOL["name"]},
            messages=[
                {
                    "role": "user",
                    "content": [
                        build_content_block(data, mime_type),
                        {
                            "type": "text",
                            "text": "Extract every clothing label in this document.",
                        },
                    ],
                }
            ],
        )
    except anthropic.APIError as e:
        logger.error(f"Label extraction request failed: {e}")
        if _is_credential_failure(e):
            raise ConfigurationError()
        raise ExtractionError(str(e))

    labels = parse_label_list(_response_payload(response))
    logger.info(f"Extracted {len(labels)} label(s)")
    return labels
