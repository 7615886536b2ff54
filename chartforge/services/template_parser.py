"""
Template parser - extracts chart templates from free-text model responses

Responses may wrap the JSON in prose or Markdown code fences and often carry
trailing commas. Parsing never raises: anything unusable yields an empty list.
"""

import json
import re
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from chartforge.models.schemas import ChartTemplate
from chartforge.utils.errors import TemplateParseError

logger = structlog.get_logger(__name__)

JSON_FENCE = re.compile(r"```json\s*")
ANY_FENCE = re.compile(r"```[\s\S]*?\n")
CLOSING_FENCE = re.compile(r"```\s*$")
TRAILING_COMMA_BRACE = re.compile(r",\s*}")
TRAILING_COMMA_BRACKET = re.compile(r",\s*]")

CLOSERS = {"[": "]", "{": "}"}

PREVIEW_LENGTH = 200


def strip_code_fences(text: str) -> str:
    if "```json" in text:
        text = CLOSING_FENCE.sub("", JSON_FENCE.sub("", text))
    if "```" in text:
        text = CLOSING_FENCE.sub("", ANY_FENCE.sub("", text))
    return text


def balanced_block(text: str, opener: str) -> Optional[str]:
    """The balanced block starting at the first ``opener``, skipping string literals"""
    start = text.find(opener)
    if start < 0:
        return None
    closer = CLOSERS[opener]
    depth = 0
    in_string = False
    escaped = False
    for position in range(start, len(text)):
        char = text[position]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return text[start:position + 1]
    return None


def extract_json_block(text: str) -> str:
    """The first balanced array in the text, else the first balanced object, else the text itself"""
    block = balanced_block(text, "[") or balanced_block(text, "{")
    return block if block is not None else text


def strip_trailing_commas(text: str) -> str:
    return TRAILING_COMMA_BRACKET.sub("]", TRAILING_COMMA_BRACE.sub("}", text)).strip()


def _decode_templates(raw_text: str) -> List[Dict[str, Any]]:
    cleaned = strip_trailing_commas(extract_json_block(strip_code_fences(raw_text)))
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise TemplateParseError(f"Invalid JSON: {e.msg}", details={"position": e.pos}) from e
    except RecursionError as e:
        raise TemplateParseError("JSON nesting too deep") from e

    if isinstance(parsed, dict) and isinstance(parsed.get("chartTemplates"), list):
        parsed = parsed["chartTemplates"]
    if not isinstance(parsed, list):
        raise TemplateParseError(
            "Expected a template array or an object with chartTemplates",
            details={"parsed_type": type(parsed).__name__},
        )
    return [item for item in parsed if isinstance(item, dict)]


def parse_chart_templates(raw_text: Any) -> List[Dict[str, Any]]:
    """
    Parse a model response into raw template mappings.

    Args:
        raw_text: Model output, possibly fenced and surrounded by prose

    Returns:
        Template dicts in response order; empty when nothing usable was found
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        return []
    try:
        templates = _decode_templates(raw_text)
    except TemplateParseError as e:
        logger.warning(
            "Template parsing failed",
            error=e.message,
            details=e.details,
            raw_preview=raw_text[:PREVIEW_LENGTH],
        )
        return []
    logger.debug("Parsed chart templates", template_count=len(templates))
    return templates


def load_chart_templates(raw_text: Any) -> List[ChartTemplate]:
    """Parse and validate templates, skipping any that fail validation"""
    templates = []
    for index, raw in enumerate(parse_chart_templates(raw_text)):
        try:
            templates.append(ChartTemplate.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping invalid chart template", position=index + 1, error_count=e.error_count())
    return templates
