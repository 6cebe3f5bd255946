"""Extraction of generated reports from external backend replies.

The report backend returns ``{"report": "<json text>"}``. The text is usually
valid JSON but is produced by a language model and is sometimes truncated or
wrapped in Markdown fences, so field extraction falls back to one regular
expression per known field.
"""
import json
import logging
import re

from pydantic import ValidationError as PydanticValidationError

from shared.enums import OutcomeKind
from shared.schemas import GeneratedReport, DraftResponse, ReportOutcome

logger = logging.getLogger(__name__)

REPORT_FIELDS = ('title', 'category', 'location', 'description', 'impact')

# "<field>": "<string with escapes>"
FIELD_PATTERNS = {
    field: re.compile(r'"%s"\s*:\s*"((?:[^"\\]|\\.)*)"' % field, re.DOTALL)
    for field in REPORT_FIELDS
}

CODE_FENCE_PATTERN = re.compile(r'^\s*```(?:json)?\s*(.*?)\s*```\s*$', re.DOTALL | re.IGNORECASE)

NO_DATA_MESSAGE = "No report data could be extracted from the response."
DUPLICATE_WARNING = "Heads-up: another report in this spot today."


def strip_code_fence(text):
    match = CODE_FENCE_PATTERN.match(text)
    return match.group(1) if match else text


def _decode_json_string(value):
    try:
        return json.loads(f'"{value}"')
    except json.JSONDecodeError:
        return value


def extract_fields(text):
    """Apply the per-field patterns to a malformed report string.

    Returns:
        dict: Field name to decoded value, for each field that matched
    """
    found = {}
    for field, pattern in FIELD_PATTERNS.items():
        match = pattern.search(text)
        if match:
            found[field] = _decode_json_string(match.group(1))
    return found


def parse_report(raw):
    """Parse a generated report.

    JSON parse first, then regex extraction, then no data.

    Args:
        raw: Report text, an already-decoded dict, or None

    Returns:
        GeneratedReport or None: None when nothing could be extracted
    """
    if raw is None:
        return None

    if isinstance(raw, dict):
        data = {k: raw.get(k) for k in REPORT_FIELDS}
        report = GeneratedReport(**data)
        return None if report.is_empty() else report

    if not isinstance(raw, str) or not raw.strip():
        return None

    text = strip_code_fence(raw.strip())
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        decoded = None

    if isinstance(decoded, dict):
        return parse_report(decoded)

    fields = extract_fields(text)
    if not fields:
        logger.warning(f"Report text could not be parsed: {text[:100]}...")
        return None

    logger.info(f"Recovered {len(fields)} report field(s) from malformed JSON")
    return GeneratedReport(**fields)


def interpret_response(payload):
    """Classify a backend JSON body into a ReportOutcome.

    Recognised shapes are ``{report}``, ``{acknowledgement}``,
    ``{service_request_id}`` and a draft (``complaint_type``).
    """
    if not isinstance(payload, dict):
        return ReportOutcome(kind=OutcomeKind.EMPTY, message=NO_DATA_MESSAGE, raw=payload)

    if 'report' in payload:
        report = parse_report(payload['report'])
        if report is None:
            return ReportOutcome(kind=OutcomeKind.EMPTY, message=NO_DATA_MESSAGE, raw=payload)
        title = report.title or "Report generated"
        return ReportOutcome(kind=OutcomeKind.REPORT, message=title, report=report, raw=payload)

    if payload.get('acknowledgement'):
        return ReportOutcome(
            kind=OutcomeKind.ACKNOWLEDGEMENT,
            message=str(payload['acknowledgement']),
            acknowledgement=str(payload['acknowledgement']),
            raw=payload,
        )

    if payload.get('service_request_id') is not None:
        request_id = payload['service_request_id']
        return ReportOutcome(
            kind=OutcomeKind.SERVICE_REQUEST,
            message=f"Success! 311 SR #: {request_id}",
            service_request_id=request_id,
            raw=payload,
        )

    if 'complaint_type' in payload:
        try:
            draft = DraftResponse(**payload)
        except PydanticValidationError as e:
            logger.warning(f"Draft reply did not match the expected shape: {e}")
            return ReportOutcome(kind=OutcomeKind.EMPTY, message=NO_DATA_MESSAGE, raw=payload)
        warnings = [DUPLICATE_WARNING] if draft.has_duplicates else []
        return ReportOutcome(
            kind=OutcomeKind.DRAFT,
            message=draft.complaint_type or "Draft ready",
            draft=draft,
            warnings=warnings,
            raw=payload,
        )

    return ReportOutcome(kind=OutcomeKind.EMPTY, message=NO_DATA_MESSAGE, raw=payload)
