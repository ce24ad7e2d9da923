"""Commission sheet scanning domain service."""

import base64
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from commtrack.domain.entities import resolve_field_name
from commtrack.domain.errors import ScanError

logger = logging.getLogger(__name__)

IMAGE_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
}

EXTRACTION_PROMPT = """You are a real estate commission sheet parser. Extract transaction data from commission sheets (KW, BDH, etc.) and return it as JSON.

Your response must be ONLY valid JSON with these exact fields (use null for missing values):
{
  "transactionType": "Sale" | "Referral Out" | "Referral In",
  "propertyType": "Residential" | "Commercial" | "Land",
  "clientType": "Buyer" | "Seller",
  "address": string,
  "city": string,
  "listPrice": number,
  "closedPrice": number,
  "listDate": "YYYY-MM-DD",
  "closingDate": "YYYY-MM-DD",
  "brokerage": "KW" | "BDH",
  "commissionPct": number,
  "gci": number,
  "referralPct": number,
  "referralDollar": number,
  "adjustedGci": number,
  "totalBrokerageFees": number,
  "nci": number,
  "status": "Closed" | "Pending" | "Active",
  "referringAgent": string,
  "referralFeeReceived": number,
  "confidence": number (0-100, your confidence in the extraction)
}

Detection rules:
- A sheet marked as a referral, or a flat fee with no price calculation, is "Referral Out"
- A commission under 1% on a property sale is "Referral In"
- Anything else is "Sale"
- Look for "Referring Agent" or "Referring Agents" fields
- KW sheets list Royalty and Company Dollar among the brokerage fees
- BDH sheets show a 6% pre-split deduction
- Extract all monetary values as plain numbers (no $ or commas)
- Return dates in YYYY-MM-DD format"""

USER_INSTRUCTION = (
    "Extract all transaction data from this commission sheet. "
    "Return ONLY the JSON object, no other text."
)

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class VisionClient(Protocol):
    """Hosted vision model that answers a prompt about one image."""

    def read_document(self, system_prompt: str, instruction: str, image_url: str) -> str:
        """Return the model's text reply."""
        ...


@dataclass(frozen=True)
class ScanCandidate:
    """Partially filled transaction read off a document.

    Attributes:
        fields: Attribute name to raw value, for the fields that were found
        confidence: Model's confidence in the extraction, 0-100
    """

    fields: dict[str, Any] = field(default_factory=dict)
    confidence: int = 0


def _clamp_confidence(value: Any) -> int:
    try:
        confidence = round(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, confidence))


def _first_object(text: str) -> dict[str, Any]:
    """Decode the first JSON object in text, skipping braces in prose."""
    decoder = json.JSONDecoder()
    error = None
    start = text.find("{")
    while start != -1:
        try:
            data, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError as e:
            error = error or e
        else:
            if isinstance(data, dict):
                return data
        start = text.find("{", start + 1)
    if error is not None:
        raise ScanError(f"Failed to parse extracted data: {error}")
    raise ScanError("Scan reply did not contain a JSON object")


def parse_scan_reply(content: str) -> ScanCandidate:
    """Parse a vision model reply into a scan candidate.

    Markdown code fences and surrounding prose are tolerated; the first JSON
    object in the reply is used. Null values and unknown names are dropped.

    Args:
        content: Model reply text

    Returns:
        ScanCandidate with attribute names as keys

    Raises:
        ScanError: If the reply holds no JSON object
    """
    if not content or not content.strip():
        raise ScanError("Scan returned an empty reply")

    text = _FENCE.sub("", content)
    data = _first_object(text)

    confidence = _clamp_confidence(data.pop("confidence", None))
    fields = {}
    for name, value in data.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        attr = resolve_field_name(name)
        if attr is None:
            logger.debug("Dropping unknown scan field '%s'", name)
            continue
        fields[attr] = value

    return ScanCandidate(fields=fields, confidence=confidence)


def encode_image(path: Path) -> str:
    """Read an image file into a base64 data URL.

    Raises:
        ScanError: If the file type is not supported or it cannot be read
    """
    mime_type = IMAGE_TYPES.get(path.suffix.lower())
    if mime_type is None:
        supported = ", ".join(sorted(IMAGE_TYPES))
        raise ScanError(
            f"Unsupported file type '{path.suffix}'. Supported: {supported}. "
            "Convert PDFs to an image first."
        )
    try:
        payload = base64.b64encode(path.read_bytes()).decode("ascii")
    except OSError as e:
        raise ScanError(f"Cannot read {path}: {e}") from e
    return f"data:{mime_type};base64,{payload}"


class DocumentScanService:
    """Service for reading transaction candidates off commission sheets."""

    def __init__(self, client: VisionClient):
        """Initialize scan service.

        Args:
            client: Vision model client
        """
        self.client = client

    def scan_file(self, path: str | Path) -> ScanCandidate:
        """Scan a commission sheet image.

        Args:
            path: Path to a JPG, PNG or WebP image

        Returns:
            ScanCandidate with the fields found on the sheet

        Raises:
            ScanError: If the image cannot be read or the reply cannot be parsed
        """
        path = Path(path)
        image_url = encode_image(path)
        logger.info("Scanning commission sheet %s", path.name)
        reply = self.client.read_document(EXTRACTION_PROMPT, USER_INSTRUCTION, image_url)
        candidate = parse_scan_reply(reply)
        logger.info(
            "Scan of %s found %d fields (confidence %d)",
            path.name,
            len(candidate.fields),
            candidate.confidence,
        )
        return candidate
