"""
AI image verification for disaster report photos

Asks a hosted vision model (OpenAI-compatible chat completions API)
whether an attached photo shows a real emergency.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from disaster_response.core.exceptions import (
    ReportValidationError,
    VerificationServiceError,
)

logger = logging.getLogger(__name__)

CONFIDENCE_LEVELS = ("high", "medium", "low")

SYSTEM_PROMPT = """You are a disaster verification expert for the Indian Disaster Response System. Your job is to analyze images submitted with disaster reports and determine if they show a legitimate emergency situation.

IMPORTANT: Lives depend on accurate assessment. Be thorough but also understand that during emergencies, image quality may be poor.

Analyze the image for:
1. Does it show signs of a disaster or emergency (flooding, fire, collapsed structures, accidents, etc.)?
2. Does the image appear to be a real photograph (not AI-generated, stock photo, or screenshot from movies/games)?
3. Is the image relevant to the reported disaster type: "{disaster_type}"?

Respond ONLY with a JSON object in this exact format:
{{
  "isLegitimate": true/false,
  "confidence": "high"/"medium"/"low",
  "reason": "Brief explanation in 1-2 sentences",
  "warnings": ["any concerns or notes"]
}}"""

USER_PROMPT = (
    "Please analyze this disaster report image and verify if it shows "
    "a legitimate emergency situation."
)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


@dataclass
class VerificationResult:
    """Verdict on one image."""
    is_legitimate: bool
    confidence: str = "low"
    reason: str = ""
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VerificationResult":
        confidence = str(data.get("confidence", "low")).lower()
        if confidence not in CONFIDENCE_LEVELS:
            confidence = "low"
        warnings = data.get("warnings") or []
        if isinstance(warnings, str):
            warnings = [warnings]

        return cls(
            is_legitimate=bool(data.get("isLegitimate", False)),
            confidence=confidence,
            reason=str(data.get("reason", "")),
            warnings=[str(w) for w in warnings],
        )

    @classmethod
    def soft_pass(cls, reason: str, warning: str) -> "VerificationResult":
        """Allow the report through with low confidence."""
        return cls(is_legitimate=True, confidence="low", reason=reason, warnings=[warning])

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "isLegitimate": self.is_legitimate,
            "confidence": self.confidence,
            "reason": self.reason,
        }
        if self.warnings:
            data["warnings"] = self.warnings
        return data


def parse_reply(content: str) -> VerificationResult:
    """
    Extract the verdict from the model's reply.

    The model may wrap its JSON in prose or markdown fences. A reply with
    no parseable JSON object is treated as a low-confidence pass.
    """
    match = _JSON_OBJECT.search(content or "")
    if match:
        try:
            data = json.loads(match.group(0))
            if isinstance(data, dict):
                return VerificationResult.from_dict(data)
        except ValueError as e:
            logger.warning(f"Failed to parse AI response: {e}")
    else:
        logger.warning("No JSON found in AI response")

    return VerificationResult.soft_pass(
        "Unable to fully verify image, proceeding with caution",
        "Manual verification recommended",
    )


def to_data_url(image_base64: str) -> str:
    """Wrap raw base64 in a JPEG data URL unless it already is one."""
    if image_base64.startswith("data:"):
        return image_base64
    return f"data:image/jpeg;base64,{image_base64}"


class ImageVerifier:
    """
    Client for the AI vision verification service.

    Example:
        >>> verifier = ImageVerifier(api_key="key")
        >>> result = verifier.verify_or_allow(photo_b64, "flood")
        >>> result.is_legitimate
    """

    def __init__(
        self,
        api_key: Optional[str],
        url: str = "https://ai.gateway.lovable.dev/v1/chat/completions",
        model: str = "google/gemini-2.5-flash",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self._client.close()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_payload(self, image_base64: str, disaster_type: Optional[str]) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": SYSTEM_PROMPT.format(disaster_type=disaster_type or "unspecified"),
                },
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": USER_PROMPT},
                        {"type": "image_url", "image_url": {"url": to_data_url(image_base64)}},
                    ],
                },
            ],
        }

    def verify(self, image_base64: str, disaster_type: Optional[str] = None) -> VerificationResult:
        """
        Verify an image.

        Args:
            image_base64: Base64 image data or a data URL
            disaster_type: Reported disaster type, if known

        Returns:
            VerificationResult

        Raises:
            ReportValidationError: If no image was given
            VerificationServiceError: If the service is unconfigured or fails
        """
        if not image_base64:
            raise ReportValidationError("No image provided")
        if not self.is_configured:
            raise VerificationServiceError("AI service not configured")

        try:
            response = self._client.post(
                self.url,
                json=self._build_payload(image_base64, disaster_type),
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"AI verification request failed: {e}")
            raise VerificationServiceError("Verification service unavailable") from e

        if response.status_code == 429:
            logger.error("AI verification rate limited")
            raise VerificationServiceError("Service busy, please try again")
        if response.is_error:
            logger.error(f"AI API error: {response.status_code} {response.text[:200]}")
            raise VerificationServiceError("Verification service unavailable")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError):
            content = ""

        logger.debug(f"AI response: {content}")
        result = parse_reply(content)
        logger.info(
            f"Image verification: legitimate={result.is_legitimate}, "
            f"confidence={result.confidence}"
        )
        return result

    def verify_or_allow(
        self,
        image_base64: str,
        disaster_type: Optional[str] = None
    ) -> VerificationResult:
        """Verify, turning service failures into a low-confidence pass."""
        try:
            return self.verify(image_base64, disaster_type)
        except VerificationServiceError as e:
            logger.warning(f"Image verification unavailable, allowing report: {e}")
            return VerificationResult.soft_pass(
                "Image could not be verified, proceeding without AI check",
                f"AI verification unavailable: {e}",
            )
