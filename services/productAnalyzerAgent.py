import base64
from datetime import date
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langsmith import traceable

from exceptions import ConfigurationError, FieldError, UpstreamError, ValidationError
from interfaces.productModels import SAFETY_RATINGS, ProductAnalysis, validate_analysis_payload
from logger_manager import log_error, log_info
from utils.analysis_utils import parse_model_json, response_text

# Load environment variables
from env import GEMINI_API_KEY, LLM_MODEL_NAME, LLM_TEMPERATURE

# Structured output constraint sent along with every request
PRODUCT_ANALYSIS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "productName": {"type": "string"},
        "category": {"type": "string"},
        "brand": {"type": "string"},
        "keyIngredients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "function": {"type": "string"},
                    "benefits": {"type": "string"},
                    "sideEffects": {"type": "string"},
                    "safetyRating": {"type": "string", "enum": list(SAFETY_RATINGS)},
                },
                "required": ["name", "function", "benefits", "sideEffects", "safetyRating"],
            },
        },
        "usageInstructions": {"type": "string"},
        "warnings": {"type": "string"},
        "expiryDate": {"type": "string"},
        "timeLeft": {"type": "string"},
        "recommendedFor": {"type": "string"},
        "notRecommendedFor": {"type": "string"},
        "userSentiment": {
            "type": "object",
            "properties": {
                "pros": {"type": "array", "items": {"type": "string"}},
                "cons": {"type": "array", "items": {"type": "string"}},
                "reviewSummary": {"type": "string"},
            },
            "required": ["pros", "cons", "reviewSummary"],
        },
    },
    "required": [
        "productName", "category", "brand", "keyIngredients", "usageInstructions",
        "warnings", "recommendedFor", "notRecommendedFor", "userSentiment",
    ],
}


def build_analysis_prompt(today: Optional[date] = None) -> str:
    current_date = (today or date.today()).strftime("%B %d, %Y")
    return f"""You are an expert consumer product analyst with access to scientific and market knowledge.

A user has provided an image of a product package. Extract any text from the image and analyze it.

Based on the text and visual information, do the following:

1. Identify the product name, type, and brand.
2. List all ingredients and describe:
   - What each ingredient is
   - Its benefits
   - Known side effects or health risks
   - Safety rating (safe, caution, warning)
3. Extract:
   - Usage instructions
   - Health warnings
   - Expiry date (if any)
4. Estimate how much time is left to use it (assume today is {current_date})
5. Determine who should or shouldn't use this product
6. Simulate a realistic review summary

Return everything in the exact JSON format specified in the schema."""


def trace_inputs(inputs: Dict[str, Any]) -> Dict[str, Any]:
    """LangSmith gets the image size, never the image bytes."""
    image_bytes = inputs.get("image_bytes") or b""
    return {"mime_type": inputs.get("mime_type"), "image_size": len(image_bytes)}


class ProductImageAnalyzer:
    """Sends one product image to Gemini and returns the validated analysis."""

    def __init__(
        self,
        api_key: Optional[str] = GEMINI_API_KEY,
        model_name: str = LLM_MODEL_NAME,
        temperature: float = LLM_TEMPERATURE,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_llm(self) -> ChatGoogleGenerativeAI:
        return ChatGoogleGenerativeAI(
            google_api_key=self.api_key,
            model=self.model_name,
            temperature=self.temperature,
            response_mime_type="application/json",
            response_schema=PRODUCT_ANALYSIS_RESPONSE_SCHEMA,
        )

    @traceable(name="analyze_product_image", process_inputs=trace_inputs)
    async def analyze_image(self, image_bytes: bytes, mime_type: str) -> ProductAnalysis:
        # fail before any network round-trip when the key is missing
        if not self.is_configured:
            raise ConfigurationError(
                "GEMINI_API_KEY is not configured. Set GEMINI_API_KEY (or GOOGLE_AI_API_KEY) "
                "in your .env file with a key from https://ai.google.dev/"
            )
        if not image_bytes:
            raise ValidationError("Image is empty", [FieldError(field="image", message="No image data")])
        if not mime_type or not mime_type.startswith("image/"):
            raise ValidationError(
                "Only image files are allowed",
                [FieldError(field="image", message=f"Unsupported media type: {mime_type}")],
            )

        prompt = build_analysis_prompt()
        encoded = base64.b64encode(image_bytes).decode("ascii")
        messages = [
            SystemMessage(content=prompt),
            HumanMessage(content=[
                {"type": "image_url", "image_url": f"data:{mime_type};base64,{encoded}"},
                {"type": "text", "text": prompt},
            ]),
        ]

        log_info(f"Sending {len(image_bytes)} byte {mime_type} image to {self.model_name}")
        try:
            llm = self._build_llm()
            llm_response = await llm.ainvoke(messages)
        except Exception as e:
            log_error(f"Error calling Gemini AI: {e}", e)
            raise UpstreamError(f"Failed to analyze product image: {e}") from e

        data = parse_model_json(response_text(llm_response.content))
        result = validate_analysis_payload(data)
        if not result.ok:
            log_error(f"Gemini response failed validation: {[e.field for e in result.errors]}")
        analysis = result.unwrap()
        log_info(f"Analysis complete for product: {analysis.product_name}")
        return analysis
