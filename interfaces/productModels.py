from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from exceptions import FieldError, ValidationError

SafetyRating = Literal["safe", "caution", "warning"]
SAFETY_RATINGS = ("safe", "caution", "warning")


class CamelModel(BaseModel):
    """Wire names are camelCase, attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ProductIngredient(FrozenCamelModel):
    name: StrictStr
    function: StrictStr
    benefits: StrictStr
    side_effects: StrictStr
    safety_rating: SafetyRating = "safe"


class UserSentiment(FrozenCamelModel):
    pros: List[StrictStr]
    cons: List[StrictStr]
    review_summary: StrictStr


class ProductAnalysis(CamelModel):
    """Shape of one analysis reply from the model."""

    product_name: StrictStr
    category: StrictStr
    brand: StrictStr
    key_ingredients: List[ProductIngredient]
    usage_instructions: StrictStr
    warnings: StrictStr
    expiry_date: Optional[StrictStr] = None
    time_left: Optional[StrictStr] = None
    recommended_for: StrictStr
    not_recommended_for: StrictStr
    user_sentiment: UserSentiment


class ProductInsert(FrozenCamelModel):
    """A Product before Storage assigns `id` and `createdAt`."""

    name: StrictStr
    brand: StrictStr
    category: StrictStr
    ingredients: List[ProductIngredient]
    usage_instructions: StrictStr
    warnings: StrictStr
    expiry_date: Optional[StrictStr] = None
    time_left: Optional[StrictStr] = None
    recommended_for: StrictStr
    not_recommended_for: StrictStr
    user_sentiment: UserSentiment
    image_url: Optional[StrictStr] = None


class Product(ProductInsert):
    id: int = Field(..., gt=0)
    created_at: datetime


class AnalyzeFailure(BaseModel):
    error: str
    filename: Optional[str] = None


class AnalyzeResponse(BaseModel):
    results: List[Union[Product, AnalyzeFailure]]


class CompareRequest(CamelModel):
    product_ids: List[StrictInt]


class CompareResponse(BaseModel):
    products: List[Product]


class MessageResponse(BaseModel):
    message: str


@dataclass
class ValidationResult:
    """Outcome of a decode-then-validate step: a value or itemized errors."""

    value: Optional[ProductAnalysis] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors

    def unwrap(self) -> ProductAnalysis:
        if not self.ok:
            raise ValidationError("Product analysis does not match the expected shape", self.errors)
        return self.value


def field_errors_from(exc: PydanticValidationError) -> List[FieldError]:
    errors = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "$"
        errors.append(FieldError(field=path, message=error["msg"]))
    return errors


def validate_analysis_payload(data: Any) -> ValidationResult:
    """Validate a decoded AI reply against ProductAnalysis without raising."""
    if not isinstance(data, dict):
        return ValidationResult(errors=[FieldError(field="$", message="Expected a JSON object")])
    try:
        return ValidationResult(value=ProductAnalysis.model_validate(data))
    except PydanticValidationError as e:
        return ValidationResult(errors=field_errors_from(e))


def validate_insert_payload(data: Union[ProductInsert, dict]) -> ProductInsert:
    """Validate a Product insert payload, raising ValidationError on failure."""
    if isinstance(data, ProductInsert) and not isinstance(data, Product):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude={"id", "created_at"})
    if not isinstance(data, dict):
        raise ValidationError("Invalid product payload", [FieldError(field="$", message="Expected an object")])
    try:
        return ProductInsert.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError("Invalid product payload", field_errors_from(e)) from e


def analysis_to_insert(analysis: ProductAnalysis) -> ProductInsert:
    # uploaded images are not retained, so image_url stays empty
    return ProductInsert(
        name=analysis.product_name,
        brand=analysis.brand,
        category=analysis.category,
        ingredients=list(analysis.key_ingredients),
        usage_instructions=analysis.usage_instructions,
        warnings=analysis.warnings,
        expiry_date=analysis.expiry_date or None,
        time_left=analysis.time_left or None,
        recommended_for=analysis.recommended_for,
        not_recommended_for=analysis.not_recommended_for,
        user_sentiment=analysis.user_sentiment,
        image_url=None,
    )
