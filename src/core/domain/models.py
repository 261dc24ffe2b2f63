"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- AI output is untrusted JSON; validation decides whether a step can go on.
- The automation library's responses are normalized into a single shape.

Two groups live here:
- the transient records built from AI output (order, element ids, news digest);
- the automation DTOs the adapter normalizes the client library's responses into.

All models accept camelCase keys (what the prompts speak) as well as
snake_case field names (what the adapter produces).
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class OrderedArticle(BaseModel):
    """One line item of an order."""

    model_config = _CAMEL

    article_name: str = Field(
        ...,
        min_length=1,
        description="Article name as written in the email.",
    )
    quantity: float = Field(
        ...,
        ge=0,
        description="Ordered quantity.",
    )
    price_per_unit: float = Field(
        ...,
        ge=0,
        description="Unit price.",
    )

    def quantity_text(self) -> str:
        if self.quantity.is_integer():
            return str(int(self.quantity))
        return str(self.quantity)

    def price_text(self) -> str:
        return f"{self.price_per_unit:.2f}"


class Order(BaseModel):
    """Order extracted from an email screenshot.

    Built once from AI output and consumed once by the ERP data entry.
    """

    model_config = _CAMEL

    customer_name: str = Field(
        ...,
        min_length=1,
        description="Customer the order belongs to.",
    )
    ordered_articles: list[OrderedArticle] = Field(
        default_factory=list,
        description="Line items in the order they appear in the email.",
    )


class ErpElementIds(BaseModel):
    """Mapping from logical ERP form fields to automation element ids."""

    model_config = _CAMEL

    element_id_customer_name: str = Field(..., min_length=1)
    element_id_article_name: str = Field(..., min_length=1)
    element_id_quantity: str = Field(..., min_length=1)
    element_id_price_per_unit: str = Field(..., min_length=1)
    element_id_add_item_button: str = Field(..., min_length=1)
    element_id_save_order_button: str = Field(..., min_length=1)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_numeric_ids(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class NewsDigest(BaseModel):
    """Summary of the collected timeline text."""

    model_config = _CAMEL

    summary_bullet_points: list[str] = Field(default_factory=list)
    breaking_news_probability_in_percent: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="How likely it is that big breaking news happened within the last hour.",
    )


class ActionResult(BaseModel):
    """Generic status/message answer of a UI action."""

    model_config = _CAMEL

    success: bool = True
    message: str | None = None
    result_value: str | None = None

    @property
    def is_error(self) -> bool:
        return bool(self.message and self.message.startswith("Error"))


class Screenshot(BaseModel):
    model_config = _CAMEL

    success: bool = False
    image_base64: str | None = Field(
        default=None,
        validation_alias=AliasChoices("image_base64", "imageBase64", "base64Image", "base64_image"),
    )
    message: str | None = None


class WindowInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = ""
    title: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if value is None:
            return ""
        return str(value)


class WindowDetails(WindowInfo):
    """A window with its automation tree.

    Unknown keys are kept so the whole tree can be handed to the AI as JSON.
    """

    user_interface_elements: Any = None

    @model_validator(mode="before")
    @classmethod
    def _lift_window_info(cls, data: Any) -> Any:
        # The server nests id and title under `window`.
        if isinstance(data, dict) and isinstance(data.get("window"), dict):
            window = data["window"]
            data = {**data}
            for key in ("id", "title"):
                if data.get(key) is None and window.get(key) is not None:
                    data[key] = window[key]
        return data

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2, exclude_none=True)


class FocusInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    focused_element_parent_window: WindowDetails | None = None


class Overview(BaseModel):
    """System overview: open windows plus the focused window's tree."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    windows: list[WindowInfo] = Field(default_factory=list)
    focus_info: FocusInfo | None = None

    @property
    def focused_window(self) -> WindowDetails | None:
        if self.focus_info is None:
            return None
        return self.focus_info.focused_element_parent_window
