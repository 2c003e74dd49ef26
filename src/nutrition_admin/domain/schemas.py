"""Validation schemas for entity create/update payloads.

Every payload carries an ``action`` discriminator: ``"create"`` payloads
must not carry an id, ``"update"`` payloads require one. Field names travel
in camelCase on the wire and are exposed as snake_case attributes.
"""

import re
from datetime import datetime
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
)
from pydantic.alias_generators import to_camel

ZERO_TO_9999 = r"^(|0|0\.\d{0,2}|[1-9]\d{0,3}(\.\d{0,2})?)$"

_ZERO_TO_9999_RE = re.compile(ZERO_TO_9999)


def _coerce_str(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    return value


def matches_zero_to_9999(value: str) -> bool:
    """Return True when the value is empty or a number between 0 and 9999."""
    return bool(_ZERO_TO_9999_RE.match(value))


ZeroTo9999 = Annotated[
    str, StringConstraints(pattern=ZERO_TO_9999), BeforeValidator(_coerce_str)
]
RequiredString = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=255),
    BeforeValidator(_coerce_str),
]
NameString = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)
]


class FormModel(BaseModel):
    """Base model for form payloads with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_form(self) -> dict[str, object]:
        """Return the payload as camelCase form values."""
        return self.model_dump(by_alias=True, mode="json")


class CategoryCreate(FormModel):
    action: Literal["create"] = "create"
    name: NameString


class CategoryUpdate(FormModel):
    action: Literal["update"] = "update"
    id: int = Field(ge=1)
    name: NameString


CategorySchema = Annotated[
    CategoryCreate | CategoryUpdate, Field(discriminator="action")
]
category_schema: TypeAdapter[CategoryCreate | CategoryUpdate] = TypeAdapter(
    CategorySchema
)


class ServingUnitCreate(FormModel):
    action: Literal["create"] = "create"
    name: NameString


class ServingUnitUpdate(FormModel):
    action: Literal["update"] = "update"
    id: int = Field(ge=1)
    name: NameString


ServingUnitSchema = Annotated[
    ServingUnitCreate | ServingUnitUpdate, Field(discriminator="action")
]
serving_unit_schema: TypeAdapter[ServingUnitCreate | ServingUnitUpdate] = (
    TypeAdapter(ServingUnitSchema)
)


class FoodServingUnitInput(FormModel):
    """One serving-unit row of the food form."""

    food_serving_unit_id: RequiredString
    grams: ZeroTo9999


class _FoodFields(FormModel):
    name: RequiredString
    calories: ZeroTo9999 = ""
    protein: ZeroTo9999 = ""
    fat: ZeroTo9999 = ""
    carbohydrates: ZeroTo9999 = ""
    fiber: ZeroTo9999 = ""
    sugar: ZeroTo9999 = ""
    category_id: RequiredString
    food_serving_units: list[FoodServingUnitInput] = Field(default_factory=list)


class FoodCreate(_FoodFields):
    action: Literal["create"] = "create"


class FoodUpdate(_FoodFields):
    action: Literal["update"] = "update"
    id: int = Field(ge=1)


FoodSchema = Annotated[FoodCreate | FoodUpdate, Field(discriminator="action")]
food_schema: TypeAdapter[FoodCreate | FoodUpdate] = TypeAdapter(FoodSchema)


class MealFoodInput(FormModel):
    """One food row of the meal form."""

    food_id: RequiredString
    serving_unit_id: RequiredString
    amount: ZeroTo9999


class _MealFields(FormModel):
    user_id: RequiredString
    date_time: datetime
    meal_foods: list[MealFoodInput] = Field(default_factory=list)


class MealCreate(_MealFields):
    action: Literal["create"] = "create"


class MealUpdate(_MealFields):
    action: Literal["update"] = "update"
    id: int = Field(ge=1)


MealSchema = Annotated[MealCreate | MealUpdate, Field(discriminator="action")]
meal_schema: TypeAdapter[MealCreate | MealUpdate] = TypeAdapter(MealSchema)


def category_default_values() -> dict[str, object]:
    """Return blank category form values."""
    return {"action": "create", "name": ""}


def serving_unit_default_values() -> dict[str, object]:
    """Return blank serving unit form values."""
    return {"action": "create", "name": ""}


def food_serving_unit_default_values() -> dict[str, object]:
    """Return a blank serving-unit row."""
    return {"foodServingUnitId": "", "grams": ""}


def food_default_values() -> dict[str, object]:
    """Return blank food form values."""
    return {
        "action": "create",
        "name": "",
        "calories": "",
        "protein": "",
        "fat": "",
        "carbohydrates": "",
        "fiber": "",
        "sugar": "",
        "categoryId": "",
        "foodServingUnits": [],
    }


def meal_food_default_values() -> dict[str, object]:
    """Return a blank meal-food row."""
    return {"foodId": "", "servingUnitId": "", "amount": ""}


def meal_default_values(user_id: object = "") -> dict[str, object]:
    """Return blank meal form values, optionally owned by a user."""
    return {
        "action": "create",
        "userId": "" if user_id is None else str(user_id),
        "dateTime": datetime.now(),
        "mealFoods": [],
    }
