"""Filter schemas for food and meal listings."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nutrition_admin.domain.schemas import ZeroTo9999

SortBy = Literal["name", "calories", "protein", "carbohydrates", "fat"]
SortOrder = Literal["asc", "desc"]

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

FOOD_FILTERS_DEFAULT_VALUES: dict[str, object] = {
    "searchTerm": "",
    "caloriesRange": ["0", "9999"],
    "proteinRange": ["0", "9999"],
    "categoryId": "",
    "sortBy": "name",
    "sortOrder": "desc",
    "pageSize": 12,
    "page": 1,
}


class FoodFilters(BaseModel):
    """Validated food list filters, including pagination."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    search_term: str
    calories_range: tuple[ZeroTo9999, ZeroTo9999]
    protein_range: tuple[ZeroTo9999, ZeroTo9999]
    category_id: str
    sort_by: SortBy | None = None
    sort_order: SortOrder | None = None
    page: int = Field(ge=1)
    page_size: int = Field(ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE)

    def to_form(self) -> dict[str, object]:
        """Return the filters as raw form values."""
        values = self.model_dump(by_alias=True)
        values["caloriesRange"] = list(self.calories_range)
        values["proteinRange"] = list(self.protein_range)
        return values

    def to_query_params(self) -> dict[str, object]:
        """Return the filters as flat query-string parameters."""
        params: dict[str, object] = {
            "searchTerm": self.search_term,
            "caloriesMin": self.calories_range[0],
            "caloriesMax": self.calories_range[1],
            "proteinMin": self.protein_range[0],
            "proteinMax": self.protein_range[1],
            "categoryId": self.category_id,
            "page": self.page,
            "pageSize": self.page_size,
        }
        if self.sort_by:
            params["sortBy"] = self.sort_by
        if self.sort_order:
            params["sortOrder"] = self.sort_order
        return params


def default_food_filters() -> FoodFilters:
    """Return the default filters, already validated."""
    return FoodFilters.model_validate(FOOD_FILTERS_DEFAULT_VALUES)


class MealFilters(BaseModel):
    """Validated meal list filters: the day to show."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    date_time: datetime

    def to_query_params(self) -> dict[str, object]:
        """Return the filters as query-string parameters."""
        return {"dateTime": self.date_time.isoformat()}


def default_meal_filters() -> MealFilters:
    """Return filters for the current day."""
    return MealFilters(date_time=datetime.now())
