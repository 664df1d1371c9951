"""Category listing request."""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ....config.constants import SortMode
from ....core.exceptions import InvalidCategoryError

_TRUTHY = {"1", "true", "yes", "on"}


class TopicListQuery(BaseModel):
    """Parameters of a category topic listing.

    ``instructor`` and ``resolved`` arrive from the API layer as boolean
    strings (``"1"``); anything not truthy means the filter is off.
    Paging values are lenient: a negative or unparseable ``start`` reads as
    0 and an unparseable ``stop`` falls back to the default page.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    cid: int
    uid: Optional[int] = 0
    start: int = Field(default=0, ge=0)
    stop: int = Field(default=19)
    sort: SortMode = SortMode.RECENTLY_REPLIED
    instructor: bool = False
    resolved: bool = False

    @field_validator("instructor", "resolved", mode="before")
    @classmethod
    def _boolean_string(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in _TRUTHY

    @field_validator("sort", mode="before")
    @classmethod
    def _default_sort(cls, value: Any) -> Any:
        if not value:
            return SortMode.RECENTLY_REPLIED
        try:
            return SortMode(value)
        except ValueError:
            return SortMode.RECENTLY_REPLIED

    @field_validator("start", mode="before")
    @classmethod
    def _clamp_start(cls, value: Any) -> int:
        try:
            return max(int(value or 0), 0)
        except (TypeError, ValueError):
            return 0

    @field_validator("stop", mode="before")
    @classmethod
    def _default_stop(cls, value: Any) -> int:
        if value is None or value == "":
            return 19
        try:
            return int(value)
        except (TypeError, ValueError):
            return 19

    @field_validator("uid", mode="before")
    @classmethod
    def _guest_uid(cls, value: Any) -> int:
        try:
            return max(int(value or 0), 0)
        except (TypeError, ValueError):
            return 0

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "TopicListQuery":
        """Build from raw request parameters.

        Raises:
            InvalidCategoryError: ``cid`` missing or not an integer
        """
        try:
            return cls.model_validate(dict(params))
        except PydanticValidationError as e:
            raise InvalidCategoryError(details={"cid": params.get("cid"), "errors": e.errors()}) from None
