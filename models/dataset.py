from pydantic import AliasChoices, BaseModel, ConfigDict, Field, NonNegativeInt, model_validator
from datetime import date
import logging

logger = logging.getLogger(__name__)

# Key used for a variation without an id (the baseline / "Original").
BASELINE_KEY = "0"


class Variation(BaseModel):
    """One arm of an experiment."""
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    name: str = Field(..., min_length=1, description="Unique display name of the variation.")

    @property
    def key(self) -> str:
        return str(self.id) if self.id is not None else BASELINE_KEY


class DailyRecord(BaseModel):
    """Raw visit/conversion counts for a single calendar day, keyed by variation key."""
    date: date
    visits: dict[str, NonNegativeInt] = Field(default_factory=dict)
    conversions: dict[str, NonNegativeInt] = Field(default_factory=dict)


class Dataset(BaseModel):
    """
    Variations plus their chronological day records.
    The day records are also accepted under the "data" key used by exported chart payloads.
    """
    variations: list[Variation] = Field(..., min_length=1)
    days: list[DailyRecord] = Field(default_factory=list, validation_alias=AliasChoices("days", "data"))

    @model_validator(mode="after")
    def check_structure(self):
        names = [v.name for v in self.variations]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate variation names: {', '.join(duplicates)}")

        keys = [v.key for v in self.variations]
        duplicate_keys = sorted({k for k in keys if keys.count(k) > 1})
        if duplicate_keys:
            raise ValueError(f"duplicate variation keys: {', '.join(duplicate_keys)}")

        for previous, current in zip(self.days, self.days[1:]):
            if current.date <= previous.date:
                raise ValueError(
                    f"day records must be strictly ascending by date: {current.date} follows {previous.date}"
                )

        for day in self.days:
            for key, visits in day.visits.items():
                if day.conversions.get(key, 0) > visits:
                    logger.warning("conversions exceed visits for variation key %s on %s", key, day.date)

        return self

    def variation_names(self) -> list[str]:
        return [v.name for v in self.variations]
