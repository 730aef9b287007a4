"""Calculator settings."""
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CalculatorSettings(BaseModel):
    """
    Validated settings shared by the evaluator, the view-model and the batch runner.

    The instance is frozen so a running calculator cannot have its limits changed underneath it.
    """

    model_config = ConfigDict(frozen=True)

    max_input_length: int = Field(default=24, ge=1, description="Maximum characters kept in the input buffer")
    max_fraction_digits: int = Field(default=10, ge=0, le=20, description="Maximum fraction digits displayed")
    strict_numbers: bool = Field(
        default=False,
        description="Reject numeric literals with more than one decimal point while tokenizing",
    )
    log_level: str = Field(default="WARNING", description="Logging level name")

    @field_validator("log_level")
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalize the level name and ensure logging knows it."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level
