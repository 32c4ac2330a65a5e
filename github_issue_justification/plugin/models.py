"""Request and response models exchanged with the justification host."""

from pydantic import BaseModel, ConfigDict, Field


class Justification(BaseModel):
    """A caller supplied claim offered to authorize a privileged action."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(..., description="Justification category, e.g. 'github'")
    value: str = Field(..., description="Category specific value, e.g. an issue URL")


class ValidationResponse(BaseModel):
    """Result of validating a justification.

    ``annotations`` is only populated when ``valid`` is true and ``errors`` is
    only populated when it is false.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool = Field(..., description="Whether the justification is accepted")
    annotations: dict[str, str] = Field(
        default_factory=dict, description="Audit facts about the accepted issue"
    )
    errors: list[str] = Field(
        default_factory=list, description="Reasons the justification was rejected"
    )

    @classmethod
    def invalid(cls, message: str) -> "ValidationResponse":
        """Build a negative verdict carrying a single reason."""
        return cls(valid=False, errors=[message])


class UIData(BaseModel):
    """Static display strings for the host UI."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    hint: str
