"""Form and request schemas for pool creation."""

from pydantic import BaseModel, ConfigDict, Field

SECONDS_PER_DAY = 24 * 60 * 60


class PoolForm(BaseModel):
    """Raw field values for a new pool, as typed by the user."""

    name: str = ""
    description: str = ""
    external_url: str = ""
    image_hash: str = ""
    target_amount: str = ""
    duration_days: str = ""

    def snapshot(self) -> "PoolForm":
        """Return an independent copy of the current field values."""
        return self.model_copy(deep=True)


class CreatePoolRequest(BaseModel):
    """Payload sent to the contract gateway to create a pool."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    external_url: str = Field(alias="externalUrl")
    image_hash: str = Field(alias="imageHash")
    target_amount: str = Field(alias="targetAmount")
    deadline: int

    @classmethod
    def from_form(cls, form: PoolForm, now: int) -> "CreatePoolRequest":
        """
        Build a request from a validated form.

        Args:
            form: Form snapshot that already passed validation
            now: Current time in unix seconds

        Returns:
            CreatePoolRequest with the deadline computed from the duration
        """
        duration_seconds = int(form.duration_days.strip()) * SECONDS_PER_DAY
        return cls(
            name=form.name,
            description=form.description,
            external_url=form.external_url,
            image_hash=form.image_hash,
            target_amount=form.target_amount.strip(),
            deadline=now + duration_seconds,
        )

    def to_payload(self) -> dict[str, str | int]:
        """Serialize with the wire (camelCase) field names."""
        return self.model_dump(by_alias=True)
