from pydantic import BaseModel, ConfigDict, Field


class DiffRange(BaseModel):
    """Inclusive line interval of the new file version touched by a hunk."""
    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=1)
    end: int = Field(ge=1)

    def contains(self, line: int) -> bool:
        return self.start <= line <= self.end
