from pydantic import BaseModel


class BasePydanticModel(BaseModel):
    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
    }

class FrozenPydanticModel(BasePydanticModel):
    model_config = {
        "frozen": True, # Immutable and hashable; merged with the base config
    }
