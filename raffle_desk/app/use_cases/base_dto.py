from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """DTO base - serialized with camelCase keys in the response envelope"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
