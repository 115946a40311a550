from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    # Decimal degrees; range is not checked.
    lat: float = 0.0
    lon: float = 0.0


class Post(BaseModel):
    """A geo-tagged post as stored in the search index.

    ``media_url`` is serialized as ``url`` and stays empty when the post
    carries no image. Missing fields decode to empty values; only
    mistyped fields are rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    user: str = ""
    message: str = ""
    location: Location = Field(default_factory=Location)
    media_url: str = Field(default="", alias="url")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class PostCreated(BaseModel):
    Status: str = "succeed"
    Message: str
