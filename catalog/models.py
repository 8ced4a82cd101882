from pydantic import BaseModel, Field


class CatalogSong(BaseModel):
    """A song already known to the catalog, with the names of its artists."""

    id: int
    title: str
    artist_names: list[str] = Field(default_factory=list)
