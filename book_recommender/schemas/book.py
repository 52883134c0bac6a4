from pydantic import BaseModel


class BookResponse(BaseModel):
    id: int
    title: str
    authors: str
    publication_year: int | None
    description: str | None = None
    categories: str | None = None
    publisher: str | None = None
    price: str | None = None

    class Config:
        from_attributes = True
