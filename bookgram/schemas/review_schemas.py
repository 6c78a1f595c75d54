from bookgram.schemas.base import CamelModel


class ReviewSubmit(CamelModel):
    rating: int
    comment: str = ""
