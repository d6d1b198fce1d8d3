import uuid

from sqlalchemy import BigInteger, CheckConstraint, Column
from sqlmodel import Field, SQLModel

class Tomato(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("price >= 0", name="tomato_price_non_negative"),
    )

    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        primary_key=True,
        max_length=32,
    )
    name: str = Field(index=True)
    variety: str = Field(index=True)
    price: float = Field(index=True)
    description: str | None = Field(default=None)
    in_stock: bool = Field(default=True)

    # epoch milliseconds
    created_at: int = Field(sa_column=Column(BigInteger(), nullable=False))
    updated_at: int = Field(sa_column=Column(BigInteger(), nullable=False))
