"""
SQLAlchemy table for books.
Uniqueness of ISBN and of the (title, author) pair is enforced here, by the store.
"""

from sqlalchemy import Column, Date, Integer, Numeric, String, UniqueConstraint

from utilities.database import Base


class BookRow(Base):
    __tablename__ = "books"
    __table_args__ = (
        UniqueConstraint("title", "author", name="uq_books_title_author"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    isbn = Column(String(13), nullable=False, unique=True, index=True)
    published_date = Column(Date, nullable=False, index=True)
    price = Column(Numeric(10, 2, asdecimal=True), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)

    MUTABLE_FIELDS = ("title", "author", "isbn", "published_date", "price", "quantity")

    def __repr__(self) -> str:
        return f"<BookRow id={self.id} isbn={self.isbn!r}>"
